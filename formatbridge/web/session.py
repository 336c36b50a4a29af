"""Drive conversions against a caller-supplied workbench panel.

The panel is whatever holds the editor state (a browser form, a request
body, a test double). Session functions read it through the accessor
methods below and never touch any other state.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from formatbridge.converter.converter import ConversionFormat, ConversionRequest, DataConverter
from formatbridge.share_link.state import ShareState
from shared.logger import get_logger

logger = get_logger(__name__)


class WorkbenchPanel(Protocol):
    """Accessor ports for the two-pane converter UI."""

    def get_source_text(self) -> str: ...

    def get_source_format(self) -> ConversionFormat: ...

    def get_target_format(self) -> ConversionFormat: ...

    def get_csv_has_header(self) -> bool: ...

    def set_result_text(self, text: str) -> None: ...

    def show_error(self, message: Optional[str]) -> None: ...

    def set_source_text(self, text: str) -> None: ...

    def set_source_format(self, format: ConversionFormat) -> None: ...

    def set_target_format(self, format: ConversionFormat) -> None: ...


@dataclass
class Workbench:
    """In-memory panel used by the web API and tests."""

    source_text: str = ""
    source_format: ConversionFormat = ConversionFormat.JSON
    target_format: ConversionFormat = ConversionFormat.YAML
    csv_has_header: bool = True
    result_text: str = ""
    error: Optional[str] = None

    def get_source_text(self) -> str:
        return self.source_text

    def get_source_format(self) -> ConversionFormat:
        return self.source_format

    def get_target_format(self) -> ConversionFormat:
        return self.target_format

    def get_csv_has_header(self) -> bool:
        return self.csv_has_header

    def set_result_text(self, text: str) -> None:
        self.result_text = text

    def show_error(self, message: Optional[str]) -> None:
        self.error = message

    def set_source_text(self, text: str) -> None:
        self.source_text = text

    def set_source_format(self, format: ConversionFormat) -> None:
        self.source_format = format

    def set_target_format(self, format: ConversionFormat) -> None:
        self.target_format = format


def read_request(panel: WorkbenchPanel) -> ConversionRequest:
    """Fetch everything a conversion needs from the panel."""
    return ConversionRequest(
        raw_text=panel.get_source_text(),
        source_format=panel.get_source_format(),
        target_format=panel.get_target_format(),
        csv_has_header=panel.get_csv_has_header(),
    )


def refresh(panel: WorkbenchPanel, converter: Optional[DataConverter] = None) -> bool:
    """
    Convert the panel's source text and write the result back.

    On failure the result text is left untouched and the error message is
    shown. A successful run clears any previous error.

    Returns:
        True if the conversion succeeded
    """
    converter = converter or DataConverter()
    request = read_request(panel)

    try:
        result = converter.convert_text(request)
    except ValueError as e:
        logger.warning(f"Conversion failed: {e}")
        panel.show_error(str(e))
        return False

    panel.set_result_text(result)
    panel.show_error(None)
    return True


def apply_share_query(
    panel: WorkbenchPanel,
    query: str,
    converter: Optional[DataConverter] = None,
) -> bool:
    """
    Load a share-link query string into the panel, then refresh.

    Keys missing from the query leave the panel's current values alone.

    Raises:
        DecodeError: If the ``left`` token cannot be decoded
        ValueError: If a format tag is unknown
    """
    state = ShareState.from_query(query)
    logger.debug(f"Applying share state: {state}")

    if state.left_text is not None:
        panel.set_source_text(state.left_text)
    if state.input_format is not None:
        panel.set_source_format(state.input_format)
    if state.target_format is not None:
        panel.set_target_format(state.target_format)

    return refresh(panel, converter)


def generate_share_query(panel: WorkbenchPanel) -> str:
    """Build the share-link query string for the panel's current state."""
    state = ShareState(
        left_text=panel.get_source_text(),
        input_format=panel.get_source_format(),
        target_format=panel.get_target_format(),
    )
    return state.to_query()


def flip(panel: WorkbenchPanel, result_text: str, converter: Optional[DataConverter] = None) -> bool:
    """
    Swap source and target formats, feed the result back as source, refresh.

    Args:
        panel: Workbench panel
        result_text: Current contents of the result pane
        converter: Converter to use

    Returns:
        True if the refreshed conversion succeeded
    """
    source_format = panel.get_source_format()
    panel.set_source_format(panel.get_target_format())
    panel.set_target_format(source_format)
    panel.set_source_text(result_text)
    return refresh(panel, converter)

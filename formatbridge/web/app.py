"""HTTP API for the converter workbench."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from formatbridge.converter.converter import ConversionFormat, DataConverter
from shared.logger import get_logger

from .session import Workbench, apply_share_query, generate_share_query, refresh

logger = get_logger(__name__)

converter = DataConverter()

app = FastAPI(
    title="Format Bridge",
    description="Convert between JSON, YAML, RON, TOML and CSV, and build share links",
    version="0.1.0",
)


class ConvertBody(BaseModel):
    """Body of a conversion request."""

    text: str
    input_format: str
    target_format: str
    csv_has_header: bool = True


class ShareBody(BaseModel):
    """Body of a share-link request."""

    text: str
    input_format: str
    target_format: str


def error_response(message: str) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=422)


def workbench_content(workbench: Workbench) -> dict:
    return {
        "text": workbench.source_text,
        "input_format": workbench.source_format.value,
        "target_format": workbench.target_format.value,
        "csv_options": workbench.source_format.uses_csv_options,
        "result": workbench.result_text,
        "error": workbench.error,
    }


@app.get("/api/formats")
async def formats():
    """List supported format tags."""
    return JSONResponse(
        content={
            "formats": [member.value for member in ConversionFormat],
            "csv_options": [member.value for member in ConversionFormat if member.uses_csv_options],
        }
    )


@app.post("/api/convert")
async def convert(body: ConvertBody):
    """Convert text from one format to another."""
    try:
        workbench = Workbench(
            source_text=body.text,
            source_format=ConversionFormat.parse(body.input_format),
            target_format=ConversionFormat.parse(body.target_format),
            csv_has_header=body.csv_has_header,
        )
    except ValueError as e:
        return error_response(str(e))

    if not refresh(workbench, converter):
        return error_response(workbench.error or "Conversion failed")

    return JSONResponse(content={"result": workbench.result_text})


@app.post("/api/share")
async def create_share(body: ShareBody):
    """Build a share-link query string."""
    try:
        workbench = Workbench(
            source_text=body.text,
            source_format=ConversionFormat.parse(body.input_format),
            target_format=ConversionFormat.parse(body.target_format),
        )
    except ValueError as e:
        return error_response(str(e))

    query = generate_share_query(workbench)
    logger.info(f"Created share link ({len(query)} characters)")
    return JSONResponse(content={"query": query})


@app.get("/api/share")
async def open_share(request: Request, csv_has_header: Optional[bool] = None):
    """
    Open a share link.

    Pass the share link's query string as-is; the converted state is returned.
    Conversion errors are reported in the ``error`` field, not as a failure.
    """
    workbench = Workbench()
    if csv_has_header is not None:
        workbench.csv_has_header = csv_has_header

    try:
        apply_share_query(workbench, request.url.query, converter)
    except ValueError as e:
        return error_response(str(e))

    return JSONResponse(content=workbench_content(workbench))

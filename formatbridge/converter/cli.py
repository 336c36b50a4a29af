"""CLI interface for Data Converter."""

import sys
from pathlib import Path
from typing import Optional

import click

from shared.cli import error, handle_errors, info, success
from shared.logger import setup_logger

from .converter import ConversionFormat, DataConverter
from .errors import NotASequenceError

FORMAT_CHOICES = [member.value for member in ConversionFormat]


@click.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--to",
    "-t",
    "to_format",
    type=click.Choice(FORMAT_CHOICES),
    required=True,
    help="Target format",
)
@click.option(
    "--from",
    "-f",
    "from_format",
    type=click.Choice(FORMAT_CHOICES),
    help="Source format (auto-detect if not specified)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file (print to stdout if not specified)",
)
@click.option(
    "--query",
    "-q",
    help="JMESPath query to extract data",
)
@click.option(
    "--no-header",
    is_flag=True,
    help="CSV input has no header row",
)
@click.option(
    "--minify",
    is_flag=True,
    help="Minify output (JSON only)",
)
@click.option(
    "--indent",
    type=int,
    default=2,
    show_default=True,
    help="Indentation level (JSON and YAML)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@handle_errors
def main(
    input_file: Path,
    to_format: str,
    from_format: Optional[str],
    output: Optional[Path],
    query: Optional[str],
    no_header: bool,
    minify: bool,
    indent: int,
    verbose: bool,
):
    """
    Data Converter - Convert between JSON, YAML, RON, TOML and CSV formats.

    Examples:

        \b
        # Convert JSON to YAML
        data-convert config.json --to yaml

        \b
        # Convert a CSV export to RON
        data-convert users.csv --to ron --output users.ron

        \b
        # CSV without a header row
        data-convert rows.csv --to json --no-header

        \b
        # Query and convert
        data-convert users.json --to csv --query 'users'

        \b
        # Minify JSON
        data-convert data.json --to json --minify
    """
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__name__, level=log_level)

    converter = DataConverter(indent=indent)

    to_fmt = ConversionFormat(to_format)
    from_fmt = ConversionFormat(from_format) if from_format else None

    try:
        info(f"Loading {input_file}")
        data = converter.load_file(input_file, format=from_fmt, csv_has_header=not no_header)

        if query:
            info(f"Applying query: {query}")
            data = converter.query(data, query)

        if minify and to_fmt == ConversionFormat.JSON:
            output_data = converter.minify_json(data)
        else:
            output_data = converter.convert(data, to_fmt, pretty=not minify)

        if output:
            with open(output, "w", encoding="utf-8", newline="") as f:
                f.write(output_data)
            success(f"Converted to {output}")
        else:
            click.echo(output_data)

        sys.exit(0)

    except FileNotFoundError as e:
        error(str(e))
        sys.exit(1)

    except NotASequenceError as e:
        error(f"{e}; CSV output needs an array of records")
        sys.exit(1)

    except ValueError as e:
        error(str(e))
        sys.exit(1)

    except Exception as e:
        error(f"Unexpected error: {e}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()

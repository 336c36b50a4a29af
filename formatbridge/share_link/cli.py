"""CLI interface for Share Link tokens."""

import sys
from pathlib import Path
from typing import Optional

import click

from formatbridge.converter.converter import ConversionFormat
from shared.cli import error, handle_errors, success
from shared.logger import setup_logger

from .payload import DecodeError, decode, encode
from .state import ShareState

FORMAT_CHOICES = [member.value for member in ConversionFormat]


def _read_text(input_file: Optional[Path]) -> str:
    if input_file:
        return input_file.read_text(encoding="utf-8")
    return sys.stdin.read()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(verbose: bool):
    """
    Share Link - Pack text into URL-safe tokens and back.

    Examples:

        \b
        # Encode a file into a token
        share-link encode data.json

        \b
        # Decode a token
        share-link decode 'c3R0dAQA'

        \b
        # Build a full share query string
        share-link url data.json --input-format json --target-format yaml
    """
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__name__, level=log_level)


@main.command("encode")
@click.argument("input_file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@handle_errors
def encode_command(input_file: Optional[Path]):
    """Encode a file (or stdin) into a payload token."""
    click.echo(encode(_read_text(input_file)))


@main.command("decode")
@click.argument("token")
@handle_errors
def decode_command(token: str):
    """Decode a payload token back into text."""
    try:
        click.echo(decode(token), nl=False)
    except DecodeError as e:
        error(str(e))
        sys.exit(1)


@main.command("url")
@click.argument("input_file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--input-format", "-f", type=click.Choice(FORMAT_CHOICES), help="Source format")
@click.option("--target-format", "-t", type=click.Choice(FORMAT_CHOICES), help="Target format")
@click.option("--base-url", default="", help="URL to prefix the query string with")
@handle_errors
def url_command(
    input_file: Optional[Path],
    input_format: Optional[str],
    target_format: Optional[str],
    base_url: str,
):
    """Build a share-link query string from a file (or stdin)."""
    state = ShareState(
        left_text=_read_text(input_file),
        input_format=ConversionFormat.parse(input_format) if input_format else None,
        target_format=ConversionFormat.parse(target_format) if target_format else None,
    )
    click.echo(f"{base_url}?{state.to_query()}")
    success("Share link created")


if __name__ == "__main__":
    main()

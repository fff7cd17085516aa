# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for pdfcjk.

This module provides commands to list the bundled CJK font profiles,
measure text with them and write a sample PDF.
"""

# Standard Library
import logging
import sys

# Third Party
import click
from colorama import Fore, Style, init

# Local
from . import __version__
from .exceptions import (
    MalformedWidthTableError,
    ResourceUnavailableError,
    UnknownFontProfileError,
)
from .fonts.catalog import LANGUAGES, STYLES, available_profiles, get_profile
from .fonts.cjkfont import CJKFont
from .fonts.cmap import CMapLocator
from .sample import write_sample
from .utils import setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_RESOURCE_NOT_FOUND = 2
EXIT_MALFORMED_FONT_DATA = 3

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}✓{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}✗ Error:{Style.RESET_ALL} {msg}", err=True)


def _run(action) -> None:
    """Runs a command body and maps pdfcjk errors to exit codes."""
    try:
        action()
    except ResourceUnavailableError as e:
        print_error(str(e))
        print_error(
            "Install poppler-data or point --cmap-path / PDFCJK_CMAP_PATH "
            "at a directory with Adobe CMap resources."
        )
        sys.exit(EXIT_RESOURCE_NOT_FOUND)
    except (MalformedWidthTableError, UnknownFontProfileError) as e:
        print_error(str(e))
        sys.exit(EXIT_MALFORMED_FONT_DATA)
    except OSError as e:
        print_error(str(e))
        sys.exit(EXIT_GENERAL_ERROR)


@click.group()
@click.option(
    "--cmap-path",
    "cmap_paths",
    multiple=True,
    type=click.Path(exists=True, file_okay=False),
    help="Directory with CMap resources (may be repeated)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only output errors",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Detailed output",
)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    cmap_paths: tuple[str, ...],
    quiet: bool,
    verbose: bool,
) -> None:
    """Metrics and samples for the Adobe CJK composite fonts."""
    # Initialize colorama for Windows compatibility
    init()
    setup_logging(verbose=verbose, quiet=quiet)

    ctx.ensure_object(dict)
    ctx.obj["locator"] = CMapLocator(cmap_paths)
    ctx.obj["quiet"] = quiet


@main.command("profiles")
def profiles_command() -> None:
    """Lists the bundled font profiles."""
    for lang, style in available_profiles():
        profile = get_profile(lang, style, strict=True)
        click.echo(
            f"{lang}/{style}\t{profile.base_font_name}\t"
            f"{profile.collection_name}-{profile.supplement_number}\t"
            f"{profile.encoding_resource_id}"
        )


@main.command("measure")
@click.argument("text")
@click.option(
    "-l",
    "--lang",
    type=click.Choice(LANGUAGES),
    default="ja",
    help="Language of the font (default: ja)",
)
@click.option(
    "-s",
    "--style",
    type=click.Choice(STYLES),
    default="sans",
    help="Font style (default: sans)",
)
@click.option(
    "--size",
    type=float,
    default=None,
    help="Font size in points; also prints the width in points",
)
@click.pass_context
def measure_command(
    ctx: click.Context,
    text: str,
    lang: str,
    style: str,
    size: float | None,
) -> None:
    """Prints the advance width of TEXT in font units (1/1000 em)."""

    def action() -> None:
        font = CJKFont.get(lang, style, strict=True, locator=ctx.obj["locator"])
        width = font.width_of(text)
        if size is None:
            click.echo(str(width))
        else:
            click.echo(f"{width}\t{font.scaled_width(text, size):.3f}pt")

    _run(action)


@main.command("sample")
@click.argument("output", type=click.Path(dir_okay=False))
@click.pass_context
def sample_command(ctx: click.Context, output: str) -> None:
    """Writes a PDF page showing every bundled font to OUTPUT."""

    def action() -> None:
        path = write_sample(output, locator=ctx.obj["locator"])
        if not ctx.obj["quiet"]:
            print_success(f"Sample written: {path}")

    _run(action)


if __name__ == "__main__":
    main()

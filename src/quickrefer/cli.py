from pathlib import Path
from typing import Optional, Tuple

import click

from quickrefer.helpers import LineIndex
from quickrefer.htmlfmt import format_html, format_html_range
from quickrefer.logger import logger, setup_logging
from quickrefer.models import Position, Selection
from quickrefer.references import build_line_reference, build_references_text
from quickrefer.settings import ReferSettings, load_settings


def _read_document(path: Path) -> str:
    # Keep "\r\n" intact so offsets match what an editor reports
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as ex:
        raise click.FileError(str(path), hint=str(ex)) from ex


def _relative_path(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _make_selection(
    line: int, column: int, end_line: Optional[int], end_column: Optional[int]
) -> Selection:
    """
    Build a selection from 1-based command-line positions; without an end the
    selection is an empty cursor.
    """
    anchor = Position(line=line - 1, character=column - 1)
    if end_line is None and end_column is None:
        return Selection(anchor=anchor, active=anchor)
    active = Position(
        line=(end_line or line) - 1,
        character=(end_column or 1) - 1,
    )
    return Selection(anchor=anchor, active=active)


def _line_range_offsets(
    index: LineIndex, start_line: Optional[int], end_line: Optional[int]
) -> Tuple[int, int]:
    """Character range of lines start_line..end_line (1-based, inclusive)."""
    first = (start_line or 1) - 1
    last = (end_line or index.line_count) - 1
    if first > last:
        raise click.BadParameter("--start-line must not exceed --end-line")
    last = min(last, index.line_count - 1)
    start = index.offset_at(Position(line=first, character=0))
    end = index.offset_at(Position(line=last, character=index.line_length(last)))
    return start, end


_position_options = [
    click.option(
        "--line",
        "-l",
        type=click.IntRange(min=1),
        required=True,
        help="Cursor / selection start line (1-based).",
    ),
    click.option(
        "--column",
        "-c",
        type=click.IntRange(min=1),
        default=1,
        show_default=True,
        help="Cursor / selection start column (1-based).",
    ),
    click.option(
        "--end-line",
        type=click.IntRange(min=1),
        default=None,
        help="Selection end line (1-based).",
    ),
    click.option(
        "--end-column",
        type=click.IntRange(min=1),
        default=None,
        help="Selection end column (1-based).",
    ),
]


def _with_position_options(func):
    for option in reversed(_position_options):
        func = option(func)
    return func


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug logging.",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML settings file.",
)
@click.pass_context
def main(ctx: click.Context, debug: bool, config: Optional[Path]) -> None:
    """
    Generate `path:line label` code references and format HTML.
    """
    setup_logging(debug)
    ctx.obj = load_settings(toml_file=str(config) if config else None)


@main.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
)
@_with_position_options
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    help="Workspace root the reference path is relative to.",
)
@click.pass_obj
def refs(
    settings: ReferSettings,
    file: Path,
    line: int,
    column: int,
    end_line: Optional[int],
    end_column: Optional[int],
    root: Path,
) -> None:
    """
    Print references for the selection in FILE.
    """
    text = _read_document(file)
    selection = _make_selection(line, column, end_line, end_column)
    rel_path = _relative_path(file, root)
    try:
        result = build_references_text(rel_path, text, selection, settings=settings)
    except ValueError as ex:
        raise click.BadParameter(str(ex)) from ex

    if not result:
        click.echo("No references generated.", err=True)
        return
    logger.debug("References generated", path=rel_path, count=len(result.splitlines()))
    click.echo(result)


@main.command("line")
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@_with_position_options
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    help="Workspace root the reference path is relative to.",
)
def line_command(
    file: Path,
    line: int,
    column: int,
    end_line: Optional[int],
    end_column: Optional[int],
    root: Path,
) -> None:
    """
    Print the plain `path:line` reference for the selection in FILE.
    """
    selection = _make_selection(line, column, end_line, end_column)
    click.echo(build_line_reference(_relative_path(file, root), selection))


@main.command("format-html")
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
)
@click.option(
    "--start-line",
    type=click.IntRange(min=1),
    default=None,
    help="First line to format (1-based).",
)
@click.option(
    "--end-line",
    type=click.IntRange(min=1),
    default=None,
    help="Last line to format (1-based).",
)
@click.option(
    "--in-place/--no-in-place",
    default=False,
    help="Write the result back to FILE instead of printing it.",
)
@click.pass_obj
def format_html_command(
    settings: ReferSettings,
    file: Path,
    start_line: Optional[int],
    end_line: Optional[int],
    in_place: bool,
) -> None:
    """
    Re-indent FILE, or only the given line range of it.
    """
    text = _read_document(file)
    try:
        if start_line is None and end_line is None:
            start, end, replacement = format_html_range(
                text, Selection.cursor(0), settings.formatter
            )
        else:
            start, end = _line_range_offsets(LineIndex(text), start_line, end_line)
            replacement = format_html(text[start:end], settings.formatter)
    except ValueError as ex:
        raise click.BadParameter(str(ex)) from ex

    result = text[:start] + replacement + text[end:]
    if in_place:
        file.write_bytes(result.encode("utf-8"))
        click.echo("HTML formatted.", err=True)
        return
    click.echo(result, nl=not result.endswith("\n"))


if __name__ == "__main__":
    main()

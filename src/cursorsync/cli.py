"""Command line interface for inspecting cursor synchronization."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cursorsync.config import SyncConfig
from cursorsync.markdown.syntax import detect_node_type, is_inside_code_block
from cursorsync.models import CursorInfo
from cursorsync.sync import CursorSynchronizer
from cursorsync.utils.text import line_at_offset, offset_of, split_lines

console = Console()
app = typer.Typer(help="cursorsync - carry a cursor between markdown source and its block tree")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _read_buffer(path: Path) -> str:
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _resolve_offset(
    buffer: str, offset: Optional[int], line: Optional[int], column: Optional[int]
) -> int:
    if offset is not None:
        return offset
    if line is None:
        raise typer.BadParameter("Pass either --offset or --line (with optional --column)")
    return offset_of(split_lines(buffer), line - 1, column or 0)


def _print_info(info: CursorInfo) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field")
    table.add_column("Value")
    for key, value in info.to_dict().items():
        table.add_row(key, json.dumps(value, ensure_ascii=False))
    console.print(table)


def _print_position(buffer: str, offset: int) -> None:
    position = line_at_offset(buffer, offset)
    line_text = split_lines(buffer)[position.line]
    console.print(f"Offset: {offset} (line {position.line + 1}, column {position.column})")
    console.print(line_text, markup=False, highlight=False)
    console.print(" " * position.column + "^", markup=False, highlight=False)


@app.command()
def classify(
    path: Path = typer.Argument(..., help="Markdown file to classify."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the node type of every line."""
    _setup_logging(verbose)
    lines = split_lines(_read_buffer(path))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Line")
    table.add_column("Type")
    table.add_column("Fenced")
    table.add_column("Text")
    for index, line in enumerate(lines):
        fenced = is_inside_code_block(lines, index)
        table.add_row(str(index + 1), detect_node_type(line).value, "yes" if fenced else "", line[:80])
    console.print(table)


@app.command()
def inspect(
    path: Path = typer.Argument(..., help="Markdown file to read."),
    offset: Optional[int] = typer.Option(None, help="Character offset of the cursor"),
    line: Optional[int] = typer.Option(None, help="1-based line of the cursor"),
    column: Optional[int] = typer.Option(None, help="0-based column of the cursor"),
    anchors: bool = typer.Option(False, "--anchors", help="Emit table/code block anchors"),
    as_json: bool = typer.Option(False, "--json", help="Print the snapshot as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Extract the cursor snapshot at a position of the flat surface."""
    _setup_logging(verbose)
    buffer = _read_buffer(path)
    sync = CursorSynchronizer(SyncConfig(anchor_flat_blocks=anchors))

    info = sync.extract_from_flat_surface(buffer, _resolve_offset(buffer, offset, line, column))
    if as_json:
        typer.echo(json.dumps(info.to_dict(), ensure_ascii=False))
        return
    _print_info(info)


@app.command()
def restore(
    path: Path = typer.Argument(..., help="Markdown file to place the cursor in."),
    info_path: Path = typer.Option(..., "--info", help="JSON snapshot written by 'inspect --json'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Place a saved cursor snapshot into a file."""
    _setup_logging(verbose)
    buffer = _read_buffer(path)
    try:
        info = CursorInfo.from_dict(json.loads(_read_buffer(info_path)))
    except (ValueError, TypeError, AttributeError) as exc:
        raise typer.BadParameter(f"Invalid snapshot {info_path}: {exc}") from exc

    _print_position(buffer, CursorSynchronizer().restore_to_flat_surface(buffer, info))


@app.command()
def relocate(
    old: Path = typer.Argument(..., help="File the cursor was taken from."),
    new: Path = typer.Argument(..., help="Edited file to carry the cursor into."),
    offset: Optional[int] = typer.Option(None, help="Character offset in OLD"),
    line: Optional[int] = typer.Option(None, help="1-based line in OLD"),
    column: Optional[int] = typer.Option(None, help="0-based column in OLD"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Carry a cursor from one revision of a file to another."""
    _setup_logging(verbose)
    old_buffer = _read_buffer(old)
    new_buffer = _read_buffer(new)

    sync = CursorSynchronizer()
    info = sync.extract_from_flat_surface(
        old_buffer, _resolve_offset(old_buffer, offset, line, column)
    )
    new_offset = sync.restore_to_flat_surface(new_buffer, info)
    if as_json:
        position = line_at_offset(new_buffer, new_offset)
        typer.echo(
            json.dumps(
                {
                    "offset": new_offset,
                    "line": position.line + 1,
                    "column": position.column,
                    "info": info.to_dict(),
                },
                ensure_ascii=False,
            )
        )
        return
    _print_position(new_buffer, new_offset)

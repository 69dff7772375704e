"""CLI entrypoint for typst-inline.

Decodes and encodes inline markup from files or stdin, and edits table
records stored as JSON files without needing the MCP server running.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from typst_inline.config import settings
from typst_inline.converter import (
    MarkupToSegmentsConverter,
    SegmentsToHtmlRenderer,
    SequentialMathIds,
    html_to_markup,
    segment_to_record,
)
from typst_inline.converter.markup_parser import segments_to_plain_text
from typst_inline.table import (
    TableFileStore,
    TablePayload,
    flatten_merges,
    merge_rect,
    normalize_table,
    resize_table,
    set_cell_content,
    unmerge_cell,
)
from typst_inline.table.store import TableOperation


def _read_source(source: str | None) -> str:
    """Read a file, or stdin when *source* is ``None`` or ``-``."""
    if source is None or source == "-":
        return click.get_text_stream("stdin").read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        click.echo(f"Error: cannot read {source}: {exc}", err=True)
        sys.exit(1)


@click.group()
def cli() -> None:
    """typst-inline CLI: convert inline markup and edit table records."""
    try:
        settings.validate()
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    logging.basicConfig(level=settings.log_level)


@cli.command()
@click.option("--html", "output", flag_value="html", default=True, help="Emit editor HTML (default).")
@click.option("--json", "output", flag_value="json", help="Emit segments as JSON.")
@click.option("--text", "output", flag_value="text", help="Emit visible plain text.")
@click.argument("source", required=False)
def decode(output: str, source: str | None) -> None:
    """Decode inline markup from SOURCE (or stdin)."""
    converter = MarkupToSegmentsConverter(id_factory=SequentialMathIds(settings.math_id_prefix))
    segments = converter.convert(_read_source(source))

    if output == "json":
        records = [segment_to_record(seg) for seg in segments]
        click.echo(json.dumps(records, ensure_ascii=False, indent=2))
    elif output == "text":
        click.echo(segments_to_plain_text(segments))
    else:
        click.echo(SegmentsToHtmlRenderer().render(segments))


@cli.command()
@click.argument("source", required=False)
def encode(source: str | None) -> None:
    """Encode an HTML fragment from SOURCE (or stdin) as inline markup."""
    click.echo(html_to_markup(_read_source(source)))


# ---------------------------------------------------------------------------
# Table records
# ---------------------------------------------------------------------------

_table_path = click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
_dry_run = click.option("--dry-run", is_flag=True, help="Print the result instead of saving it.")


def _apply(path: Path, operation: TableOperation, dry_run: bool, rejected: str = "") -> None:
    store = TableFileStore(path, settings.default_table_rows, settings.default_table_cols)
    try:
        payload, changed = store.apply(operation, dry_run=dry_run)
    except (OSError, UnicodeDecodeError) as exc:
        click.echo(f"Error: cannot update {path}: {exc}", err=True)
        sys.exit(1)

    if dry_run:
        click.echo(payload.to_json(indent=2))
    if not changed and rejected:
        click.echo(f"FAIL: {path}: {rejected}", err=True)
        sys.exit(1)
    if not dry_run:
        click.echo(f"OK: {path}" if changed else f"Unchanged: {path}")


@cli.group()
def table() -> None:
    """Edit table records stored as JSON files."""


@table.command("normalize")
@_table_path
@_dry_run
def table_normalize(path: Path, dry_run: bool) -> None:
    """Pad the grid to rows x cols and repair span metadata."""
    _apply(path, normalize_table, dry_run)


@table.command("flatten")
@_table_path
@_dry_run
def table_flatten(path: Path, dry_run: bool) -> None:
    """Remove every merge, keeping contents in place."""
    _apply(path, flatten_merges, dry_run)


@table.command("merge")
@_table_path
@click.argument("r1", type=int)
@click.argument("c1", type=int)
@click.argument("r2", type=int)
@click.argument("c2", type=int)
@_dry_run
def table_merge(path: Path, r1: int, c1: int, r2: int, c2: int, dry_run: bool) -> None:
    """Merge the rectangle between (R1, C1) and (R2, C2)."""

    def merge(payload: TablePayload) -> TablePayload:
        return merge_rect(payload, r1, c1, r2, c2)

    _apply(path, merge, dry_run, "rectangle overlaps an existing merge")


@table.command("unmerge")
@_table_path
@click.argument("row", type=int)
@click.argument("col", type=int)
@_dry_run
def table_unmerge(path: Path, row: int, col: int, dry_run: bool) -> None:
    """Split the merged region mastered at (ROW, COL)."""

    def unmerge(payload: TablePayload) -> TablePayload:
        return unmerge_cell(payload, row, col)

    _apply(path, unmerge, dry_run, "cell is not merged")


@table.command("resize")
@_table_path
@click.argument("rows", type=click.IntRange(min=1))
@click.argument("cols", type=click.IntRange(min=1))
@_dry_run
def table_resize(path: Path, rows: int, cols: int, dry_run: bool) -> None:
    """Resize to ROWS x COLS, flattening merges."""

    def resize(payload: TablePayload) -> TablePayload:
        return resize_table(payload, rows, cols)

    _apply(path, resize, dry_run)


@table.command("set")
@_table_path
@click.argument("row", type=int)
@click.argument("col", type=int)
@click.argument("content")
@_dry_run
def table_set(path: Path, row: int, col: int, content: str, dry_run: bool) -> None:
    """Replace the content of the visible cell at (ROW, COL)."""

    def update(payload: TablePayload) -> TablePayload:
        return set_cell_content(payload, row, col, content)

    _apply(path, update, dry_run, "cell is hidden or out of range")


if __name__ == "__main__":
    cli()

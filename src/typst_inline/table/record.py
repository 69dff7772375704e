"""Deserialize stored table records into normalized :class:`TablePayload` values.

Records come from block storage and may have been written by older
versions or by hand, so values are coerced loosely.  Anything that cannot
be read at all yields an empty default payload instead of an exception.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from pydantic import ValidationError

from typst_inline.table.model import (
    TableCell,
    TablePayload,
    TableStyle,
    default_table_payload,
)
from typst_inline.table.spans import normalize_table

logger = logging.getLogger(__name__)

_RECORD_ERRORS = (ValueError, TypeError, KeyError, AttributeError, ValidationError)


def _as_int(value: Any) -> int | None:
    """Loose numeric coercion; zero and non-numeric values become ``None``."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        if isinstance(value, str):
            value = float(value.strip())
        if isinstance(value, float):
            if not math.isfinite(value):
                return None
            value = int(value)
        if not isinstance(value, int):
            return None
    except ValueError:
        return None
    return value or None


def _as_span(value: Any) -> int | None:
    span = _as_int(value)
    return span if span is not None and span >= 1 else None


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _from_text_grid(grid: list[list[Any]]) -> TablePayload:
    rows = max(1, len(grid))
    cols = max([1, *(len(row) for row in grid)])
    cells = [
        [TableCell(content=_as_text(row[c]) if c < len(row) else "") for c in range(cols)]
        for row in grid
    ]
    return TablePayload(rows=rows, cols=cols, cells=cells)


def _cell_from_record(value: Any) -> TableCell:
    if isinstance(value, dict):
        return TableCell(
            content=_as_text(value.get("content")),
            rowspan=_as_span(value.get("rowspan")),
            colspan=_as_span(value.get("colspan")),
            hidden=bool(value.get("hidden")),
        )
    return TableCell(content=_as_text(value))


def _payload_from_record(record: Any) -> TablePayload | None:
    if not isinstance(record, dict):
        return None

    legacy_rows = record.get("rows")
    if isinstance(legacy_rows, list) and all(isinstance(row, list) for row in legacy_rows):
        return _from_text_grid(legacy_rows)

    raw_cells = record.get("cells")
    if not isinstance(raw_cells, list):
        return None

    first_row = raw_cells[0] if raw_cells else None
    rows = max(1, _as_int(record.get("rows")) or len(raw_cells) or 1)
    cols = max(
        1,
        _as_int(record.get("cols"))
        or (len(first_row) if isinstance(first_row, list) else 0)
        or 1,
    )

    cells: list[list[TableCell]] = []
    for r in range(rows):
        raw_row = raw_cells[r] if r < len(raw_cells) and isinstance(raw_cells[r], list) else []
        cells.append(
            [_cell_from_record(raw_row[c] if c < len(raw_row) else None) for c in range(cols)]
        )

    caption = record.get("caption")
    style = TableStyle.THREE_LINE if record.get("style") == TableStyle.THREE_LINE else TableStyle.NORMAL
    return TablePayload(
        caption=caption if isinstance(caption, str) else "",
        style=style,
        rows=rows,
        cols=cols,
        cells=cells,
    )


def parse_table_record(record: Any, rows: int = 1, cols: int = 1) -> TablePayload:
    """Build a normalized payload from a decoded JSON record.

    Accepts the full ``{caption, style, rows, cols, cells}`` form and the
    older ``{rows: [[text, ...], ...]}`` form.  On a malformed record the
    result is ``default_table_payload(rows, cols)``.
    """
    try:
        payload = _payload_from_record(record)
    except _RECORD_ERRORS as exc:
        logger.warning("Malformed table record, using an empty %dx%d table: %s", rows, cols, exc)
        return default_table_payload(rows, cols)
    if payload is None:
        logger.warning("Table record has no cell grid, using an empty %dx%d table", rows, cols)
        return default_table_payload(rows, cols)
    return normalize_table(payload)


def parse_table_json(text: str | bytes | None, rows: int = 1, cols: int = 1) -> TablePayload:
    """Parse a JSON string with :func:`parse_table_record` semantics."""
    if not text:
        return default_table_payload(rows, cols)
    try:
        record = json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.warning("Table record is not valid JSON, using an empty %dx%d table: %s", rows, cols, exc)
        return default_table_payload(rows, cols)
    return parse_table_record(record, rows, cols)

"""Table cell-span model: payload types, span operations and persistence."""

from typst_inline.table.model import TableCell, TablePayload, TableStyle, default_table_payload
from typst_inline.table.record import parse_table_json, parse_table_record
from typst_inline.table.spans import (
    flatten_merges,
    merge_rect,
    normalize_table,
    resize_table,
    set_cell_content,
    unmerge_cell,
)
from typst_inline.table.store import TableFileStore

__all__ = [
    "TableCell",
    "TableFileStore",
    "TablePayload",
    "TableStyle",
    "default_table_payload",
    "flatten_merges",
    "merge_rect",
    "normalize_table",
    "parse_table_json",
    "parse_table_record",
    "resize_table",
    "set_cell_content",
    "unmerge_cell",
]

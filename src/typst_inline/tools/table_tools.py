"""MCP tools for table cell-span operations.

Every tool takes the stored table record as a JSON string and returns the
resulting record together with whether the operation changed anything.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from typst_inline.config import settings
from typst_inline.table import (
    TablePayload,
    flatten_merges,
    merge_rect,
    normalize_table,
    parse_table_json,
    resize_table,
    set_cell_content,
    unmerge_cell,
)
from typst_inline.table.store import TableOperation
from typst_inline.tools.schemas import TableOperationResponse


def _run(table_json: str, operation: TableOperation, rejected: str = "") -> dict[str, Any]:
    before = parse_table_json(
        table_json, settings.default_table_rows, settings.default_table_cols
    )
    after = operation(before)
    changed = after != before
    return TableOperationResponse(
        changed=changed,
        table=after.to_record(),
        message="" if changed else rejected,
    ).model_dump()


def register_table_tools(mcp: FastMCP) -> None:
    """Register table span tools with the MCP server."""

    @mcp.tool(name="normalize_table")
    def normalize_table_tool(table_json: str) -> dict[str, Any]:
        """Parse a table record and return it normalized.

        Pads or truncates the grid to rows x cols and infers spans for hidden
        cells that no master covers.  Malformed input yields an empty table.

        Args:
            table_json: Stored table record as JSON.
        """
        return _run(table_json, normalize_table)

    @mcp.tool()
    def merge_table_cells(
        table_json: str, row1: int, col1: int, row2: int, col2: int
    ) -> dict[str, Any]:
        """Merge the rectangle between two corner cells into its top-left cell.

        Contents are joined with newlines.  Fails (changed=false) when the
        rectangle overlaps an existing merge.

        Args:
            table_json: Stored table record as JSON.
            row1: Row of the first corner (0-based).
            col1: Column of the first corner (0-based).
            row2: Row of the opposite corner.
            col2: Column of the opposite corner.
        """

        def merge(payload: TablePayload) -> TablePayload:
            return merge_rect(payload, row1, col1, row2, col2)

        return _run(table_json, merge, "Rectangle overlaps an existing merge")

    @mcp.tool()
    def unmerge_table_cell(table_json: str, row: int, col: int) -> dict[str, Any]:
        """Split the merged region whose top-left cell is (row, col).

        Covered cells become visible and empty; merged content stays in the
        top-left cell.

        Args:
            table_json: Stored table record as JSON.
            row: Row of the merged cell (0-based).
            col: Column of the merged cell (0-based).
        """

        def unmerge(payload: TablePayload) -> TablePayload:
            return unmerge_cell(payload, row, col)

        return _run(table_json, unmerge, "Cell is not merged")

    @mcp.tool()
    def flatten_table_merges(table_json: str) -> dict[str, Any]:
        """Remove every merge from a table, keeping cell contents in place.

        Args:
            table_json: Stored table record as JSON.
        """
        return _run(table_json, flatten_merges)

    @mcp.tool(name="resize_table")
    def resize_table_tool(table_json: str, rows: int, cols: int) -> dict[str, Any]:
        """Resize a table, flattening merges and keeping overlapping content.

        Args:
            table_json: Stored table record as JSON.
            rows: New row count (at least 1).
            cols: New column count (at least 1).
        """

        def resize(payload: TablePayload) -> TablePayload:
            return resize_table(payload, rows, cols)

        return _run(table_json, resize)

    @mcp.tool()
    def set_table_cell(table_json: str, row: int, col: int, content: str) -> dict[str, Any]:
        """Replace the text of one visible cell.

        Args:
            table_json: Stored table record as JSON.
            row: Row of the cell (0-based).
            col: Column of the cell (0-based).
            content: New cell text.
        """

        def update(payload: TablePayload) -> TablePayload:
            return set_cell_content(payload, row, col, content)

        return _run(table_json, update, "Cell is hidden or out of range")

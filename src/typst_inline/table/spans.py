"""Cell-span algebra over :class:`TablePayload`.

Every operation is a pure function: it normalizes a copy of its input,
edits the copy and returns it.  Rejected requests (a merge overlapping an
existing merge, an unmerge of a plain cell) return the normalized but
otherwise unchanged payload; callers compare the result with the input if
they need to know whether anything happened.
"""

from __future__ import annotations

import logging

from typst_inline.table.model import TableCell, TablePayload, default_table_payload

logger = logging.getLogger(__name__)


def _copy_grid(payload: TablePayload, rows: int, cols: int) -> list[list[TableCell]]:
    grid: list[list[TableCell]] = []
    for r in range(rows):
        src_row = payload.cells[r] if r < len(payload.cells) else []
        grid.append(
            [src_row[c].model_copy() if c < len(src_row) else TableCell() for c in range(cols)]
        )
    return grid


def _clamp_spans(cells: list[list[TableCell]], rows: int, cols: int) -> None:
    """Keep every master's rectangle inside the grid."""
    for r in range(rows):
        for c in range(cols):
            cell = cells[r][c]
            if cell.rowspan is not None and r + cell.row_extent > rows:
                cell.rowspan = rows - r if rows - r > 1 else None
            if cell.colspan is not None and c + cell.col_extent > cols:
                cell.colspan = cols - c if cols - c > 1 else None


def _infer_missing_spans(cells: list[list[TableCell]], rows: int, cols: int) -> None:
    """Extend a nearby master so every hidden cell is covered.

    Hand-authored or generated data often marks cells ``hidden`` without
    setting the master's span.  For each uncovered hidden cell, the nearest
    visible cell to the left has its ``colspan`` extended; only when there is
    none is the nearest visible cell above given a larger ``rowspan``.
    Hidden cells already inside some master's rectangle are left alone.
    """
    covered: set[tuple[int, int]] = set()

    def cover(row: int, col: int) -> None:
        master = cells[row][col]
        covered.update(
            (rr, cc)
            for rr in range(row, min(row + master.row_extent, rows))
            for cc in range(col, min(col + master.col_extent, cols))
        )

    for r in range(rows):
        for c in range(cols):
            if not cells[r][c].hidden and cells[r][c].is_merged:
                cover(r, c)

    for r in range(rows):
        for c in range(cols):
            if not cells[r][c].hidden or (r, c) in covered:
                continue

            left_col = next((cc for cc in range(c - 1, -1, -1) if not cells[r][cc].hidden), None)
            if left_col is not None:
                master = cells[r][left_col]
                master.colspan = max(c - left_col + 1, master.col_extent)
                cover(r, left_col)
                continue

            above_row = next((rr for rr in range(r - 1, -1, -1) if not cells[rr][c].hidden), None)
            if above_row is not None:
                master = cells[above_row][c]
                master.rowspan = max(r - above_row + 1, master.row_extent)
                cover(above_row, c)


def normalize_table(payload: TablePayload) -> TablePayload:
    """Resize the grid to ``rows x cols`` and reconcile span metadata."""
    rows = max(1, payload.rows)
    cols = max(1, payload.cols)
    cells = _copy_grid(payload, rows, cols)
    _clamp_spans(cells, rows, cols)
    _infer_missing_spans(cells, rows, cols)
    return TablePayload(
        caption=payload.caption,
        style=payload.style,
        rows=rows,
        cols=cols,
        cells=cells,
    )


def flatten_merges(payload: TablePayload) -> TablePayload:
    """Clear every span and hidden flag; content stays in place."""
    n = normalize_table(payload)
    for row in n.cells:
        for cell in row:
            cell.rowspan = None
            cell.colspan = None
            cell.hidden = False
    return n


def merge_rect(payload: TablePayload, r1: int, c1: int, r2: int, c2: int) -> TablePayload:
    """Merge the rectangle spanned by two corner cells (in either order).

    The top-left cell becomes the master and receives the newline-joined,
    trimmed, non-empty contents of the rectangle in row-major order.  If any
    cell inside is already hidden or already a master, nothing is merged.
    """
    n = normalize_table(payload)

    def clamp(value: int, size: int) -> int:
        return max(0, min(value, size - 1))

    top, bottom = sorted((clamp(r1, n.rows), clamp(r2, n.rows)))
    left, right = sorted((clamp(c1, n.cols), clamp(c2, n.cols)))
    region = [(r, c) for r in range(top, bottom + 1) for c in range(left, right + 1)]
    if len(region) == 1:
        return n

    for r, c in region:
        cell = n.cells[r][c]
        if cell.hidden or cell.is_merged:
            logger.debug(
                "Refusing merge (%d,%d)-(%d,%d): cell (%d,%d) is already merged",
                top, left, bottom, right, r, c,
            )
            return n

    parts = [n.cells[r][c].content.strip() for r, c in region]
    master = n.cells[top][left]
    master.content = "\n".join(p for p in parts if p)
    master.rowspan = bottom - top + 1
    master.colspan = right - left + 1
    master.hidden = False

    for r, c in region[1:]:
        covered = n.cells[r][c]
        covered.hidden = True
        covered.content = ""
        covered.rowspan = None
        covered.colspan = None
    return n


def unmerge_cell(payload: TablePayload, row: int, col: int) -> TablePayload:
    """Split the merged region mastered at ``(row, col)``.

    Covered cells become visible again but stay empty: the original
    per-cell contents are not restored.
    """
    n = normalize_table(payload)
    cell = n.cell(row, col)
    if cell is None or not cell.is_merged:
        return n

    row_extent, col_extent = cell.row_extent, cell.col_extent
    cell.rowspan = None
    cell.colspan = None
    cell.hidden = False
    for rr in range(row, min(row + row_extent, n.rows)):
        for cc in range(col, min(col + col_extent, n.cols)):
            if (rr, cc) != (row, col):
                n.cells[rr][cc].hidden = False
    return n


def resize_table(payload: TablePayload, rows: int, cols: int) -> TablePayload:
    """Return a ``rows x cols`` table holding the overlapping content.

    All merges are flattened first; caption and style are preserved.
    """
    flat = flatten_merges(payload)
    resized = default_table_payload(rows, cols)
    resized.caption = flat.caption
    resized.style = flat.style
    for r in range(min(resized.rows, flat.rows)):
        for c in range(min(resized.cols, flat.cols)):
            resized.cells[r][c].content = flat.cells[r][c].content
    return resized


def set_cell_content(payload: TablePayload, row: int, col: int, content: str) -> TablePayload:
    """Replace the content of a visible cell; hidden or missing cells are left alone."""
    n = normalize_table(payload)
    cell = n.cell(row, col)
    if cell is None or cell.hidden:
        return n
    cell.content = content
    return n

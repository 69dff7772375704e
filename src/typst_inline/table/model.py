"""Table payload models persisted as JSON-backed Pydantic models.

A table block stores one :class:`TablePayload`.  Merged regions are
expressed by a master cell carrying ``rowspan``/``colspan`` and every other
covered cell marked ``hidden``.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class TableStyle(StrEnum):
    """Visual style of a table block."""

    NORMAL = "normal"
    THREE_LINE = "three-line"


class TableCell(BaseModel):
    """A single grid cell.

    ``rowspan``/``colspan`` are only meaningful on a visible (master) cell.
    """

    content: str = ""
    rowspan: int | None = None
    colspan: int | None = None
    hidden: bool = False

    @property
    def row_extent(self) -> int:
        return max(1, self.rowspan or 1)

    @property
    def col_extent(self) -> int:
        return max(1, self.colspan or 1)

    @property
    def is_merged(self) -> bool:
        return self.row_extent > 1 or self.col_extent > 1


class TablePayload(BaseModel):
    """Root model for a table block's stored content."""

    caption: str = ""
    style: TableStyle = TableStyle.NORMAL
    rows: int = 1
    cols: int = 1
    cells: list[list[TableCell]] = Field(default_factory=list)

    def cell(self, row: int, col: int) -> TableCell | None:
        """Return the cell at ``(row, col)`` or ``None`` when out of range."""
        if 0 <= row < len(self.cells) and 0 <= col < len(self.cells[row]):
            return self.cells[row][col]
        return None

    def to_record(self) -> dict[str, Any]:
        """Return the storage record; unset spans and ``hidden=False`` are omitted."""
        record = self.model_dump(mode="json", exclude_none=True)
        for row in record["cells"]:
            for cell in row:
                if not cell.get("hidden"):
                    cell.pop("hidden", None)
        return record

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_record(), ensure_ascii=False, indent=indent)


def default_table_payload(rows: int = 1, cols: int = 1) -> TablePayload:
    """Return an empty ``rows x cols`` payload (each dimension at least 1)."""
    rows = max(1, rows)
    cols = max(1, cols)
    return TablePayload(
        rows=rows,
        cols=cols,
        cells=[[TableCell() for _ in range(cols)] for _ in range(rows)],
    )

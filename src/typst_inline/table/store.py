"""On-disk persistence for a single table record."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from typst_inline.table.model import TablePayload
from typst_inline.table.record import parse_table_json

TableOperation = Callable[[TablePayload], TablePayload]


class TableFileStore:
    """Reads, transforms and writes one JSON table record.

    A missing or empty file loads as the default payload; malformed
    content is replaced by the default as well (see
    :func:`~typst_inline.table.record.parse_table_json`).

    Args:
        path: Path to the JSON record file.
        rows: Row count of the fallback payload.
        cols: Column count of the fallback payload.
    """

    def __init__(self, path: str | Path, rows: int = 1, cols: int = 1) -> None:
        self._path = Path(path)
        self._rows = rows
        self._cols = cols

    @property
    def path(self) -> Path:
        return self._path

    def _read_raw(self) -> str:
        if self._path.exists() and self._path.stat().st_size > 0:
            return self._path.read_text(encoding="utf-8")
        return ""

    @staticmethod
    def _serialize(payload: TablePayload) -> str:
        return payload.to_json(indent=2) + "\n"

    def load(self) -> TablePayload:
        """Load the record from disk.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        return parse_table_json(self._read_raw(), self._rows, self._cols)

    def save(self, payload: TablePayload) -> None:
        """Write *payload* as pretty-printed JSON, creating parent directories."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(self._serialize(payload), encoding="utf-8")

    def apply(self, operation: TableOperation, *, dry_run: bool = False) -> tuple[TablePayload, bool]:
        """Load, apply *operation* and save the result.

        The file is rewritten whenever its text differs from the canonical
        serialization of the result, so a no-op still upgrades legacy or
        unnormalized records.

        Returns:
            The resulting payload and whether it differs from the loaded one.
        """
        raw = self._read_raw()
        before = parse_table_json(raw, self._rows, self._cols)
        after = operation(before)
        if not dry_run and self._serialize(after) != raw:
            self.save(after)
        return after, after != before

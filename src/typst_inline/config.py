from __future__ import annotations

import logging
import os


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        self.log_level: str = os.environ.get("TYPST_INLINE_LOG_LEVEL", "WARNING").upper()
        self.math_id_prefix: str = os.environ.get("TYPST_INLINE_MATH_ID_PREFIX", "im")
        self.default_table_rows: int = _int_env("TYPST_INLINE_DEFAULT_TABLE_ROWS", 1)
        self.default_table_cols: int = _int_env("TYPST_INLINE_DEFAULT_TABLE_COLS", 1)

    def validate(self) -> None:
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown TYPST_INLINE_LOG_LEVEL: {self.log_level}")
        if not self.math_id_prefix:
            raise ValueError("TYPST_INLINE_MATH_ID_PREFIX must not be empty")
        if self.default_table_rows < 1 or self.default_table_cols < 1:
            raise ValueError("Default table size must be at least 1x1")


settings = Settings()

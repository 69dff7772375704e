"""Tests for environment-driven settings."""

import pytest

from typst_inline.config import Settings


class TestSettings:
    """Reading and validating environment variables."""

    def test_defaults(self, monkeypatch):
        for name in (
            "TYPST_INLINE_LOG_LEVEL",
            "TYPST_INLINE_MATH_ID_PREFIX",
            "TYPST_INLINE_DEFAULT_TABLE_ROWS",
            "TYPST_INLINE_DEFAULT_TABLE_COLS",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.math_id_prefix == "im"
        assert (settings.default_table_rows, settings.default_table_cols) == (1, 1)
        settings.validate()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TYPST_INLINE_LOG_LEVEL", "debug")
        monkeypatch.setenv("TYPST_INLINE_MATH_ID_PREFIX", "eq")
        monkeypatch.setenv("TYPST_INLINE_DEFAULT_TABLE_ROWS", "3")
        settings = Settings()
        assert settings.log_level == "DEBUG"
        assert settings.math_id_prefix == "eq"
        assert settings.default_table_rows == 3

    def test_non_numeric_size_falls_back(self, monkeypatch):
        monkeypatch.setenv("TYPST_INLINE_DEFAULT_TABLE_COLS", "wide")
        assert Settings().default_table_cols == 1

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("TYPST_INLINE_LOG_LEVEL", "LOUD"),
            ("TYPST_INLINE_MATH_ID_PREFIX", ""),
            ("TYPST_INLINE_DEFAULT_TABLE_ROWS", "0"),
        ],
    )
    def test_validate_rejects(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError):
            Settings().validate()

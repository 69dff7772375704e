"""Typst inline markup codec and table cell-span model."""

__version__ = "0.1.0"

"""Pydantic models for MCP tool inputs and outputs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SegmentsResponse(BaseModel):
    """Decoded markup as segment records plus its visible text."""

    segments: list[dict[str, Any]] = Field(default_factory=list)
    plain_text: str = ""


class MathEncodeResponse(BaseModel):
    """Response from encoding one inline math span."""

    markup: str
    native_expr: str
    latex_expr: str = ""


class TableOperationResponse(BaseModel):
    """Result of a table span operation."""

    changed: bool
    table: dict[str, Any]
    message: str = ""

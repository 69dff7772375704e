"""MCP server exposing the Typst inline markup codec and table span model.

This is the main entry point. It creates a FastMCP server, validates the
settings and registers all tools.

Run with:
    uv run typst-inline-mcp
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from typst_inline.config import settings
from typst_inline.tools.codec_tools import register_codec_tools
from typst_inline.tools.table_tools import register_table_tools

mcp = FastMCP(
    "typst-inline",
    instructions=(
        "Typst-inline MCP server. Use these tools to convert between "
        "Typst inline markup and editor HTML, encode inline math with its "
        "LaTeX source, and merge, unmerge or resize table cells stored as "
        "JSON records."
    ),
)


def _initialize() -> None:
    """Validate settings and register tools."""
    settings.validate()
    # stdout carries the MCP stream, so logs go to stderr.
    logging.basicConfig(level=settings.log_level)

    register_codec_tools(mcp)
    register_table_tools(mcp)


def main() -> None:
    """Entry point for the MCP server."""
    _initialize()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

"""MCP tools for decoding and encoding inline markup."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from typst_inline.config import settings
from typst_inline.converter import (
    MarkupToSegmentsConverter,
    SegmentsToHtmlRenderer,
    SequentialMathIds,
    SymbolMathTranspiler,
    TreeToMarkupConverter,
    encode_inline_math,
    parse_html_fragment,
    segment_to_record,
)
from typst_inline.converter.markup_parser import segments_to_plain_text
from typst_inline.tools.schemas import MathEncodeResponse, SegmentsResponse


def register_codec_tools(mcp: FastMCP) -> None:
    """Register markup codec tools with the MCP server."""

    transpiler = SymbolMathTranspiler()
    renderer = SegmentsToHtmlRenderer()
    encoder = TreeToMarkupConverter(transpiler)

    def _decoder() -> MarkupToSegmentsConverter:
        # Fresh ids per call so every response starts at <prefix>-1.
        return MarkupToSegmentsConverter(transpiler, SequentialMathIds(settings.math_id_prefix))

    @mcp.tool()
    def markup_to_html(markup: str) -> str:
        """Decode Typst inline markup into editor HTML.

        Args:
            markup: Inline markup such as '*bold* and $x^2$'.
        """
        return renderer.render(_decoder().convert(markup))

    @mcp.tool()
    def markup_to_segments(markup: str) -> dict[str, Any]:
        """Decode Typst inline markup into paragraph/list segments of inline spans.

        Args:
            markup: Inline markup to decode.
        """
        segments = _decoder().convert(markup)
        return SegmentsResponse(
            segments=[segment_to_record(seg) for seg in segments],
            plain_text=segments_to_plain_text(segments),
        ).model_dump()

    @mcp.tool()
    def html_to_markup(html: str) -> str:
        """Encode an editor HTML fragment as Typst inline markup.

        Args:
            html: HTML produced by markup_to_html or an equivalent editor.
        """
        return encoder.convert(parse_html_fragment(html))

    @mcp.tool(name="encode_inline_math")
    def encode_math(native_expr: str = "", latex_expr: str = "") -> dict[str, Any]:
        """Encode one inline math span, keeping its LaTeX source losslessly.

        Provide the Typst-native expression, the LaTeX expression, or both.
        A missing native form is derived from the LaTeX one.

        Args:
            native_expr: Typst math body, e.g. 'frac(1, 2)'.
            latex_expr: LaTeX source, e.g. '\\frac{1}{2}'.
        """
        native = native_expr or transpiler.to_native(latex_expr)
        return MathEncodeResponse(
            markup=encode_inline_math(native, latex_expr),
            native_expr=native,
            latex_expr=latex_expr,
        ).model_dump()

"""Render parsed segments as the HTML an in-browser rich-text editor loads.

Text lines become ``<div>`` blocks (an empty line is ``<div><br/></div>`` so
a caret can be placed on it); list segments become ``<ol>``/``<ul>``.  All
literal text and attribute values are escaped here, at read time.
"""

from __future__ import annotations

import html
from typing import Any

from typst_inline.converter.markup_parser import parse_markup
from typst_inline.converter.spans import (
    Bold,
    Colored,
    InlineSpan,
    Italic,
    LineBreak,
    Math,
    ParsedSegment,
    Strike,
    Text,
)
from typst_inline.converter.tokens import LineKind

MATH_PILL_CLASS = "inline-math-pill"
MATH_PILL_GLYPH = "∑"
EMPTY_LINE = "<br/>"


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


class SegmentsToHtmlRenderer:
    """Stateless renderer: parsed segments -> editor HTML."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, segments: list[ParsedSegment]) -> str:
        return "".join(self._render_segment(seg) for seg in segments)

    def render_spans(self, spans: tuple[InlineSpan, ...]) -> str:
        return "".join(self._render_span(span) for span in spans)

    # ------------------------------------------------------------------
    # Segment-level rendering
    # ------------------------------------------------------------------

    def _render_segment(self, seg: ParsedSegment) -> str:
        if seg.kind == LineKind.TEXT:
            return "".join(
                f"<div>{self._non_empty(self.render_spans(item))}</div>"
                for item in seg.items
            )

        items = "".join(
            f"<li>{self._non_empty(self.render_spans(item))}</li>" for item in seg.items
        )
        if seg.kind == LineKind.ORDERED:
            start_attr = f' start="{seg.start}"' if seg.start != 1 else ""
            return f"<ol{start_attr}>{items}</ol>"
        return f"<ul>{items}</ul>"

    @staticmethod
    def _non_empty(rendered: str) -> str:
        return rendered if rendered.strip() else EMPTY_LINE

    # ------------------------------------------------------------------
    # Span-level rendering
    # ------------------------------------------------------------------

    def _render_span(self, span: InlineSpan) -> str:
        handler = self._HANDLERS[type(span)]
        return handler(self, span)

    def _render_text(self, span: Text) -> str:
        return html.escape(span.text, quote=True)

    def _render_bold(self, span: Bold) -> str:
        return f"<strong>{self.render_spans(span.children)}</strong>"

    def _render_italic(self, span: Italic) -> str:
        return f"<em>{self.render_spans(span.children)}</em>"

    def _render_strike(self, span: Strike) -> str:
        inner = self.render_spans(span.children)
        return f'<span style="text-decoration: line-through;">{inner}</span>'

    def _render_colored(self, span: Colored) -> str:
        inner = self.render_spans(span.children)
        return f'<span style="color: {_attr(span.color)};">{inner}</span>'

    def _render_linebreak(self, span: LineBreak) -> str:
        return "<br/>"

    def _render_math(self, span: Math) -> str:
        attrs = [
            f'class="{MATH_PILL_CLASS}"',
            f'data-inline-math-id="{_attr(span.id)}"',
            f'data-format="{_attr(span.format.value)}"',
            f'data-native-expr="{_attr(span.native_expr)}"',
            f'data-latex-expr="{_attr(span.latex_expr)}"',
        ]
        if span.display_mode:
            attrs.append('data-display-mode="true"')
        attrs.append('contenteditable="false"')
        return f"<span {' '.join(attrs)}>{MATH_PILL_GLYPH}</span>"

    # ------------------------------------------------------------------
    # Handler dispatch table
    # ------------------------------------------------------------------

    _HANDLERS: dict[type, Any] = {
        Text: _render_text,
        Bold: _render_bold,
        Italic: _render_italic,
        Strike: _render_strike,
        Colored: _render_colored,
        LineBreak: _render_linebreak,
        Math: _render_math,
    }


def render_html(segments: list[ParsedSegment]) -> str:
    return SegmentsToHtmlRenderer().render(segments)


def markup_to_html(markup: str) -> str:
    """Decode *markup* and render it as editor HTML."""
    return render_html(parse_markup(markup))

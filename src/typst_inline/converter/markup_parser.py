"""Decode Typst inline markup into paragraph and list segments.

The pipeline is::

    split_into_lines -> segment_lines -> strip list prefixes -> parse_inline

``parse_inline`` recognises, left to right: ``#linebreak()`` and raw
newlines, ``#strike[...]``, ``#text(fill: rgb("#..."))[...]`` (plus the
legacy ``#text(fill: rgb("#..."), [...])`` form), ``*bold*``, ``_italic_``
and ``$math$`` with its optional LaTeX comment.  Anything else is literal
text.  Unterminated markers degrade to literal text; nothing here raises
on malformed input.
"""

from __future__ import annotations

import logging
import re

from typst_inline.converter.brackets import NOT_FOUND, find_matching
from typst_inline.converter.inline_math import (
    DecodedMath,
    MathIdFactory,
    SequentialMathIds,
    decode_inline_math,
)
from typst_inline.converter.lines import (
    ordered_start,
    scan_styled_run,
    segment_lines,
    split_into_lines,
    strip_list_prefix,
)
from typst_inline.converter.math_transpile import MathTranspiler, SymbolMathTranspiler
from typst_inline.converter.spans import (
    Bold,
    Colored,
    InlineSpan,
    Italic,
    LineBreak,
    Math,
    ParsedSegment,
    Segment,
    Strike,
    Text,
    visible_text,
)
from typst_inline.converter.tokens import (
    DEFAULT_COLOR,
    ESCAPABLE,
    LINEBREAK,
    STRIKE_KEYWORD,
    STRIKE_OPEN,
    TEXT_KEYWORD,
    TEXT_OPEN,
    LineKind,
    MathFormat,
)

logger = logging.getLogger(__name__)

_FILL_ARG = re.compile(r'fill\s*:\s*rgb\(\s*"([^"]+)"\s*\)', re.IGNORECASE)
_LEGACY_COLOR_RUN = re.compile(
    r'#text\(\s*fill\s*:\s*rgb\(\s*"([^"]+)"\s*\)\s*,\s*\[([\s\S]*?)\]\s*\)'
)


def _find_emphasis_close(text: str, marker: str, start: int) -> int:
    """Find the unescaped *marker* closing a bold or italic run.

    Whole math spans are stepped over, so a marker inside ``$...$`` or its
    LaTeX comment does not close the run.
    """
    idx = start
    while idx < len(text):
        ch = text[idx]
        if ch == "\\":
            idx += 2
            continue
        if ch == "$":
            decoded = decode_inline_math(text, idx)
            if decoded is not None:
                idx = decoded.end
                continue
        if ch == marker:
            return idx
        idx += 1
    return NOT_FOUND


class MarkupToSegmentsConverter:
    """Markup text -> list of :class:`ParsedSegment`.

    Args:
        transpiler: Derives the LaTeX form of math spans that carry no
            LaTeX comment.  Defaults to :class:`SymbolMathTranspiler`.
        id_factory: Produces ids for decoded math spans.  Defaults to a
            per-instance :class:`SequentialMathIds`.
    """

    def __init__(
        self,
        transpiler: MathTranspiler | None = None,
        id_factory: MathIdFactory | None = None,
    ) -> None:
        self._transpiler = transpiler or SymbolMathTranspiler()
        self._next_id = id_factory or SequentialMathIds()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def convert(self, markup: str) -> list[ParsedSegment]:
        """Parse a full inline markup string into rendered segments."""
        segments = segment_lines(split_into_lines(markup))
        return [self._parse_segment(seg) for seg in segments]

    def parse_inline(self, text: str) -> tuple[InlineSpan, ...]:
        """Parse one line (or run body) into inline spans."""
        spans: list[InlineSpan] = []
        buf: list[str] = []

        def emit(span: InlineSpan) -> None:
            if buf:
                spans.append(Text("".join(buf)))
                buf.clear()
            spans.append(span)

        n = len(text)
        i = 0
        while i < n:
            if text.startswith(LINEBREAK, i):
                emit(LineBreak())
                i += len(LINEBREAK)
                continue

            ch = text[i]
            if ch == "\n":
                emit(LineBreak())
                i += 1
                continue

            if ch == "\\" and i + 1 < n and text[i + 1] in ESCAPABLE:
                buf.append(text[i + 1])
                i += 2
                continue

            if text.startswith(STRIKE_OPEN, i):
                open_idx = i + len(STRIKE_KEYWORD)
                end = find_matching(text, open_idx, "[", "]")
                if end != NOT_FOUND:
                    emit(Strike(self.parse_inline(text[open_idx + 1 : end])))
                    i = end + 1
                    continue
                logger.debug("Unterminated strike run at offset %d", i)

            if text.startswith(TEXT_OPEN, i):
                colored = self._parse_color_run(text, i)
                if colored is not None:
                    span, i = colored
                    emit(span)
                    continue

            if ch == "*" or ch == "_":
                end = _find_emphasis_close(text, ch, i + 1)
                if end != NOT_FOUND:
                    children = self.parse_inline(text[i + 1 : end])
                    emit(Bold(children) if ch == "*" else Italic(children))
                    i = end + 1
                    continue

            if ch == "$":
                decoded = decode_inline_math(text, i)
                if decoded is not None:
                    emit(self._math_span(decoded))
                    i = decoded.end
                    continue

            buf.append(ch)
            i += 1

        if buf:
            spans.append(Text("".join(buf)))
        return tuple(spans)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse_segment(self, segment: Segment) -> ParsedSegment:
        sources = [line.source for line in segment.lines]
        if segment.kind == LineKind.TEXT:
            items = tuple(self.parse_inline(src) for src in sources)
            return ParsedSegment(kind=segment.kind, items=items)

        items = tuple(
            self.parse_inline(strip_list_prefix(src, segment.kind)) for src in sources
        )
        start = ordered_start(sources[0]) if segment.kind == LineKind.ORDERED else 1
        return ParsedSegment(kind=segment.kind, items=items, start=start)

    def _parse_color_run(self, text: str, start: int) -> tuple[Colored, int] | None:
        legacy = _LEGACY_COLOR_RUN.match(text, start)
        if legacy:
            children = self.parse_inline(legacy.group(2))
            return Colored(children, legacy.group(1)), legacy.end()

        run, end = scan_styled_run(text, start)
        if run is None:
            logger.debug("Malformed color run at offset %d", start)
            return None
        args = run.prefix[len(TEXT_KEYWORD) :]
        fill = _FILL_ARG.search(args)
        color = fill.group(1) if fill else DEFAULT_COLOR
        return Colored(self.parse_inline(run.body), color), end

    def _math_span(self, decoded: DecodedMath) -> Math:
        if decoded.has_latex:
            latex = decoded.latex_expr
            fmt = MathFormat.LATEX
        else:
            latex = self._transpiler.to_latex(decoded.native_expr)
            fmt = MathFormat.NATIVE
        return Math(
            id=self._next_id(),
            format=fmt,
            native_expr=decoded.native_expr,
            latex_expr=latex,
            display_mode=decoded.display_mode,
        )


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------

def parse_markup(
    markup: str,
    *,
    transpiler: MathTranspiler | None = None,
    id_factory: MathIdFactory | None = None,
) -> list[ParsedSegment]:
    """Parse *markup* with a fresh :class:`MarkupToSegmentsConverter`."""
    return MarkupToSegmentsConverter(transpiler, id_factory).convert(markup)


def segments_to_plain_text(segments: list[ParsedSegment]) -> str:
    """Flatten parsed segments to visible text, one line per item."""
    out: list[str] = []
    for seg in segments:
        for idx, item in enumerate(seg.items):
            text = visible_text(item)
            if seg.kind == LineKind.ORDERED:
                text = f"{seg.start + idx}. {text}"
            elif seg.kind == LineKind.BULLET:
                text = f"- {text}"
            out.append(text)
    return "\n".join(out)


def markup_to_plain_text(markup: str) -> str:
    """Return the visible text of *markup*."""
    return segments_to_plain_text(parse_markup(markup))

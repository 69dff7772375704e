"""Value types produced by decoding inline markup.

``InlineSpan`` is a tagged union of frozen dataclasses.  A decoded
paragraph is a sequence of :class:`ParsedSegment` objects, each holding one
span tuple per rendered line or list item.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from typst_inline.converter.tokens import LineKind, MathFormat


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Bold:
    children: tuple[InlineSpan, ...] = ()


@dataclass(frozen=True)
class Italic:
    children: tuple[InlineSpan, ...] = ()


@dataclass(frozen=True)
class Strike:
    children: tuple[InlineSpan, ...] = ()


@dataclass(frozen=True)
class Colored:
    children: tuple[InlineSpan, ...] = ()
    color: str = "#000000"


@dataclass(frozen=True)
class LineBreak:
    pass


@dataclass(frozen=True)
class Math:
    """An inline math span.

    Both expressions are populated; ``format`` names the authoritative one.
    """

    id: str
    format: MathFormat
    native_expr: str
    latex_expr: str
    display_mode: bool = False


InlineSpan: TypeAlias = Text | Bold | Italic | Strike | Colored | LineBreak | Math

# Span kinds that wrap other spans.
CONTAINER_SPANS = (Bold, Italic, Strike, Colored)


@dataclass(frozen=True)
class Line:
    """One logical line of raw markup, before span parsing.

    The kind is derived from the visible leading text on every access.
    """

    source: str

    @property
    def kind(self) -> LineKind:
        from typst_inline.converter.lines import classify_line

        return classify_line(self.source)


@dataclass(frozen=True)
class Segment:
    """A run of consecutive lines sharing one kind."""

    kind: LineKind
    lines: tuple[Line, ...] = ()


@dataclass(frozen=True)
class ParsedSegment:
    """A segment whose lines have been resolved into inline spans.

    For list segments each entry of ``items`` is one list item with its
    bullet or numeral prefix removed; ``start`` is the first ordinal.
    """

    kind: LineKind
    items: tuple[tuple[InlineSpan, ...], ...] = field(default_factory=tuple)
    start: int = 1


def visible_text(spans: tuple[InlineSpan, ...] | list[InlineSpan]) -> str:
    """Flatten *spans* to the text a reader would see."""
    parts: list[str] = []
    for span in spans:
        if isinstance(span, Text):
            parts.append(span.text)
        elif isinstance(span, LineBreak):
            parts.append("\n")
        elif isinstance(span, Math):
            parts.append(span.native_expr.strip())
        else:
            parts.append(visible_text(span.children))
    return "".join(parts)


def span_to_record(span: InlineSpan) -> dict[str, Any]:
    """Return a JSON-ready dict for *span*, tagged with a ``type`` key."""
    record: dict[str, Any] = {"type": type(span).__name__.lower()}
    if isinstance(span, Text):
        record["text"] = span.text
    elif isinstance(span, Math):
        record.update(
            id=span.id,
            format=span.format.value,
            native_expr=span.native_expr,
            latex_expr=span.latex_expr,
            display_mode=span.display_mode,
        )
    elif isinstance(span, CONTAINER_SPANS):
        record["children"] = [span_to_record(child) for child in span.children]
        if isinstance(span, Colored):
            record["color"] = span.color
    return record


def segment_to_record(segment: ParsedSegment) -> dict[str, Any]:
    return {
        "kind": segment.kind.value,
        "start": segment.start,
        "items": [[span_to_record(span) for span in item] for item in segment.items],
    }

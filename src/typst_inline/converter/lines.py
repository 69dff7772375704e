"""Split inline markup into logical lines and group them into segments.

A line ends at a literal newline or a ``#linebreak()`` token.  Styled runs
(``#text(...)[...]`` and ``#strike[...]``) are kept whole, except that a
run whose body contains ``#linebreak()`` is re-emitted as one run per
internal piece, each wrapped with the same prefix, so that every produced
line keeps its styling.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from typst_inline.converter.brackets import NOT_FOUND, find_matching
from typst_inline.converter.spans import Line, Segment
from typst_inline.converter.tokens import (
    LINEBREAK,
    STRIKE_KEYWORD,
    STRIKE_OPEN,
    TEXT_KEYWORD,
    TEXT_OPEN,
    LineKind,
)

logger = logging.getLogger(__name__)

_BULLET_LINE = re.compile(r"^[-*](?:\s+|$)")
_ORDERED_LINE = re.compile(r"^\d+[.)](?:\s+|$)")
_BULLET_PREFIX = re.compile(r"^\s*[-*](?:\s+|$)")
_ORDERED_PREFIX = re.compile(r"^\s*\d+[.)](?:\s+|$)")
_ORDERED_NUMERAL = re.compile(r"^\s*(\d+)[.)]")
_LINEBREAK_SPLIT = re.compile(r"\s*" + re.escape(LINEBREAK) + r"\s*")


# ---------------------------------------------------------------------------
# Styled runs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StyledRun:
    """A wrapper run located inside a markup string."""

    prefix: str  # e.g. '#text(fill: rgb("#ff0000"))['
    body: str
    end: int  # index just past the closing ``]``


def scan_styled_run(text: str, start: int) -> tuple[StyledRun | None, int]:
    """Scan the styled run beginning at *start*.

    Returns ``(run, end)`` on success.  On failure returns ``(None, resume)``
    where ``text[start:resume]`` should be kept as literal text: the rest of
    the string for an unterminated run, or just the call head when the call
    is not followed by a bracketed body.
    """
    if text.startswith(STRIKE_OPEN, start):
        bracket_start = start + len(STRIKE_KEYWORD)
    elif text.startswith(TEXT_OPEN, start):
        paren_start = start + len(TEXT_KEYWORD)
        paren_end = find_matching(text, paren_start, "(", ")")
        if paren_end == NOT_FOUND:
            return None, len(text)
        bracket_start = paren_end + 1
        while bracket_start < len(text) and text[bracket_start].isspace():
            bracket_start += 1
        if bracket_start >= len(text) or text[bracket_start] != "[":
            return None, bracket_start
    else:
        return None, start + 1

    bracket_end = find_matching(text, bracket_start, "[", "]")
    if bracket_end == NOT_FOUND:
        return None, len(text)

    run = StyledRun(
        prefix=text[start : bracket_start + 1],
        body=text[bracket_start + 1 : bracket_end],
        end=bracket_end + 1,
    )
    return run, run.end


def unwrap_styled_run(line: str) -> tuple[str, str] | None:
    """Return ``(prefix, body)`` if *line* is exactly one styled run."""
    trimmed = line.strip()
    if not (trimmed.startswith(TEXT_OPEN) or trimmed.startswith(STRIKE_OPEN)):
        return None
    run, end = scan_styled_run(trimmed, 0)
    if run is None or end != len(trimmed):
        return None
    return run.prefix, run.body


# ---------------------------------------------------------------------------
# Line splitting
# ---------------------------------------------------------------------------

def _next_boundary(text: str, start: int) -> int:
    candidates = [
        text.find(token, start)
        for token in (TEXT_OPEN, STRIKE_OPEN, LINEBREAK, "\n")
    ]
    found = [c for c in candidates if c != NOT_FOUND]
    return min(found) if found else len(text)


def split_into_lines(content: str) -> list[str]:
    """Split raw inline markup into raw line strings.

    Always returns at least one line; empty input yields ``[""]``.
    """
    s = (content or "").replace("\r\n", "\n")
    lines: list[str] = []
    current: list[str] = []

    def flush() -> None:
        lines.append("".join(current).strip())
        current.clear()

    i = 0
    while i < len(s):
        if s.startswith(LINEBREAK, i):
            flush()
            i += len(LINEBREAK)
            continue

        if s[i] == "\n":
            flush()
            i += 1
            continue

        if s.startswith(TEXT_OPEN, i) or s.startswith(STRIKE_OPEN, i):
            run, resume = scan_styled_run(s, i)
            if run is None:
                logger.debug("Keeping malformed styled run as text at offset %d", i)
                current.append(s[i:resume])
                i = resume
                continue

            if LINEBREAK in run.body:
                pieces = _LINEBREAK_SPLIT.split(run.body)
                for idx, piece in enumerate(pieces):
                    if idx > 0:
                        flush()
                    current.append(f"{run.prefix}{piece.strip()}]")
            else:
                current.append(s[i : run.end])
            i = run.end
            continue

        # Plain chunk up to the next token that needs attention.
        nxt = _next_boundary(s, i + 1)
        current.append(s[i:nxt])
        i = nxt

    if "".join(current).strip():
        flush()

    # A trailing empty line survives only when the input ends on a boundary.
    ends_on_boundary = s.endswith("\n") or s.rstrip().endswith(LINEBREAK)
    while lines and lines[-1] == "" and not ends_on_boundary:
        lines.pop()

    return lines or [""]


# ---------------------------------------------------------------------------
# Classification and segmenting
# ---------------------------------------------------------------------------

def visible_leading_text(line: str) -> str:
    """Return the text a reader sees first, unwrapping a whole-line run."""
    unwrapped = unwrap_styled_run(line or "")
    if unwrapped is not None:
        return unwrapped[1].strip()
    return (line or "").strip()


def classify_line(line: str) -> LineKind:
    """Classify a raw line as text, bullet item or ordered item."""
    visible = visible_leading_text(line)
    if _BULLET_LINE.match(visible):
        return LineKind.BULLET
    if _ORDERED_LINE.match(visible):
        return LineKind.ORDERED
    return LineKind.TEXT


def segment_lines(lines: list[str]) -> list[Segment]:
    """Group consecutive lines of equal kind into segments."""
    segments: list[Segment] = []
    for source in lines:
        line = Line(source)
        kind = line.kind
        if segments and segments[-1].kind == kind:
            last = segments[-1]
            segments[-1] = Segment(kind=kind, lines=last.lines + (line,))
        else:
            segments.append(Segment(kind=kind, lines=(line,)))
    return segments


def strip_list_prefix(line: str, kind: LineKind) -> str:
    """Remove the bullet or numeral prefix, keeping any wrapping run."""
    pattern = _ORDERED_PREFIX if kind == LineKind.ORDERED else _BULLET_PREFIX
    trimmed = (line or "").strip()
    unwrapped = unwrap_styled_run(trimmed)
    if unwrapped is not None:
        prefix, body = unwrapped
        return f"{prefix}{pattern.sub('', body, count=1).strip()}]"
    return pattern.sub("", trimmed, count=1)


def ordered_start(first_line: str) -> int:
    """Return the start number encoded by the first item of an ordered list."""
    m = _ORDERED_NUMERAL.match(visible_leading_text(first_line))
    if not m:
        return 1
    return max(1, int(m.group(1)))

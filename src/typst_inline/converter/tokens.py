"""Wire tokens of the Typst inline markup and the enums built on them.

These strings are reproduced verbatim in persisted documents, so they must
never change.
"""

from __future__ import annotations

from enum import StrEnum

LINEBREAK = "#linebreak()"
STRIKE_OPEN = "#strike["
STRIKE_KEYWORD = "#strike"
TEXT_OPEN = "#text("
TEXT_KEYWORD = "#text"
INLINE_MATH_LATEX_MARKER = "/*LF_LATEX:"
COMMENT_CLOSE = "*/"
DEFAULT_COLOR = "#000000"

# Characters that a backslash may escape in literal text.
ESCAPABLE = frozenset("*_$#[]\\")


def color_wrapper(color: str) -> str:
    """Return the opening of a colored run, up to and including ``[``."""
    return f'#text(fill: rgb("{color}"))['


class LineKind(StrEnum):
    """Classification of a logical markup line."""

    TEXT = "text"
    BULLET = "bullet"
    ORDERED = "ordered"


class MathFormat(StrEnum):
    """Which representation of an inline math span is authoritative."""

    LATEX = "latex"
    NATIVE = "native"

"""Inline math spans: ``$<native>$`` plus an optional LaTeX side channel.

The native expression between the dollar signs is always present and is
round-trip safe by construction.  The original LaTeX source is carried
opportunistically in a trailing comment::

    $frac(1, 2)$/*LF_LATEX:XGZyYWN7MX17Mn0=*/

so that it survives the lossy LaTeX -> native transpilation.
"""

from __future__ import annotations

import base64
import itertools
import logging
import random
import string
import time
from collections.abc import Callable
from dataclasses import dataclass

from typst_inline.converter.brackets import NOT_FOUND, find_unescaped
from typst_inline.converter.tokens import COMMENT_CLOSE, INLINE_MATH_LATEX_MARKER

logger = logging.getLogger(__name__)

MathIdFactory = Callable[[], str]

_BASE36 = string.digits + string.ascii_lowercase


# ---------------------------------------------------------------------------
# Base64 over UTF-8
# ---------------------------------------------------------------------------

def base64_encode_utf8(text: str) -> str:
    """Encode *text* as base64 of its UTF-8 bytes."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def base64_decode_utf8(payload: str) -> str:
    """Decode a base64 payload into UTF-8 text.

    Raises:
        ValueError: If the payload is not valid base64 or not valid UTF-8.
    """
    raw = base64.b64decode(payload.strip(), validate=True)
    return raw.decode("utf-8")


# ---------------------------------------------------------------------------
# Encode / decode
# ---------------------------------------------------------------------------

def encode_inline_math(native_expr: str, latex_expr: str = "") -> str:
    """Serialize one math span.

    The LaTeX comment is appended only when *latex_expr* is non-empty.
    """
    out = f"${native_expr}$"
    if latex_expr:
        out += f"{INLINE_MATH_LATEX_MARKER}{base64_encode_utf8(latex_expr)}{COMMENT_CLOSE}"
    return out


@dataclass(frozen=True)
class DecodedMath:
    """Result of reading one math span out of a markup string."""

    native_expr: str
    latex_expr: str
    end: int  # index just past the consumed text

    @property
    def has_latex(self) -> bool:
        return bool(self.latex_expr)

    @property
    def display_mode(self) -> bool:
        """Typst renders ``$ x $`` (padded on both sides) as display math."""
        body = self.native_expr
        return len(body) >= 2 and body[0].isspace() and body[-1].isspace()


def decode_inline_math(text: str, start: int) -> DecodedMath | None:
    """Read the math span whose opening ``$`` sits at *start*.

    Returns ``None`` when no closing ``$`` exists.  A LaTeX payload that
    fails to decode yields an empty ``latex_expr``; it never raises.
    """
    end = find_unescaped(text, "$", start + 1)
    if end == NOT_FOUND:
        return None

    native = text[start + 1 : end]
    latex = ""
    next_idx = end + 1
    if text.startswith(INLINE_MATH_LATEX_MARKER, next_idx):
        payload_start = next_idx + len(INLINE_MATH_LATEX_MARKER)
        close = text.find(COMMENT_CLOSE, payload_start)
        if close != NOT_FOUND:
            try:
                latex = base64_decode_utf8(text[payload_start:close])
            except ValueError as exc:
                logger.debug("Discarding undecodable LaTeX payload: %s", exc)
                latex = ""
            next_idx = close + len(COMMENT_CLOSE)

    return DecodedMath(native_expr=native, latex_expr=latex, end=next_idx)


# ---------------------------------------------------------------------------
# Id generation
# ---------------------------------------------------------------------------

class SequentialMathIds:
    """Monotonic id factory: ``im-1``, ``im-2``, ...

    Each instance owns its own counter, so independent converters never
    share state.
    """

    def __init__(self, prefix: str = "im") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


def random_math_id(prefix: str = "im") -> str:
    """Return a time-plus-random id such as ``im-1760000000000-k3j9x0a``."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=7))
    return f"{prefix}-{millis}-{suffix}"

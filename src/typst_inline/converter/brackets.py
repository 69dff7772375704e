"""Delimiter scanning shared by every parser in the codec."""

from __future__ import annotations

from typing import Final

NOT_FOUND: Final = -1


def find_matching(text: str, start: int, open_char: str, close_char: str) -> int:
    """Return the index of the delimiter closing the pair opened at *start*.

    ``text[start]`` is expected to be *open_char*.  Nesting is tracked with
    a depth counter; a backslash escapes the character after it.  Returns
    ``-1`` when the text ends before the depth drops back to zero, which
    callers treat as an unterminated run.
    """
    depth = 0
    idx = start
    while idx < len(text):
        ch = text[idx]
        if ch == "\\":
            idx += 2
            continue
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return idx
        idx += 1
    return NOT_FOUND


def find_unescaped(text: str, char: str, start: int) -> int:
    """Return the index of the first *char* at or after *start* not preceded
    by a backslash escape, or ``-1``.
    """
    idx = start
    while idx < len(text):
        ch = text[idx]
        if ch == "\\":
            idx += 2
            continue
        if ch == char:
            return idx
        idx += 1
    return NOT_FOUND

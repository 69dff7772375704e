"""Encode a rich-text tree into Typst inline markup.

Two passes cooperate:

* ``_walk`` emits inline tokens per node: ``*bold*``, ``_italic_``,
  ``#strike[...]``, ``#text(fill: rgb("#..."))[...]``, raw newlines for
  ``<br>`` and ``$native$/*LF_LATEX:...*/`` for math pills.
* ``_normalize`` handles block-level children: every ``div``/``p`` starts a
  new line and every ``ol``/``ul`` emits one prefixed line per item.

Leaf text is emitted verbatim; escaping is the reader's concern.
"""

from __future__ import annotations

import re

from typst_inline.converter.html_renderer import MATH_PILL_CLASS
from typst_inline.converter.html_tree import parse_html_fragment
from typst_inline.converter.inline_math import encode_inline_math
from typst_inline.converter.math_transpile import MathTranspiler, SymbolMathTranspiler
from typst_inline.converter.rich_tree import ElementNode, RichNode, TextNode
from typst_inline.converter.tokens import LINEBREAK, STRIKE_OPEN, color_wrapper

_BOLD_TAGS = frozenset({"strong", "b"})
_ITALIC_TAGS = frozenset({"em", "i"})
_STRIKE_TAGS = frozenset({"s", "strike", "del"})
_BLOCK_TAGS = frozenset({"div", "p"})
_LIST_TAGS = frozenset({"ol", "ul"})

_STYLE_COLOR = re.compile(r"(?:^|;)\s*color\s*:\s*([^;]+)")
_NEWLINES = re.compile(r"\n+")


def _is_br(node: RichNode) -> bool:
    return isinstance(node, ElementNode) and node.tag == "br"


def _without_trailing_br(children: tuple[RichNode, ...]) -> tuple[RichNode, ...]:
    # Editors pad empty or trailing blocks with a placeholder <br>.
    if children and _is_br(children[-1]):
        return children[:-1]
    return children


def _wrap_per_line(inner: str, marker: str) -> str:
    # Emphasis cannot span a line, so close and reopen it around each break.
    return "\n".join(
        f"{marker}{piece}{marker}" if piece else "" for piece in inner.split("\n")
    )


def rgb_to_hex(color: str) -> str:
    """Convert ``rgb(r, g, b)``/``rgba(...)`` to ``#rrggbb``; pass others through."""
    if not color.startswith("rgb"):
        return color
    channels = re.findall(r"\d+", color)
    if len(channels) < 3:
        return color
    r, g, b = (min(255, int(v)) for v in channels[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


class TreeToMarkupConverter:
    """Stateless converter: rich-text tree -> Typst inline markup.

    Args:
        transpiler: Used only when a math pill has a LaTeX expression but
            no native one.  Defaults to :class:`SymbolMathTranspiler`.
    """

    def __init__(self, transpiler: MathTranspiler | None = None) -> None:
        self._transpiler = transpiler or SymbolMathTranspiler()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def convert(self, root: ElementNode) -> str:
        """Encode the children of *root*; blank lines at either end are dropped."""
        raw = "".join(self._normalize(child) for child in root.children)
        return raw.strip("\n")

    # ------------------------------------------------------------------
    # Block-level pass
    # ------------------------------------------------------------------

    def _normalize(self, node: RichNode) -> str:
        if not isinstance(node, ElementNode):
            return self._walk(node)

        if node.tag in _LIST_TAGS:
            return self._normalize_list(node)

        if node.tag in _BLOCK_TAGS:
            children = _without_trailing_br(node.children)
            return "\n" + "".join(self._normalize(c) for c in children)

        return self._walk(node)

    def _normalize_list(self, node: ElementNode) -> str:
        ordered = node.tag == "ol"
        start = self._list_start(node) if ordered else 1
        lines: list[str] = []
        items = [c for c in node.children if isinstance(c, ElementNode) and c.tag == "li"]
        for idx, li in enumerate(items):
            children = _without_trailing_br(li.children)
            inner = "".join(self._normalize(c) for c in children).strip("\n")
            # Breaks inside one item stay inline instead of starting a new item.
            item = _NEWLINES.sub(f" {LINEBREAK} ", inner).strip()
            prefix = f"{start + idx}. " if ordered else "- "
            lines.append(f"{prefix}{item}".rstrip())
        return "\n" + "\n".join(lines)

    @staticmethod
    def _list_start(node: ElementNode) -> int:
        try:
            start = int(node.get("start", "1") or "1")
        except ValueError:
            return 1
        return start if start > 0 else 1

    # ------------------------------------------------------------------
    # Inline pass
    # ------------------------------------------------------------------

    def _walk(self, node: RichNode) -> str:
        if isinstance(node, TextNode):
            return node.text

        tag = node.tag
        if tag == "br":
            return "\n"

        if tag == "li":
            return "".join(self._walk(c) for c in node.children)

        if self._is_math_pill(node):
            return self._encode_math(node)

        inner = "".join(self._walk(c) for c in node.children)

        if tag in _BOLD_TAGS:
            return _wrap_per_line(inner, "*")
        if tag in _ITALIC_TAGS:
            return _wrap_per_line(inner, "_")
        if tag in _STRIKE_TAGS:
            return f"{STRIKE_OPEN}{inner}]"

        style = node.get("style").lower()
        color_match = _STYLE_COLOR.search(style)
        color = color_match.group(1).strip() if color_match else None
        if tag == "font" and "color" in node.attrs:
            color = node.get("color")

        out = inner
        if color:
            out = f"{color_wrapper(rgb_to_hex(color))}{out}]"
        if "line-through" in style:
            out = f"{STRIKE_OPEN}{out}]"
        return out

    @staticmethod
    def _is_math_pill(node: ElementNode) -> bool:
        return node.has_class(MATH_PILL_CLASS) or "data-inline-math-id" in node.attrs

    def _encode_math(self, node: ElementNode) -> str:
        # ``data-typst``/``data-latex`` are the attribute names of older snapshots.
        native = (node.get("data-native-expr") or node.get("data-typst")).strip()
        latex = (node.get("data-latex-expr") or node.get("data-latex")).strip()
        if not native and latex:
            native = self._transpiler.to_native(latex)
        if native and node.get("data-display-mode") == "true":
            native = f" {native} "
        return encode_inline_math(native, latex)


def html_to_markup(fragment: str, transpiler: MathTranspiler | None = None) -> str:
    """Snapshot an HTML fragment and encode it as inline markup."""
    return TreeToMarkupConverter(transpiler).convert(parse_html_fragment(fragment))

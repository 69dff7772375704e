"""Snapshot an HTML fragment into a :mod:`rich_tree` value."""

from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from typst_inline.converter.rich_tree import ElementNode, RichNode, TextNode

ROOT_TAG = "div"


def _attr_value(value: str | list[str]) -> str:
    # bs4 returns multi-valued attributes such as ``class`` as lists.
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _convert(node: Tag | NavigableString) -> RichNode | None:
    # Comments, doctypes and processing instructions carry no content.
    if isinstance(node, PreformattedString):
        return None
    if isinstance(node, NavigableString):
        return TextNode(str(node))
    if not isinstance(node, Tag):
        return None
    children = tuple(
        child for child in (_convert(c) for c in node.children) if child is not None
    )
    attrs = {name: _attr_value(value) for name, value in node.attrs.items()}
    return ElementNode(tag=node.name.lower(), attrs=attrs, children=children)


def parse_html_fragment(fragment: str) -> ElementNode:
    """Parse *fragment* and return a synthetic ``div`` root holding its nodes."""
    soup = BeautifulSoup(fragment or "", "html.parser")
    children = tuple(
        child for child in (_convert(c) for c in soup.contents) if child is not None
    )
    return ElementNode(tag=ROOT_TAG, children=children)

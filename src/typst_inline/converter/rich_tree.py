"""Serializable snapshot of an editable rich-text tree.

The encoder only needs read access to the tree, so nodes are immutable
values rather than handles into a live editing widget.  Tags are lower-case
HTML-style names (``div``, ``strong``, ``ol``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True)
class TextNode:
    text: str


@dataclass(frozen=True)
class ElementNode:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: tuple[RichNode, ...] = ()

    def get(self, name: str, default: str = "") -> str:
        return self.attrs.get(name, default)

    @property
    def classes(self) -> frozenset[str]:
        return frozenset(self.get("class").split())

    def has_class(self, name: str) -> bool:
        return name in self.classes


RichNode: TypeAlias = TextNode | ElementNode


def el(tag: str, *children: RichNode | str, **attrs: str) -> ElementNode:
    """Build an element; bare strings become text nodes.

    Attribute names use ``_`` for ``-`` and a trailing ``_`` to dodge
    keywords, so ``class_="x"`` and ``data_native_expr="y"`` work.
    """
    normalized = {key.rstrip("_").replace("_", "-"): value for key, value in attrs.items()}
    nodes = tuple(TextNode(c) if isinstance(c, str) else c for c in children)
    return ElementNode(tag=tag.lower(), attrs=normalized, children=nodes)

"""Markup parsing: adapts BeautifulSoup's tree to the generic markup AST.

The transform pipeline only needs a small, parser-neutral tree: every node is
tagged `root`, `text`, `tag`, `script` or `style` and carries `data` (text),
`name` (tag name), `attribs` and `children`. Any tolerant HTML parser can
produce it; this module uses BeautifulSoup's `html.parser` backend, which
recovers from unclosed and mismatched tags instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .errors import NestingDepthError
from .walkers import MAX_DEPTH

AstNodeType = Literal["root", "text", "tag", "script", "style"]

_RAW_TEXT_TYPES: dict[str, AstNodeType] = {"script": "script", "style": "style"}


@dataclass(slots=True)
class AstNode:
    type: AstNodeType
    data: str | None = None
    name: str | None = None
    attribs: dict[str, str] = field(default_factory=dict)
    children: list[AstNode] = field(default_factory=list)
    # Set by the normalize phase on text nodes holding only whitespace.
    is_whitespace: bool = False

    def __repr__(self) -> str:
        if self.type == "text":
            return f"AstNode(text, {self.data!r})"
        if self.name:
            return f"AstNode({self.type}, <{self.name}>, children={len(self.children)})"
        return f"AstNode({self.type}, children={len(self.children)})"


def _attr_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


def _convert_children(parent: Tag, out: list[AstNode], depth: int) -> None:
    for child in parent.children:
        if isinstance(child, Tag):
            if depth > MAX_DEPTH:
                raise NestingDepthError(MAX_DEPTH, phase="parse")
            name = (child.name or "").lower()
            node = AstNode(
                type=_RAW_TEXT_TYPES.get(name, "tag"),
                name=name,
                attribs={str(k).lower(): _attr_value(v) for k, v in child.attrs.items()},
            )
            _convert_children(child, node.children, depth + 1)
            out.append(node)
            continue

        # Comments, doctypes, CDATA and processing instructions are all
        # PreformattedString subclasses; none of them carry renderable text.
        if isinstance(child, PreformattedString):
            continue

        if isinstance(child, NavigableString):
            if depth > MAX_DEPTH:
                raise NestingDepthError(MAX_DEPTH, phase="parse")
            out.append(AstNode(type="text", data=str(child)))


def parse_markup(markup: str) -> AstNode:
    """Parse `markup` into a root `AstNode`.

    Malformed markup is recovered permissively; this never raises for bad
    HTML. Character references are decoded in text and attribute values.
    """
    soup = BeautifulSoup(markup or "", "html.parser", multi_valued_attributes=None)
    root = AstNode(type="root")
    _convert_children(soup, root.children, 1)
    return root

"""Semantic node tree.

A transform produces a list of `ElementNode` / `TextNode` objects. Elements
describe structure (a target tag such as "view", "text" or "image", props, a
structural role and a capability descriptor); text nodes are the leaves and
carry formatting marks accumulated from their markup ancestors.

Nodes are plain mutable objects: they are built once in the structure phase
and then edited in place by later phases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from .walkers import iter_nodes

ElementRole = Literal["block", "inline", "textContainer", "image", "table", "row", "cell"]
LayoutKind = Literal["block", "inline", "flex", "table"]

MARK_NAMES: tuple[str, ...] = ("bold", "italic", "underline", "code")

TEXT_SOURCE_TEXT = "text"
TEXT_SOURCE_BREAK = "br"
TEXT_SOURCE_LIST_MARKER = "li-marker"


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Structural constraints of an element, independent of visual style."""

    layout: LayoutKind | None = None
    is_void: bool = False
    text_container: bool = False


@dataclass(slots=True, eq=False)
class ElementNode:
    kind: ClassVar[str] = "element"

    tag: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list[SemanticNode] = field(default_factory=list)
    role: ElementRole | None = None
    capabilities: Capabilities | None = None
    meta: dict[str, Any] | None = None

    @property
    def source_tag(self) -> str | None:
        return self.meta.get("source_tag") if self.meta else None

    @property
    def source_attrs(self) -> dict[str, str]:
        if not self.meta:
            return {}
        return self.meta.get("source_attrs") or {}

    def __repr__(self) -> str:
        source = f" <{self.source_tag}>" if self.source_tag else ""
        return f"ElementNode({self.tag!r}{source}, children={len(self.children)})"


@dataclass(slots=True, eq=False)
class TextNode:
    kind: ClassVar[str] = "text"

    content: str
    marks: dict[str, bool] | None = None
    inheritable_styles: dict[str, Any] | None = None
    inheritable_classes: str | None = None
    meta: dict[str, Any] | None = None

    @property
    def source(self) -> str | None:
        return self.meta.get("source") if self.meta else None

    def __repr__(self) -> str:
        marks = f", marks={self.marks!r}" if self.marks else ""
        return f"TextNode({self.content!r}{marks})"


SemanticNode = ElementNode | TextNode


# -----------------
# Construction
# -----------------


def create_root_node() -> ElementNode:
    """Create the synthetic container the structure phase builds into."""
    return ElementNode(tag="root", meta={})


def create_node(
    kind: str | None = None,
    *,
    content: str | None = None,
    marks: dict[str, bool] | None = None,
    inheritable_styles: dict[str, Any] | None = None,
    inheritable_classes: str | None = None,
    tag: str | None = None,
    props: dict[str, Any] | None = None,
    children: list[SemanticNode] | None = None,
    role: ElementRole | None = None,
    capabilities: Capabilities | None = None,
    meta: dict[str, Any] | None = None,
) -> SemanticNode:
    """Build a text or element node, setting only the fields that have a value.

    A text node is built when `kind == "text"`, or when no kind is given and
    `content` is. Everything else becomes an element (tag defaults to "view").
    Empty marks, styles and class strings are left unset.
    """
    if kind == "text" or (kind is None and content is not None):
        return TextNode(
            content=content or "",
            marks=marks or None,
            inheritable_styles=inheritable_styles or None,
            inheritable_classes=inheritable_classes or None,
            meta=meta or None,
        )

    return ElementNode(
        tag=tag or "view",
        props=props if props is not None else {},
        children=children if children is not None else [],
        role=role,
        capabilities=capabilities,
        meta=meta or None,
    )


def replace_node(root: SemanticNode, target: SemanticNode, replacement: SemanticNode) -> SemanticNode:
    """Replace `target` (found by identity) with `replacement` inside `root`.

    Returns the root of the tree: `replacement` itself when `target` is
    `root`, otherwise `root`. A `target` that is not in the tree leaves it
    unchanged.
    """
    if root is target:
        return replacement

    for node in iter_nodes(root):
        if node.kind != "element":
            continue
        children = node.children
        for i, child in enumerate(children):
            if child is target:
                children[i] = replacement
                return root
    return root


# -----------------
# Text merging
# -----------------


def has_marks(marks: dict[str, bool] | None) -> bool:
    return bool(marks) and any(marks.values())


def marks_equal(a: dict[str, bool] | None, b: dict[str, bool] | None) -> bool:
    """Absent marks and an empty marks bag compare equal."""
    return (a or {}) == (b or {})


def _is_break(node: TextNode) -> bool:
    return node.source == TEXT_SOURCE_BREAK


def merge_adjacent_text_nodes(nodes: list[SemanticNode]) -> list[SemanticNode]:
    """Collapse runs of adjacent text nodes that have equal marks.

    Content is concatenated into the first node of each run. When either side
    of a join came from a line break, whitespace next to the break is trimmed
    (the break itself is kept) and the break metadata is dropped from the
    merged node.
    """
    merged: list[SemanticNode] = []
    # Merged nodes whose content currently ends with a line break. Their meta
    # is gone, so the break has to be remembered here.
    ends_with_break: set[int] = set()

    for node in nodes:
        last = merged[-1] if merged else None
        if (
            last is None
            or last.kind != "text"
            or node.kind != "text"
            or not marks_equal(last.marks, node.marks)
        ):
            merged.append(node)
            continue

        last_break = _is_break(last) or id(last) in ends_with_break
        node_break = _is_break(node)
        content = node.content
        if last_break or node_break:
            if last_break and not node_break:
                content = content.lstrip()
            if node_break and not last_break:
                last.content = last.content.rstrip()
            last.meta = None

        last.content += content
        if node_break:
            ends_with_break.add(id(last))
        elif content:
            ends_with_break.discard(id(last))

    return merged


def merge_all_text_nodes(root: SemanticNode) -> SemanticNode:
    """Apply `merge_adjacent_text_nodes` to every child list in the tree."""
    for node in iter_nodes(root):
        if node.kind == "element" and len(node.children) > 1:
            node.children = merge_adjacent_text_nodes(node.children)
    return root


# -----------------
# Export
# -----------------


def capabilities_to_dict(capabilities: Capabilities) -> dict[str, Any]:
    out: dict[str, Any] = {"is_void": capabilities.is_void}
    if capabilities.layout is not None:
        out["layout"] = capabilities.layout
    if capabilities.text_container:
        out["text_container"] = True
    return out


def to_dict(node: SemanticNode) -> dict[str, Any]:
    """Convert a node (and its subtree) to plain dicts, omitting unset fields."""
    if node.kind == "text":
        out: dict[str, Any] = {"kind": "text", "content": node.content}
        if node.marks:
            out["marks"] = dict(node.marks)
        if node.inheritable_styles:
            out["inheritable_styles"] = dict(node.inheritable_styles)
        if node.inheritable_classes:
            out["inheritable_classes"] = node.inheritable_classes
        if node.meta:
            out["meta"] = dict(node.meta)
        return out

    out = {
        "kind": "element",
        "tag": node.tag,
        "props": {k: dict(v) if isinstance(v, dict) else v for k, v in node.props.items()},
        "children": [to_dict(child) for child in node.children],
    }
    if node.role is not None:
        out["role"] = node.role
    if node.capabilities is not None:
        out["capabilities"] = capabilities_to_dict(node.capabilities)
    if node.meta:
        out["meta"] = dict(node.meta)
    return out

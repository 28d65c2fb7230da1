"""Structure-phase plugins: build the semantic tree and normalise lists and tables.

`block-structure` converts the markup AST into semantic nodes. Mapped tags
become elements, text becomes text nodes, `<br>` becomes a newline text node,
and inline formatting tags (`<b>`, `<em>`, ...) become marks on the text below
them instead of wrapper elements. Tags missing from the tag table are dropped
together with everything inside them.

The other plugins in this module rewrite the tree built by `block-structure`:
merging adjacent text, adding list markers and unwrapping single-child table
sections.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..errors import NestingDepthError
from ..nodes import (
    TEXT_SOURCE_BREAK,
    TEXT_SOURCE_LIST_MARKER,
    TEXT_SOURCE_TEXT,
    ElementNode,
    TextNode,
    merge_adjacent_text_nodes,
    merge_all_text_nodes,
)
from ..options import StyleMode
from ..plugin import Phase, TransformPlugin
from ..style import extract_inheritable_styles
from ..stylesheet import class_name_for_tag, text_class_name_for_tag
from ..tags import (
    INLINE_FORMATTING_MARKS,
    LIST_ITEM_TAG,
    LIST_TAGS,
    TABLE_SECTION_TAGS,
    TABLE_TAG,
    TagMapping,
    get_tag_mapping,
)
from ..walkers import MAX_DEPTH, iter_nodes

if TYPE_CHECKING:
    from ..context import TransformContext
    from ..markup import AstNode
    from ..nodes import SemanticNode


class _Inherited:
    """What a markup node passes down to the text beneath it."""

    __slots__ = ("classes", "marks", "styles")

    def __init__(
        self,
        marks: Mapping[str, bool] | None = None,
        styles: Mapping[str, Any] | None = None,
        classes: tuple[str, ...] = (),
    ) -> None:
        self.marks = marks or {}
        self.styles = styles or {}
        self.classes = classes

    def with_marks(self, marks: Mapping[str, bool]) -> _Inherited:
        return _Inherited({**self.marks, **marks}, self.styles, self.classes)

    def with_element(self, tag: str, mapping: TagMapping, style_mode: StyleMode) -> _Inherited:
        if style_mode == StyleMode.CSS_CLASS:
            text_class = text_class_name_for_tag(tag)
            if text_class is None or text_class in self.classes:
                return self
            return _Inherited(self.marks, self.styles, (*self.classes, text_class))

        styles = extract_inheritable_styles(mapping.default_style)
        if not styles:
            return self
        # Nearest ancestor wins.
        return _Inherited(self.marks, {**self.styles, **styles}, self.classes)

    def text_node(self, content: str, source: str) -> TextNode:
        return TextNode(
            content=content,
            marks=dict(self.marks) or None,
            inheritable_styles=dict(self.styles) or None,
            inheritable_classes=" ".join(self.classes) or None,
            meta={"source": source},
        )


def _element_props(tag: str, mapping: TagMapping, style_mode: StyleMode) -> dict[str, Any]:
    if style_mode == StyleMode.CSS_CLASS:
        class_name = class_name_for_tag(tag)
        return {"className": class_name} if class_name else {}
    return {"style": dict(mapping.default_style)}


# A lone child with one of these roles still gets a `text` wrapper.
_WRAPPED_ROLES = frozenset({"block", "textContainer", "table", "row", "cell"})


def _needs_wrapper(node: SemanticNode) -> bool:
    return node.kind == "element" and node.role in _WRAPPED_ROLES


def convert_ast_node(
    node: AstNode,
    style_mode: StyleMode | str = StyleMode.INLINE,
    inherited: _Inherited | None = None,
    depth: int = 0,
) -> list[SemanticNode]:
    """Convert one markup AST node into zero or more semantic nodes."""
    if depth > MAX_DEPTH:
        raise NestingDepthError(MAX_DEPTH, phase=Phase.STRUCTURE.value)
    style_mode = StyleMode(style_mode)
    if inherited is None:
        inherited = _Inherited()

    if node.type == "text":
        data = node.data or ""
        if node.is_whitespace or not data.strip():
            return []
        return [inherited.text_node(data, TEXT_SOURCE_TEXT)]

    if node.type == "root":
        out: list[SemanticNode] = []
        for child in node.children:
            out.extend(convert_ast_node(child, style_mode, inherited, depth + 1))
        return out

    if node.type != "tag":
        # script and style
        return []

    tag = node.name or ""
    mapping = get_tag_mapping(tag)
    if mapping is None:
        return []

    if mapping.is_line_break:
        return [inherited.text_node("\n", TEXT_SOURCE_BREAK)]

    marks = INLINE_FORMATTING_MARKS.get(tag)
    if marks is not None:
        children: list[SemanticNode] = []
        child_inherited = inherited.with_marks(marks)
        for child in node.children:
            children.extend(convert_ast_node(child, style_mode, child_inherited, depth + 1))
        if not children:
            return []
        children = merge_adjacent_text_nodes(children)
        if len(children) == 1 and not _needs_wrapper(children[0]):
            return children
        return [
            ElementNode(
                tag="text",
                props=_element_props(tag, mapping, style_mode),
                children=children,
                role=mapping.role,
                capabilities=mapping.capabilities,
                meta={"source_tag": tag, "source_attrs": dict(node.attribs)},
            )
        ]

    element = ElementNode(
        tag=mapping.target_tag,
        props=_element_props(tag, mapping, style_mode),
        role=mapping.role,
        capabilities=mapping.capabilities,
        meta={"source_tag": tag, "source_attrs": dict(node.attribs)},
    )
    if not mapping.is_void:
        child_inherited = inherited.with_element(tag, mapping, style_mode)
        for child in node.children:
            element.children.extend(convert_ast_node(child, style_mode, child_inherited, depth + 1))
    return [element]


def apply_block_structure(ctx: TransformContext) -> None:
    style_mode = ctx.option("style_mode", StyleMode.INLINE)
    root = ctx.root
    if root.kind != "element":
        raise TypeError(f"Unsupported root node: {type(root).__name__}")
    try:
        root.children.extend(convert_ast_node(ctx.ast, style_mode))
    except NestingDepthError as exc:
        exc.html = ctx.source
        raise


def apply_text_merge(ctx: TransformContext) -> None:
    ctx.root = merge_all_text_nodes(ctx.root)


# -----------------
# Lists
# -----------------


def add_list_markers(list_node: ElementNode) -> None:
    """Prefix each item of a `<ul>`/`<ol>` element with its bullet or number."""
    ordered = list_node.source_tag == "ol"
    number = 0
    for item in list_node.children:
        if item.kind != "element" or item.source_tag != LIST_ITEM_TAG:
            continue
        number += 1
        marker = f"{number}. " if ordered else "• "
        first = item.children[0] if item.children else None
        if first is not None and first.kind == "text":
            first.content = marker + first.content
        else:
            item.children.insert(0, TextNode(content=marker, meta={"source": TEXT_SOURCE_LIST_MARKER}))


def apply_list_structure(ctx: TransformContext) -> None:
    for node in iter_nodes(ctx.root):
        if node.kind == "element" and node.source_tag in LIST_TAGS:
            add_list_markers(node)


# -----------------
# Tables
# -----------------


def flatten_table_sections(table: ElementNode) -> None:
    """Replace single-child `<thead>`/`<tbody>`/`<tfoot>` wrappers by their child."""
    children = table.children
    for i, child in enumerate(children):
        if child.kind == "element" and child.source_tag in TABLE_SECTION_TAGS and len(child.children) == 1:
            children[i] = child.children[0]


def apply_table_structure(ctx: TransformContext) -> None:
    for node in iter_nodes(ctx.root):
        if node.kind == "element" and node.source_tag == TABLE_TAG:
            flatten_table_sections(node)


BLOCK_STRUCTURE = TransformPlugin("block-structure", Phase.STRUCTURE, apply_block_structure, order=10)
TEXT_MERGE = TransformPlugin("text-merge", Phase.STRUCTURE, apply_text_merge, order=15)
LIST_STRUCTURE = TransformPlugin("list-structure", Phase.STRUCTURE, apply_list_structure, order=20)
TABLE_STRUCTURE = TransformPlugin("table-structure", Phase.STRUCTURE, apply_table_structure, order=30)

"""Capability-phase plugins: style, layout and media.

Each plugin offers `register_handlers`, so the engine serves all three from a
single tree walk, and a plain `apply` that walks the tree on its own for use
outside the executor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..nodes import Capabilities
from ..plugin import ANY_ELEMENT_KEY, Phase, TransformPlugin
from ..style import parse_style_string
from ..tags import IMAGE_TAG
from ..walkers import iter_nodes

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..context import TransformContext
    from ..nodes import ElementNode, SemanticNode
    from ..plugin import NodeHandler

DEFAULT_CAPABILITIES = Capabilities(layout="flex", is_void=False)
IMAGE_FALLBACK_WIDTH = "100%"
IMAGE_FALLBACK_HEIGHT = "auto"


def _apply_to_elements(ctx: TransformContext, handler: NodeHandler) -> None:
    for node in iter_nodes(ctx.root):
        if node.kind == "element":
            handler(node, ctx)


# -----------------
# Style
# -----------------


def merge_style_attrs(node: ElementNode, *, remove_all_style: bool, remove_all_class: bool) -> None:
    """Merge the raw `style` and `class` attributes of `node` into its props."""
    attrs = node.source_attrs
    if not attrs:
        return

    if not remove_all_style:
        raw_style = attrs.get("style")
        if raw_style:
            parsed = parse_style_string(raw_style)
            if parsed:
                # Attribute declarations win over the default element style.
                node.props["style"] = {**(node.props.get("style") or {}), **parsed}

    if not remove_all_class:
        raw_class = " ".join(attrs.get("class", "").split())
        if raw_class:
            existing = node.props.get("className")
            node.props["className"] = f"{existing} {raw_class}" if existing else raw_class


def register_style_handlers(ctx: TransformContext) -> Mapping[str, NodeHandler]:
    remove_all_style = bool(ctx.option("remove_all_style", False))
    remove_all_class = bool(ctx.option("remove_all_class", True))

    def handle(node: SemanticNode, _ctx: TransformContext) -> None:
        merge_style_attrs(node, remove_all_style=remove_all_style, remove_all_class=remove_all_class)

    return {ANY_ELEMENT_KEY: handle}


def apply_style_capability(ctx: TransformContext) -> None:
    _apply_to_elements(ctx, register_style_handlers(ctx)[ANY_ELEMENT_KEY])


# -----------------
# Layout
# -----------------


def ensure_capabilities(node: SemanticNode, _ctx: TransformContext | None = None) -> None:
    if node.kind == "element" and node.capabilities is None:
        node.capabilities = DEFAULT_CAPABILITIES


def register_layout_handlers(ctx: TransformContext) -> Mapping[str, NodeHandler]:
    return {ANY_ELEMENT_KEY: ensure_capabilities}


def apply_layout_capability(ctx: TransformContext) -> None:
    _apply_to_elements(ctx, ensure_capabilities)


# -----------------
# Media
# -----------------


def resolve_image_props(node: SemanticNode, _ctx: TransformContext | None = None) -> None:
    """Copy `src` and settle width/height on an `<img>`-derived image node.

    Sizes come from the `width`/`height` attributes, then from the `style`
    attribute (read even when style attributes are otherwise removed), then
    fall back to full width and automatic height.
    """
    if node.kind != "element" or node.source_tag != IMAGE_TAG:
        return
    attrs = node.source_attrs

    src = attrs.get("src")
    if src:
        node.props["src"] = src

    style = dict(node.props.get("style") or {})
    if attrs.get("width"):
        style["width"] = attrs["width"]
    if attrs.get("height"):
        style["height"] = attrs["height"]

    if not style.get("width") or not style.get("height"):
        from_attr = parse_style_string(attrs.get("style", ""))
        if not style.get("width") and from_attr.get("width"):
            style["width"] = from_attr["width"]
        if not style.get("height") and from_attr.get("height"):
            style["height"] = from_attr["height"]

    if not style.get("width"):
        style["width"] = IMAGE_FALLBACK_WIDTH
    if not style.get("height"):
        style["height"] = IMAGE_FALLBACK_HEIGHT
    node.props["style"] = style


def register_media_handlers(ctx: TransformContext) -> Mapping[str, NodeHandler]:
    return {"image": resolve_image_props}


def apply_media_capability(ctx: TransformContext) -> None:
    _apply_to_elements(ctx, resolve_image_props)


STYLE_CAPABILITY = TransformPlugin(
    "style-capability",
    Phase.CAPABILITY,
    apply_style_capability,
    order=10,
    register_handlers=register_style_handlers,
)
LAYOUT_CAPABILITY = TransformPlugin(
    "layout-capability",
    Phase.CAPABILITY,
    apply_layout_capability,
    order=20,
    register_handlers=register_layout_handlers,
)
MEDIA_CAPABILITY = TransformPlugin(
    "media-capability",
    Phase.CAPABILITY,
    apply_media_capability,
    order=100,
    register_handlers=register_media_handlers,
)

"""Normalize-phase plugins: light clean-up of the markup AST."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..plugin import Phase, TransformPlugin

if TYPE_CHECKING:
    from ..context import TransformContext
    from ..markup import AstNode


def _flag_whitespace(node: AstNode) -> None:
    if node.type == "text":
        node.is_whitespace = not (node.data or "").strip()


def apply_html_normalize(ctx: TransformContext) -> None:
    """Flag text nodes that hold only whitespace so the structure phase can skip them."""
    ctx.walk_ast(_flag_whitespace)


HTML_NORMALIZE = TransformPlugin("html-normalize", Phase.NORMALIZE, apply_html_normalize, order=10)

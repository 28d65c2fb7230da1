"""Built-in transform plugins, grouped by phase."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .capability import LAYOUT_CAPABILITY, MEDIA_CAPABILITY, STYLE_CAPABILITY
from .normalize import HTML_NORMALIZE
from .structure import BLOCK_STRUCTURE, LIST_STRUCTURE, TABLE_STRUCTURE, TEXT_MERGE

if TYPE_CHECKING:
    from ..plugin import TransformPlugin

BUILTIN_PLUGINS = (
    HTML_NORMALIZE,
    BLOCK_STRUCTURE,
    TEXT_MERGE,
    LIST_STRUCTURE,
    TABLE_STRUCTURE,
    STYLE_CAPABILITY,
    LAYOUT_CAPABILITY,
    MEDIA_CAPABILITY,
)


def get_builtin_plugins() -> list[TransformPlugin]:
    """Return a fresh list of the built-in plugins in declaration order."""
    return list(BUILTIN_PLUGINS)


__all__ = [
    "BLOCK_STRUCTURE",
    "BUILTIN_PLUGINS",
    "HTML_NORMALIZE",
    "LAYOUT_CAPABILITY",
    "LIST_STRUCTURE",
    "MEDIA_CAPABILITY",
    "STYLE_CAPABILITY",
    "TABLE_STRUCTURE",
    "TEXT_MERGE",
    "get_builtin_plugins",
]

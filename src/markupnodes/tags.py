"""Markup tag to semantic node mapping table.

Only tags listed in `TAG_MAP` survive a transform. Anything else (script,
style, iframe, object, form controls, unknown tags) is dropped together with
its whole subtree by the structure phase.

Default styles reference `var(--mkn-*)` colour variables; see
`stylesheet.LIGHT_MODE_VARS` / `DARK_MODE_VARS` for their values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .nodes import Capabilities, ElementRole

# Target tag used by the line-break mapping. The structure phase turns it into
# a newline text node rather than an element.
LINE_BREAK = "#break"


@dataclass(frozen=True, slots=True)
class TagMapping:
    target_tag: str
    role: ElementRole
    capabilities: Capabilities
    default_style: Mapping[str, str | int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Mappings are shared by every node built from them; freeze the style.
        if not isinstance(self.default_style, MappingProxyType):
            object.__setattr__(self, "default_style", MappingProxyType(dict(self.default_style)))

    def with_style(self, **style: str | int) -> TagMapping:
        """Return a copy whose default style extends this one."""
        return TagMapping(self.target_tag, self.role, self.capabilities, {**self.default_style, **style})

    @property
    def is_line_break(self) -> bool:
        return self.target_tag == LINE_BREAK

    @property
    def is_void(self) -> bool:
        return self.capabilities.is_void


_TEXT_COLOR = "var(--mkn-text-color)"
_BORDER_COLOR = "var(--mkn-border-color)"

_BLOCK = TagMapping(
    "view",
    "block",
    Capabilities(layout="flex"),
    {"flexDirection": "column"},
)

_INLINE_TEXT = TagMapping(
    "text",
    "inline",
    Capabilities(layout="inline", text_container=True),
    {"color": _TEXT_COLOR},
)

_TEXT_CONTAINER = TagMapping(
    "text",
    "textContainer",
    Capabilities(layout="block", text_container=True),
    {"color": _TEXT_COLOR},
)

_TABLE_SECTION = TagMapping("view", "block", Capabilities(layout="flex"))

_LIST = _BLOCK.with_style(paddingLeft="5px")

_CELL = TagMapping(
    "view",
    "cell",
    Capabilities(layout="flex"),
    {
        "display": "flex",
        "flexGrow": 1,
        "flexShrink": 1,
        "flexBasis": 0,
        "padding": "8px",
        "borderWidth": "1px",
        "borderStyle": "solid",
        "borderColor": _BORDER_COLOR,
    },
)


def _heading(font_size: str, margin: str) -> TagMapping:
    return _TEXT_CONTAINER.with_style(fontSize=font_size, fontWeight="bold", margin=margin)


TAG_MAP: Mapping[str, TagMapping] = MappingProxyType(
    {
        # Block containers
        "div": _BLOCK,
        "section": _BLOCK,
        "article": _BLOCK,
        "header": _BLOCK,
        "footer": _BLOCK,
        "nav": _BLOCK,
        "aside": _BLOCK,
        # Text containers
        "p": _TEXT_CONTAINER.with_style(marginBottom="1em"),
        "span": _INLINE_TEXT,
        "h1": _heading("32px", "10px 0"),
        "h2": _heading("24px", "12px 0"),
        "h3": _heading("20px", "14px 0"),
        "h4": _heading("18px", "16px 0"),
        "h5": _heading("16px", "18px 0"),
        "h6": _heading("14px", "20px 0"),
        # Inline formatting (become marks, see INLINE_FORMATTING_MARKS)
        "strong": _INLINE_TEXT.with_style(fontWeight="bold"),
        "b": _INLINE_TEXT.with_style(fontWeight="bold"),
        "em": _INLINE_TEXT.with_style(fontStyle="italic"),
        "i": _INLINE_TEXT.with_style(fontStyle="italic"),
        "u": _INLINE_TEXT.with_style(textDecoration="underline"),
        "code": _INLINE_TEXT.with_style(fontFamily="monospace"),
        # Links
        "a": TagMapping(
            "text",
            "inline",
            Capabilities(layout="inline", text_container=True),
            {"color": "blue", "textDecoration": "underline"},
        ),
        # Rules, quotes, preformatted text
        "hr": TagMapping(
            "view",
            "block",
            Capabilities(layout="block", is_void=True),
            {"height": "1px", "backgroundColor": "var(--mkn-divider-color)", "margin": "1em 0"},
        ),
        "blockquote": _BLOCK.with_style(
            marginLeft="40px",
            marginRight="40px",
            paddingLeft="16px",
            borderLeft="4px solid var(--mkn-blockquote-border)",
        ),
        "pre": TagMapping(
            "text",
            "block",
            Capabilities(layout="block", text_container=True),
            {
                "color": _TEXT_COLOR,
                "fontFamily": "monospace",
                "backgroundColor": "var(--mkn-bg-color-tertiary)",
                "padding": "16px",
                "overflow": "auto",
            },
        ),
        # Media
        "img": TagMapping("image", "image", Capabilities(layout="flex", is_void=True)),
        "br": TagMapping(LINE_BREAK, "inline", Capabilities(layout="inline", is_void=True)),
        # Lists
        "ul": _LIST,
        "ol": _LIST,
        "li": _BLOCK.with_style(color=_TEXT_COLOR),
        # Tables
        "table": TagMapping(
            "view",
            "table",
            Capabilities(layout="flex"),
            {
                "display": "flex",
                "flexDirection": "column",
                "borderWidth": "1px",
                "borderStyle": "solid",
                "borderColor": _BORDER_COLOR,
            },
        ),
        "thead": _TABLE_SECTION,
        "tbody": _TABLE_SECTION,
        "tfoot": _TABLE_SECTION,
        "tr": TagMapping("view", "row", Capabilities(layout="flex"), {"display": "flex", "flexDirection": "row"}),
        "th": _CELL.with_style(
            backgroundColor="var(--mkn-bg-color-secondary)",
            fontWeight="bold",
            color=_TEXT_COLOR,
        ),
        "td": _CELL.with_style(color="var(--mkn-text-color-secondary)"),
    }
)

# Formatting tags that contribute marks to their descendant text instead of
# producing a wrapper element.
INLINE_FORMATTING_MARKS: Mapping[str, Mapping[str, bool]] = MappingProxyType(
    {
        "strong": MappingProxyType({"bold": True}),
        "b": MappingProxyType({"bold": True}),
        "em": MappingProxyType({"italic": True}),
        "i": MappingProxyType({"italic": True}),
        "u": MappingProxyType({"underline": True}),
        "code": MappingProxyType({"code": True}),
    }
)

LIST_TAGS = frozenset({"ul", "ol"})
LIST_ITEM_TAG = "li"
TABLE_TAG = "table"
TABLE_SECTION_TAGS = frozenset({"thead", "tbody", "tfoot"})
IMAGE_TAG = "img"


def get_tag_mapping(tag: str | None) -> TagMapping | None:
    if not tag:
        return None
    return TAG_MAP.get(tag.strip().lower())

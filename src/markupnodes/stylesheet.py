"""Static stylesheet generation for css-class style mode.

In `style_mode="css-class"` the transform does not inline default element
styles; it tags nodes with `mkn-<tag>` class names (and text nodes with
`mkn-<tag>-text`) instead. `generate_css()` emits the matching stylesheet from
the same tag table. It is meant to be run ahead of time (e.g. at build time),
never during a transform.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from .style import camel_to_kebab, extract_inheritable_styles
from .tags import TAG_MAP

CLASS_PREFIX = "mkn"
DEFAULT_ROOT_CLASS = "markupnodes"
DARK_MODE_CLASS = f"{CLASS_PREFIX}-dark"

# Numeric values of these properties are written without a unit.
UNITLESS_PROPERTIES = frozenset({"flexGrow", "flexShrink", "fontWeight", "lineHeight", "opacity", "zIndex", "order"})

LIGHT_MODE_VARS: Mapping[str, str] = {
    "--mkn-text-color": "#212529",
    "--mkn-text-color-secondary": "#495057",
    "--mkn-border-color": "#dee2e6",
    "--mkn-bg-color-secondary": "#f8f9fa",
    "--mkn-bg-color-tertiary": "#f5f5f5",
    "--mkn-divider-color": "#ccc",
    "--mkn-blockquote-border": "#ddd",
}

DARK_MODE_VARS: Mapping[str, str] = {
    "--mkn-text-color": "#e9ecef",
    "--mkn-text-color-secondary": "#adb5bd",
    "--mkn-border-color": "#404040",
    "--mkn-bg-color-secondary": "#2d2d2d",
    "--mkn-bg-color-tertiary": "#1e1e1e",
    "--mkn-divider-color": "#3a3a3a",
    "--mkn-blockquote-border": "#555",
}

_VAR_RE = re.compile(r"var\((--mkn-[a-z0-9-]+)\)")


def class_name_for_tag(tag: str) -> str | None:
    """Class carrying `tag`'s default style, or None if it has none."""
    mapping = TAG_MAP.get(tag)
    if mapping is None or not mapping.default_style:
        return None
    return f"{CLASS_PREFIX}-{tag}"


def text_class_name_for_tag(tag: str) -> str | None:
    """Class carrying the inheritable text styles of `tag`, or None."""
    mapping = TAG_MAP.get(tag)
    if mapping is None or not extract_inheritable_styles(mapping.default_style):
        return None
    return f"{CLASS_PREFIX}-{tag}-text"


def style_value_to_css(prop: str, value: str | int | float) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        if prop in UNITLESS_PROPERTIES or value == 0:
            return str(value)
        return f"{value}px"
    return str(value)


def style_to_css(style: Mapping[str, str | int | float], indent: str = "  ") -> str:
    return "\n".join(f"{indent}{camel_to_kebab(key)}: {style_value_to_css(key, value)};" for key, value in style.items())


def _rule(selector: str, style: Mapping[str, str | int | float]) -> str:
    return f"{selector} {{\n{style_to_css(style)}\n}}"


def generate_css(root_class: str = DEFAULT_ROOT_CLASS) -> str:
    """Generate the stylesheet for every styled tag in the tag table."""
    rules: list[str] = []
    for tag, mapping in TAG_MAP.items():
        class_name = class_name_for_tag(tag)
        if class_name is not None:
            rules.append(_rule(f".{root_class} .{class_name}", mapping.default_style))

    for tag, mapping in TAG_MAP.items():
        text_class = text_class_name_for_tag(tag)
        if text_class is not None:
            rules.append(_rule(f".{root_class} .{text_class}", extract_inheritable_styles(mapping.default_style)))

    header = (
        "/*\n"
        " * markupnodes - default element styles\n"
        " * Generated from the tag mapping table\n"
        f" * Root class: .{root_class}\n"
        " */"
    )
    return f"{header}\n\n" + "\n\n".join(rules) + "\n"


# -----------------
# CSS variables
# -----------------


def generate_css_variables(root_class: str, variables: Mapping[str, str]) -> str:
    entries = "\n".join(f"  {name}: {value};" for name, value in variables.items())
    return f".{root_class} {{\n{entries}\n}}"


def generate_all_css_variables(root_class: str = DEFAULT_ROOT_CLASS) -> str:
    light = generate_css_variables(root_class, LIGHT_MODE_VARS)
    dark = generate_css_variables(f"{root_class}.{DARK_MODE_CLASS}", DARK_MODE_VARS)
    return f"/* CSS variables */\n{light}\n\n/* Dark mode CSS variables */\n{dark}\n"


def resolve_css_variables(value: str, mode: str = "light") -> str:
    """Replace `var(--mkn-*)` references in `value` with concrete colours.

    For hosts that cannot evaluate CSS variables. Unknown variables are left
    as written.
    """
    if mode not in ("light", "dark"):
        raise ValueError(f"Unknown colour mode: {mode!r}")
    variables = DARK_MODE_VARS if mode == "dark" else LIGHT_MODE_VARS
    return _VAR_RE.sub(lambda m: variables.get(m.group(1), m.group(0)), value)

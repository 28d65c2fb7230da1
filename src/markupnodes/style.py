"""Inline style string parsing and style key helpers.

Style mappings use camelCase keys (`fontSize`, `flexDirection`) throughout the
engine. Raw `style="..."` attribute values are parsed into that form here, and
the stylesheet generator converts back to kebab-case.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

_KEBAB_RE = re.compile(r"-([a-z])")
_CAMEL_RE = re.compile(r"([a-z0-9])([A-Z])")

# Core font properties copied from an element's default style onto the text
# nodes beneath it.
INHERITABLE_PROPERTIES: tuple[str, ...] = (
    "fontFamily",
    "fontSize",
    "fontWeight",
    "fontStyle",
    "lineHeight",
    "color",
)


def kebab_to_camel(name: str) -> str:
    if name.startswith("--"):
        # Custom properties are case-sensitive and keep their spelling.
        return name
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)


def camel_to_kebab(name: str) -> str:
    if name.startswith("--"):
        return name
    out = _CAMEL_RE.sub(r"\1-\2", name).lower()
    # WebkitTransform -> -webkit-transform
    if name[:1].isupper():
        out = f"-{out}"
    return out


def parse_style_string(style: str) -> dict[str, str]:
    """Parse `"font-size: 14px; color: red"` into `{"fontSize": "14px", "color": "red"}`.

    Declarations are split on `;` and each one on its first `:`, so values
    such as `url(http://example.com/a.png)` survive intact. Declarations with
    no colon, an empty name or an empty value are skipped; the rest of the
    string is still parsed. Later duplicates win.
    """
    result: dict[str, str] = {}
    if not style:
        return result

    for declaration in style.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip()
        value = value.strip()
        if not name or not value:
            continue
        if not name.startswith("--"):
            name = name.lower()
        result[kebab_to_camel(name)] = value
    return result


def extract_inheritable_styles(style: Mapping[str, object] | None) -> dict[str, object]:
    """Return only the inheritable font properties of `style`."""
    if not style:
        return {}
    return {prop: style[prop] for prop in INHERITABLE_PROPERTIES if style.get(prop) is not None}

from __future__ import annotations

import unittest

from markupnodes.stylesheet import (
    DARK_MODE_VARS,
    LIGHT_MODE_VARS,
    class_name_for_tag,
    generate_all_css_variables,
    generate_css,
    resolve_css_variables,
    style_value_to_css,
    text_class_name_for_tag,
)
from markupnodes.tags import TAG_MAP, get_tag_mapping


class TestClassNames(unittest.TestCase):
    def test_styled_tags_get_a_class(self) -> None:
        assert class_name_for_tag("div") == "mkn-div"
        assert class_name_for_tag("td") == "mkn-td"

    def test_unstyled_or_unknown_tags(self) -> None:
        assert class_name_for_tag("thead") is None
        assert class_name_for_tag("img") is None
        assert class_name_for_tag("script") is None

    def test_text_classes_need_inheritable_styles(self) -> None:
        assert text_class_name_for_tag("h1") == "mkn-h1-text"
        assert text_class_name_for_tag("div") is None


class TestGenerateCss(unittest.TestCase):
    def test_rules_are_scoped_under_root_class(self) -> None:
        css = generate_css()
        assert css.startswith("/*\n * markupnodes - default element styles")
        assert ".markupnodes .mkn-div {\n  flex-direction: column;\n}" in css
        assert ".markupnodes .mkn-h1-text {" in css

    def test_custom_root_class(self) -> None:
        css = generate_css("app")
        assert ".app .mkn-p {" in css
        assert ".markupnodes" not in css.split("*/", 1)[1]

    def test_numbers_and_units(self) -> None:
        css = generate_css()
        assert "  flex-grow: 1;" in css
        assert "  flex-basis: 0;" in css
        assert style_value_to_css("width", 10) == "10px"
        assert style_value_to_css("fontWeight", 700) == "700"
        assert style_value_to_css("width", "50%") == "50%"

    def test_every_styled_tag_has_a_rule(self) -> None:
        css = generate_css()
        for tag in TAG_MAP:
            class_name = class_name_for_tag(tag)
            if class_name is not None:
                assert f".{class_name} {{" in css


class TestCssVariables(unittest.TestCase):
    def test_palettes_cover_the_same_variables(self) -> None:
        assert set(LIGHT_MODE_VARS) == set(DARK_MODE_VARS)

    def test_every_variable_used_by_default_styles_is_defined(self) -> None:
        for mapping in TAG_MAP.values():
            for value in mapping.default_style.values():
                resolved = resolve_css_variables(str(value))
                assert "var(--mkn-" not in resolved

    def test_resolve(self) -> None:
        assert resolve_css_variables("4px solid var(--mkn-blockquote-border)") == "4px solid #ddd"
        assert resolve_css_variables("var(--mkn-blockquote-border)", "dark") == "#555"
        assert resolve_css_variables("var(--mkn-unknown)") == "var(--mkn-unknown)"
        with self.assertRaises(ValueError):
            resolve_css_variables("red", "sepia")

    def test_generate_all(self) -> None:
        css = generate_all_css_variables("app")
        assert ".app {\n  --mkn-text-color: #212529;" in css
        assert ".app.mkn-dark {\n  --mkn-text-color: #e9ecef;" in css


class TestTagMapping(unittest.TestCase):
    def test_lookup_is_case_insensitive(self) -> None:
        assert get_tag_mapping(" DIV ") is TAG_MAP["div"]
        assert get_tag_mapping("") is None
        assert get_tag_mapping("marquee") is None

    def test_default_styles_are_read_only(self) -> None:
        with self.assertRaises(TypeError):
            TAG_MAP["div"].default_style["color"] = "red"

    def test_void_tags(self) -> None:
        assert TAG_MAP["img"].is_void
        assert TAG_MAP["hr"].is_void
        assert TAG_MAP["br"].is_line_break
        assert not TAG_MAP["div"].is_void

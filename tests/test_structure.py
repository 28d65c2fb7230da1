from __future__ import annotations

import unittest

from markupnodes import NestingDepthError, TransformOptions, transform_html
from markupnodes.markup import AstNode, parse_markup
from markupnodes.nodes import ElementNode, TextNode
from markupnodes.plugins.structure import (
    add_list_markers,
    convert_ast_node,
    flatten_table_sections,
)
from markupnodes.walkers import MAX_DEPTH


def _convert(markup: str, style_mode: str = "inline") -> list:
    return convert_ast_node(parse_markup(markup), style_mode)


class TestBlockStructure(unittest.TestCase):
    def test_mapped_tag_becomes_element(self) -> None:
        nodes = _convert('<div id="main">x</div>')
        assert len(nodes) == 1
        div = nodes[0]
        assert div.tag == "view"
        assert div.role == "block"
        assert div.capabilities.layout == "flex"
        assert div.props == {"style": {"flexDirection": "column"}}
        assert div.meta == {"source_tag": "div", "source_attrs": {"id": "main"}}
        assert div.children[0].content == "x"

    def test_default_style_is_copied(self) -> None:
        first = _convert("<div></div>")[0]
        second = _convert("<div></div>")[0]
        first.props["style"]["color"] = "red"
        assert "color" not in second.props["style"]

    def test_whitespace_only_text_is_dropped(self) -> None:
        nodes = _convert("<div>\n  <p>x</p>\n</div>")
        assert [child.tag for child in nodes[0].children] == ["text"]

    def test_unmapped_tags_drop_their_subtree(self) -> None:
        nodes = _convert("<script>alert(1)</script><iframe>secret</iframe><custom><p>hidden</p></custom><p>shown</p>")
        assert len(nodes) == 1
        assert nodes[0].source_tag == "p"

    def test_text_inherits_font_styles(self) -> None:
        h1 = _convert("<h1>Title</h1>")[0]
        text = h1.children[0]
        assert text.inheritable_styles == {
            "fontSize": "32px",
            "fontWeight": "bold",
            "color": "var(--mkn-text-color)",
        }
        assert text.meta == {"source": "text"}

    def test_nearest_ancestor_style_wins(self) -> None:
        td = _convert("<table><tr><td>x</td></tr></table>")[0].children[0].children[0]
        assert td.children[0].inheritable_styles == {"color": "var(--mkn-text-color-secondary)"}

    def test_block_without_inheritable_styles_adds_nothing(self) -> None:
        div = _convert("<div>x</div>")[0]
        assert div.children[0].inheritable_styles is None

    def test_void_elements_have_no_children(self) -> None:
        ast = AstNode(type="root", children=[AstNode(type="tag", name="hr", children=[AstNode(type="text", data="x")])])
        hr = convert_ast_node(ast)[0]
        assert hr.children == []
        assert hr.capabilities.is_void

    def test_line_break_becomes_newline_text(self) -> None:
        nodes = _convert("<p>a<br>b</p>")[0].children
        assert [node.content for node in nodes] == ["a", "\n", "b"]
        assert nodes[1].meta == {"source": "br"}

    def test_deep_nesting_raises(self) -> None:
        root = AstNode(type="root")
        current = root
        for _ in range(MAX_DEPTH + 5):
            child = AstNode(type="tag", name="div")
            current.children.append(child)
            current = child
        with self.assertRaises(NestingDepthError):
            convert_ast_node(root)


class TestInlineFormatting(unittest.TestCase):
    def test_single_text_child_is_unwrapped(self) -> None:
        nodes = _convert("<b>bold</b>")
        assert len(nodes) == 1
        assert isinstance(nodes[0], TextNode)
        assert nodes[0].marks == {"bold": True}

    def test_marks_accumulate(self) -> None:
        nodes = _convert("<b><i><u>x</u></i></b>")
        assert nodes[0].marks == {"bold": True, "italic": True, "underline": True}

    def test_multiple_children_are_wrapped(self) -> None:
        nodes = _convert("<strong>a<em>b</em></strong>")
        assert len(nodes) == 1
        wrapper = nodes[0]
        assert isinstance(wrapper, ElementNode)
        assert wrapper.tag == "text"
        assert wrapper.source_tag == "strong"
        assert [child.marks for child in wrapper.children] == [
            {"bold": True},
            {"bold": True, "italic": True},
        ]

    def test_block_child_is_wrapped(self) -> None:
        nodes = _convert("<b><div>block</div></b>")
        wrapper = nodes[0]
        assert wrapper.tag == "text"
        assert wrapper.source_tag == "b"
        div = wrapper.children[0]
        assert div.source_tag == "div"
        assert div.children[0].marks == {"bold": True}

    def test_inline_element_child_is_unwrapped(self) -> None:
        nodes = _convert('<b><a href="/x">link</a></b>')
        assert len(nodes) == 1
        assert nodes[0].source_tag == "a"
        assert nodes[0].children[0].marks == {"bold": True}

    def test_empty_formatting_tag_is_dropped(self) -> None:
        assert _convert("<b></b><i>  </i>") == []

    def test_code_mark(self) -> None:
        nodes = _convert("<p>use <code>x()</code></p>")[0].children
        assert nodes[1].marks == {"code": True}

    def test_line_break_carries_marks(self) -> None:
        nodes = _convert("<b>a<br>b</b>")
        assert len(nodes) == 1
        assert isinstance(nodes[0], TextNode)
        assert nodes[0].content == "a\nb"
        assert nodes[0].marks == {"bold": True}

    def test_single_image_child_is_unwrapped(self) -> None:
        nodes = _convert('<b><img src="a.png"></b>')
        assert len(nodes) == 1
        assert nodes[0].tag == "image"
        assert nodes[0].source_tag == "img"

    def test_mergeable_text_is_not_wrapped(self) -> None:
        nodes = _convert("<b><i>a</i><i>b</i></b>")
        assert len(nodes) == 1
        assert nodes[0].content == "ab"
        assert nodes[0].marks == {"bold": True, "italic": True}


class TestCssClassMode(unittest.TestCase):
    def test_class_names_instead_of_inline_styles(self) -> None:
        p = _convert("<p>Hello</p>", "css-class")[0]
        assert p.props == {"className": "mkn-p"}
        text = p.children[0]
        assert text.inheritable_classes == "mkn-p-text"
        assert text.inheritable_styles is None

    def test_unstyled_tag_gets_no_class(self) -> None:
        thead = _convert("<table><thead><tr><td>x</td></tr><tr><td>y</td></tr></thead></table>", "css-class")[0]
        assert thead.children[0].props == {}

    def test_text_classes_accumulate(self) -> None:
        li = _convert("<ul><li><p>x</p></li></ul>", "css-class")[0].children[0]
        text = li.children[0].children[0]
        assert text.inheritable_classes == "mkn-li-text mkn-p-text"


class TestListStructure(unittest.TestCase):
    def test_ordered_list_numbers(self) -> None:
        nodes = transform_html("<ol><li>a</li><li>b</li><li>c</li></ol>")
        items = nodes[0].children
        assert [item.children[0].content for item in items] == ["1. a", "2. b", "3. c"]

    def test_unordered_list_bullets(self) -> None:
        nodes = transform_html("<ul><li>a</li><li>b</li></ul>")
        assert [item.children[0].content for item in nodes[0].children] == ["• a", "• b"]

    def test_item_without_leading_text_gets_marker_node(self) -> None:
        nodes = transform_html("<ol><li><p>para</p></li></ol>")
        item = nodes[0].children[0]
        marker = item.children[0]
        assert marker.content == "1. "
        assert marker.meta == {"source": "li-marker"}
        assert item.children[1].source_tag == "p"

    def test_nested_lists(self) -> None:
        nodes = transform_html("<ul><li>a<ol><li>x</li><li>y</li></ol></li></ul>")
        outer_item = nodes[0].children[0]
        assert outer_item.children[0].content == "• a"
        inner = outer_item.children[1]
        assert [item.children[0].content for item in inner.children] == ["1. x", "2. y"]

    def test_non_item_children_are_untouched(self) -> None:
        ul = ElementNode(
            "view",
            children=[
                ElementNode("view", children=[TextNode("p")], meta={"source_tag": "p"}),
                ElementNode("view", children=[TextNode("i")], meta={"source_tag": "li"}),
            ],
            meta={"source_tag": "ol"},
        )
        add_list_markers(ul)
        assert ul.children[0].children[0].content == "p"
        assert ul.children[1].children[0].content == "1. i"


class TestTableStructure(unittest.TestCase):
    def test_single_child_sections_are_flattened(self) -> None:
        nodes = transform_html(
            "<table><thead><tr><th>A</th></tr></thead><tbody><tr><td>1</td></tr></tbody></table>"
        )
        table = nodes[0]
        assert len(table.children) == 2
        assert [row.source_tag for row in table.children] == ["tr", "tr"]
        assert [row.role for row in table.children] == ["row", "row"]

    def test_multi_child_sections_are_kept(self) -> None:
        nodes = transform_html("<table><tbody><tr><td>1</td></tr><tr><td>2</td></tr></tbody></table>")
        table = nodes[0]
        assert len(table.children) == 1
        assert table.children[0].source_tag == "tbody"
        assert len(table.children[0].children) == 2

    def test_nested_tables(self) -> None:
        nodes = transform_html(
            "<table><tbody><tr><td><table><tfoot><tr><td>x</td></tr></tfoot></table></td></tr></tbody></table>"
        )
        outer_row = nodes[0].children[0]
        inner_table = outer_row.children[0].children[0]
        assert inner_table.children[0].source_tag == "tr"

    def test_flatten_ignores_non_section_children(self) -> None:
        row = ElementNode("view", meta={"source_tag": "tr"})
        table = ElementNode("view", children=[row], meta={"source_tag": "table"})
        flatten_table_sections(table)
        assert table.children == [row]


class TestBreaksEndToEnd(unittest.TestCase):
    def test_break_merges_into_surrounding_text(self) -> None:
        p = transform_html("<p>line one <br> line two</p>")[0]
        assert len(p.children) == 1
        assert p.children[0].content == "line one\nline two"

    def test_drop_policy_end_to_end(self) -> None:
        nodes = transform_html("<script>x</script><div>y</div>", TransformOptions())
        assert len(nodes) == 1
        assert nodes[0].source_tag == "div"
        assert nodes[0].children[0].content == "y"

    def test_formatted_break_becomes_one_text_node(self) -> None:
        p = transform_html("<p><b>a<br>b</b> c</p>")[0]
        assert isinstance(p.children[0], TextNode)
        assert p.children[0].content == "a\nb"
        assert p.children[0].marks == {"bold": True}
        assert p.children[1].content == " c"

    def test_formatted_image_is_not_wrapped(self) -> None:
        p = transform_html('<p><b><img src="a.png"></b></p>')[0]
        assert [child.tag for child in p.children] == ["image"]
        assert p.children[0].props["src"] == "a.png"

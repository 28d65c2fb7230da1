from __future__ import annotations

import unittest

from markupnodes.nodes import (
    Capabilities,
    ElementNode,
    TextNode,
    create_node,
    create_root_node,
    has_marks,
    marks_equal,
    merge_adjacent_text_nodes,
    merge_all_text_nodes,
    replace_node,
    to_dict,
)


def _contents(nodes: list) -> list[str]:
    return [node.content if node.kind == "text" else f"<{node.tag}>" for node in nodes]


class TestCreateNode(unittest.TestCase):
    def test_text_node_from_content(self) -> None:
        node = create_node(content="hi", marks={}, inheritable_styles={})
        assert isinstance(node, TextNode)
        assert node.content == "hi"
        # Empty bags are left unset.
        assert node.marks is None
        assert node.inheritable_styles is None

    def test_element_defaults(self) -> None:
        node = create_node(tag="image")
        assert isinstance(node, ElementNode)
        assert node.props == {}
        assert node.children == []
        assert node.capabilities is None
        assert create_node().tag == "view"

    def test_explicit_kind_wins(self) -> None:
        node = create_node("text")
        assert isinstance(node, TextNode)
        assert node.content == ""

    def test_root_node(self) -> None:
        root = create_root_node()
        assert root.tag == "root"
        assert root.children == []

    def test_source_properties(self) -> None:
        node = ElementNode("view", meta={"source_tag": "div", "source_attrs": {"id": "x"}})
        assert node.source_tag == "div"
        assert node.source_attrs == {"id": "x"}
        assert ElementNode("view").source_attrs == {}
        assert TextNode("x", meta={"source": "br"}).source == "br"


class TestReplaceNode(unittest.TestCase):
    def test_replaces_by_identity(self) -> None:
        target = TextNode("old")
        twin = TextNode("old")
        inner = ElementNode("text", children=[twin, target])
        root = ElementNode("root", children=[inner])
        replacement = TextNode("new")

        assert replace_node(root, target, replacement) is root
        assert inner.children == [twin, replacement]

    def test_replacing_root_returns_replacement(self) -> None:
        root = ElementNode("root")
        replacement = ElementNode("view")
        assert replace_node(root, root, replacement) is replacement

    def test_missing_target_leaves_tree_alone(self) -> None:
        child = TextNode("a")
        root = ElementNode("root", children=[child])
        assert replace_node(root, TextNode("a"), TextNode("b")) is root
        assert root.children == [child]


class TestMarks(unittest.TestCase):
    def test_marks_equal_treats_absent_as_empty(self) -> None:
        assert marks_equal(None, {})
        assert marks_equal({"bold": True}, {"bold": True})
        assert not marks_equal({"bold": True}, None)

    def test_has_marks(self) -> None:
        assert not has_marks(None)
        assert not has_marks({"bold": False})
        assert has_marks({"italic": True})


class TestMergeAdjacentTextNodes(unittest.TestCase):
    def test_merges_runs_with_equal_marks(self) -> None:
        nodes = [TextNode("a"), TextNode("b", marks={}), TextNode("c")]
        merged = merge_adjacent_text_nodes(nodes)
        assert _contents(merged) == ["abc"]

    def test_different_marks_do_not_merge(self) -> None:
        merged = merge_adjacent_text_nodes([TextNode("a", marks={"bold": True}), TextNode("b")])
        assert _contents(merged) == ["a", "b"]

    def test_elements_break_runs(self) -> None:
        nodes = [TextNode("a"), ElementNode("view"), TextNode("b"), TextNode("c")]
        assert _contents(merge_adjacent_text_nodes(nodes)) == ["a", "<view>", "bc"]

    def test_break_trims_adjacent_whitespace(self) -> None:
        nodes = [
            TextNode("line one  ", meta={"source": "text"}),
            TextNode("\n", meta={"source": "br"}),
            TextNode("   line two", meta={"source": "text"}),
        ]
        merged = merge_adjacent_text_nodes(nodes)
        assert len(merged) == 1
        assert merged[0].content == "line one\nline two"
        assert merged[0].meta is None

    def test_consecutive_breaks_are_kept(self) -> None:
        nodes = [
            TextNode("a", meta={"source": "text"}),
            TextNode("\n", meta={"source": "br"}),
            TextNode("\n", meta={"source": "br"}),
            TextNode(" b", meta={"source": "text"}),
        ]
        assert merge_adjacent_text_nodes(nodes)[0].content == "a\n\nb"

    def test_merge_is_idempotent(self) -> None:
        nodes = [
            TextNode("a "),
            TextNode("\n", meta={"source": "br"}),
            TextNode(" b", marks={"bold": True}),
            TextNode("c", marks={"bold": True}),
            TextNode("d"),
        ]
        once = merge_adjacent_text_nodes(nodes)
        snapshot = [to_dict(node) for node in once]
        twice = merge_adjacent_text_nodes(once)
        assert [to_dict(node) for node in twice] == snapshot

    def test_merge_all_text_nodes_recurses(self) -> None:
        inner = ElementNode("text", children=[TextNode("x"), TextNode("y")])
        root = ElementNode("root", children=[TextNode("a"), TextNode("b"), inner])
        assert merge_all_text_nodes(root) is root
        assert _contents(root.children) == ["ab", "<text>"]
        assert _contents(inner.children) == ["xy"]


class TestToDict(unittest.TestCase):
    def test_omits_unset_fields(self) -> None:
        node = ElementNode(
            "view",
            props={"style": {"color": "red"}},
            children=[TextNode("hi", marks={"bold": True})],
            role="block",
            capabilities=Capabilities(layout="flex"),
        )
        assert to_dict(node) == {
            "kind": "element",
            "tag": "view",
            "props": {"style": {"color": "red"}},
            "children": [{"kind": "text", "content": "hi", "marks": {"bold": True}}],
            "role": "block",
            "capabilities": {"is_void": False, "layout": "flex"},
        }

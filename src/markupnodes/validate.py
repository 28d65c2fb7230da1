"""Structural validation of semantic node trees."""

from __future__ import annotations

from collections.abc import Iterable

from .errors import NestingDepthError, NodeValidationError
from .nodes import MARK_NAMES
from .walkers import MAX_DEPTH

_VALID_MARKS = frozenset(MARK_NAMES)


def _describe(node: object, index: int) -> str:
    if getattr(node, "kind", None) == "element":
        return f"{getattr(node, 'tag', '?')}[{index}]"
    return f"#text[{index}]"


def _check_element(node: object, path: tuple[str, ...]) -> None:
    tag = getattr(node, "tag", None)
    if not tag or not isinstance(tag, str):
        raise NodeValidationError("Element node must have a non-empty string tag", node, path)
    children = getattr(node, "children", None)
    if not isinstance(children, list):
        raise NodeValidationError("Element node children must be a list", node, path)
    if not isinstance(getattr(node, "props", None), dict):
        raise NodeValidationError("Element node must have a props dict", node, path)
    capabilities = getattr(node, "capabilities", None)
    if capabilities is not None and capabilities.is_void and children:
        raise NodeValidationError(f"Void element {tag!r} must not have children", node, path)


def _check_text(node: object, path: tuple[str, ...]) -> None:
    if not isinstance(getattr(node, "content", None), str):
        raise NodeValidationError("Text node content must be a string", node, path)
    marks = getattr(node, "marks", None)
    if marks is None:
        return
    if not isinstance(marks, dict):
        raise NodeValidationError("Text node marks must be a dict", node, path)
    invalid = sorted(str(key) for key in marks if key not in _VALID_MARKS)
    if invalid:
        raise NodeValidationError(
            f"Invalid mark types: {', '.join(invalid)}. Valid marks are: {', '.join(MARK_NAMES)}",
            node,
            path,
        )
    for key, value in marks.items():
        if not isinstance(value, bool):
            raise NodeValidationError(f"Mark {key!r} must be a bool, got {type(value).__name__}", node, path)


def validate_node(node: object, path: tuple[str, ...] = ()) -> None:
    """Validate `node` and its subtree, raising `NodeValidationError` on the first problem.

    `path` is the ancestor path of `node`; errors report the full path down to
    the offending node, e.g. `("view[0]", "text[2]")`.
    """
    stack: list[tuple[object, tuple[str, ...]]] = [(node, path)]
    while stack:
        current, current_path = stack.pop()
        if len(current_path) > MAX_DEPTH:
            raise NestingDepthError(MAX_DEPTH, phase="validate")

        kind = getattr(current, "kind", None)
        if kind == "element":
            _check_element(current, current_path)
            children = current.children
            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], (*current_path, _describe(children[i], i))))
        elif kind == "text":
            _check_text(current, current_path)
        else:
            raise NodeValidationError(
                f"Invalid node kind: {kind!r}. Expected 'element' or 'text'", current, current_path
            )


def validate_nodes(nodes: Iterable[object]) -> None:
    """Validate a list of top-level nodes as returned by a transform."""
    if not isinstance(nodes, list):
        raise TypeError(f"Expected a list of nodes, got {type(nodes).__name__}")
    for i, node in enumerate(nodes):
        validate_node(node, (_describe(node, i),))

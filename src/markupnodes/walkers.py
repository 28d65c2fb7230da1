"""Depth-first traversal over the markup AST and the semantic node tree.

All walkers use an explicit stack rather than recursion and refuse to follow a
tree deeper than `MAX_DEPTH`. A conformant parser never produces a cycle, but a
plugin building nodes by hand can, and the depth ceiling turns that into a
`NestingDepthError` instead of an endless walk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import NestingDepthError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from .markup import AstNode
    from .nodes import SemanticNode

MAX_DEPTH = 512


def _iter_ast(root: AstNode) -> Iterator[AstNode]:
    stack: list[tuple[AstNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if depth > MAX_DEPTH:
            raise NestingDepthError(MAX_DEPTH)
        yield node
        children = node.children
        if children:
            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], depth + 1))


def walk_ast(root: AstNode, callback: Callable[[AstNode], object]) -> None:
    """Call `callback` for `root` and every descendant, parents first."""
    for node in _iter_ast(root):
        callback(node)


def walk_ast_until(root: AstNode, callback: Callable[[AstNode], bool]) -> bool:
    """Like `walk_ast`, but stop as soon as `callback` returns True.

    Returns True if the walk stopped early.
    """
    for node in _iter_ast(root):
        if callback(node):
            return True
    return False


def find_ast_nodes(root: AstNode, predicate: Callable[[AstNode], bool]) -> list[AstNode]:
    return [node for node in _iter_ast(root) if predicate(node)]


def find_first_ast_node(root: AstNode, predicate: Callable[[AstNode], bool]) -> AstNode | None:
    for node in _iter_ast(root):
        if predicate(node):
            return node
    return None


def iter_nodes(root: SemanticNode) -> Iterator[SemanticNode]:
    """Yield `root` and every semantic node below it in document order."""
    stack: list[tuple[SemanticNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if depth > MAX_DEPTH:
            raise NestingDepthError(MAX_DEPTH)
        yield node
        if node.kind == "element":
            children = node.children
            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], depth + 1))

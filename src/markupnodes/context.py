"""Shared, mutable state for one transform invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .nodes import create_node, replace_node
from .walkers import walk_ast

if TYPE_CHECKING:
    from collections.abc import Callable

    from .executor import CapabilityExecutor
    from .markup import AstNode
    from .nodes import SemanticNode
    from .plugin import NodeHandler


@dataclass(slots=True)
class TransformMetrics:
    plugin_timings: dict[str, float] = field(default_factory=dict)
    node_count: int = 0
    walks: int = 0


class TransformContext:
    """What every plugin sees: the parsed AST, the semantic root and metadata.

    `ast` is read-only by convention. `root` may be mutated in place or
    rebound entirely (the text-merge pass does). `metadata` starts out with
    the transform options and is free for plugins to pass data to each other.
    """

    __slots__ = ("_executor", "ast", "metadata", "metrics", "root", "source")

    def __init__(
        self,
        ast: AstNode,
        root: SemanticNode,
        *,
        metadata: dict[str, Any] | None = None,
        source: str | None = None,
        metrics: TransformMetrics | None = None,
    ) -> None:
        self.ast = ast
        self.root = root
        self.metadata = metadata if metadata is not None else {}
        self.source = source
        self.metrics = metrics
        self._executor: CapabilityExecutor | None = None

    def walk_ast(self, callback: Callable[[AstNode], object]) -> None:
        walk_ast(self.ast, callback)

    def create_node(self, kind: str | None = None, **fields: Any) -> SemanticNode:
        return create_node(kind, **fields)

    def replace_node(self, target: SemanticNode, replacement: SemanticNode) -> None:
        self.root = replace_node(self.root, target, replacement)

    def register_handler(self, key: str, handler: NodeHandler) -> None:
        """Add a capability handler to the batch currently being collected.

        Only valid while a capability plugin's `register_handlers` runs.
        """
        if self._executor is None:
            raise RuntimeError("register_handler() is only available while capability handlers are collected")
        self._executor.register(key, handler)

    def option(self, name: str, default: Any = None) -> Any:
        return self.metadata.get(name, default)

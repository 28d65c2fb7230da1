"""Single-walk execution of capability-phase plugins.

Instead of letting every capability plugin walk the whole semantic tree, each
plugin registers handlers keyed by dispatch key (an element's target tag,
`"#text"` for text nodes, or `"*"` for every element). The executor then walks
the tree once and, at every node, calls the handlers for that node's key in
registration order. The cost of the phase is O(nodes) however many plugins
take part.

A handler returns None to leave the node in place, or a different node to
replace it. The walk tracks each node's parent and slot, so a replacement is
written straight into the parent's child list; the handlers still pending for
the original node receive the replacement, and the walk continues into its
children. Handlers that already ran on the original node are not run again on
the replacement; a handler returning a new element sets its capabilities
itself.

Handlers may edit the node they are given and its children. They must not
insert or remove siblings of that node.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from loguru import logger

from .errors import NestingDepthError, PluginConfigError, PluginError, TransformError
from .plugin import ANY_ELEMENT_KEY, TEXT_KEY, Phase
from .walkers import MAX_DEPTH

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .context import TransformContext
    from .nodes import ElementNode, SemanticNode
    from .plugin import NodeHandler, TransformPlugin


class CapabilityExecutor:
    """Collects capability handlers and applies them in one tree walk."""

    __slots__ = ("_by_key", "_current_plugin", "_dispatch_cache", "_seq")

    def __init__(self) -> None:
        self._by_key: dict[str, list[tuple[int, str, NodeHandler]]] = {}
        self._dispatch_cache: dict[tuple[str, bool], tuple[tuple[str, NodeHandler], ...]] = {}
        self._current_plugin: str | None = None
        self._seq = 0

    def __len__(self) -> int:
        return self._seq

    def register(self, key: str, handler: NodeHandler) -> None:
        owner = self._current_plugin or "<anonymous>"
        if not isinstance(key, str) or not key:
            raise PluginConfigError(f"Plugin {owner!r}: dispatch key must be a non-empty string, got {key!r}")
        if not callable(handler):
            raise PluginConfigError(f"Plugin {owner!r}: handler for {key!r} is not callable")
        self._by_key.setdefault(key, []).append((self._seq, owner, handler))
        self._seq += 1
        self._dispatch_cache.clear()

    def collect(self, plugin: TransformPlugin, ctx: TransformContext) -> None:
        """Ask `plugin` for its handlers and add them to the registry."""
        if plugin.register_handlers is None:
            raise PluginConfigError(f"Plugin {plugin.name!r} does not register capability handlers")
        self._current_plugin = plugin.name
        ctx._executor = self
        try:
            handlers = plugin.register_handlers(ctx)
            if handlers:
                for key, handler in handlers.items():
                    self.register(key, handler)
        except TransformError:
            raise
        except Exception as exc:
            raise PluginError(str(exc), plugin.name, Phase.CAPABILITY.value, ctx.source) from exc
        finally:
            ctx._executor = None
            self._current_plugin = None

    def clear(self) -> None:
        self._by_key.clear()
        self._dispatch_cache.clear()
        self._seq = 0

    def _handlers_for(self, key: str, is_element: bool) -> tuple[tuple[str, NodeHandler], ...]:
        cache_key = (key, is_element)
        cached = self._dispatch_cache.get(cache_key)
        if cached is not None:
            return cached

        entries = list(self._by_key.get(key, ()))
        if is_element and key != ANY_ELEMENT_KEY:
            entries.extend(self._by_key.get(ANY_ELEMENT_KEY, ()))
            entries.sort(key=lambda entry: entry[0])
        cached = tuple((owner, handler) for _, owner, handler in entries)
        self._dispatch_cache[cache_key] = cached
        return cached

    def run(self, ctx: TransformContext) -> int:
        """Walk `ctx.root` once, dispatching registered handlers. Returns nodes visited."""
        if not self._by_key:
            return 0

        timings = ctx.metrics.plugin_timings if ctx.metrics is not None else None
        visited = 0
        stack: list[tuple[ElementNode | None, int, SemanticNode, int]] = [(None, 0, ctx.root, 0)]

        while stack:
            parent, slot, node, depth = stack.pop()
            if depth > MAX_DEPTH:
                raise NestingDepthError(MAX_DEPTH, phase=Phase.CAPABILITY.value, html=ctx.source)
            visited += 1

            is_element = node.kind == "element"
            key = node.tag if is_element else TEXT_KEY
            for owner, handler in self._handlers_for(key, is_element):
                start = time.perf_counter() if timings is not None else 0.0
                try:
                    result = handler(node, ctx)
                except TransformError:
                    raise
                except Exception as exc:
                    raise PluginError(str(exc), owner, Phase.CAPABILITY.value, ctx.source) from exc
                if timings is not None:
                    timings[owner] = timings.get(owner, 0.0) + (time.perf_counter() - start) * 1000.0

                if result is not None and result is not node:
                    if parent is None:
                        ctx.root = result
                    else:
                        parent.children[slot] = result
                    node = result

            if node.kind == "element":
                children = node.children
                for i in range(len(children) - 1, -1, -1):
                    stack.append((node, i, children[i], depth + 1))

        return visited


def _flush(executor: CapabilityExecutor, ctx: TransformContext) -> None:
    if not len(executor):
        return
    handler_count = len(executor)
    visited = executor.run(ctx)
    executor.clear()
    if ctx.metrics is not None:
        ctx.metrics.walks += 1
    logger.debug("Capability batch: {} handler(s), {} node(s) visited", handler_count, visited)


def run_capability_phase(
    ctx: TransformContext,
    plugins: Sequence[TransformPlugin],
    run_plugin: Callable[[TransformContext, TransformPlugin], None],
) -> None:
    """Run the capability phase, batching plugins that register handlers.

    Consecutive batched plugins share one walk. A plugin without
    `register_handlers` is run through `run_plugin` after the pending batch
    has been flushed, so resolved plugin order is kept.
    """
    executor = CapabilityExecutor()
    for plugin in plugins:
        if plugin.is_batched:
            executor.collect(plugin, ctx)
            continue
        _flush(executor, ctx)
        run_plugin(ctx, plugin)
    _flush(executor, ctx)

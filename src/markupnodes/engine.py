"""Transform engine: markup in, semantic nodes out.

    from markupnodes import transform_html

    nodes = transform_html('<div style="color: red">Hello <b>world</b></div>')

The engine parses the markup, creates an empty root element, and runs the
resolved plugins phase by phase (normalize, structure, capability, finalize)
against one shared `TransformContext`. The children of the root are returned;
the root itself never is.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from loguru import logger

from .context import TransformContext, TransformMetrics
from .errors import PluginError, TransformError
from .executor import run_capability_phase
from .markup import parse_markup
from .nodes import create_root_node
from .options import TransformOptions
from .plugin import PHASES, Phase
from .resolver import PluginResolver
from .validate import validate_nodes
from .walkers import iter_nodes

if TYPE_CHECKING:
    from .nodes import SemanticNode
    from .plugin import TransformPlugin


def _run_plugin(ctx: TransformContext, plugin: TransformPlugin) -> None:
    start = time.perf_counter() if ctx.metrics is not None else 0.0
    try:
        plugin.apply(ctx)
    except TransformError:
        raise
    except Exception as exc:
        raise PluginError(str(exc), plugin.name, plugin.phase.value, ctx.source) from exc
    if ctx.metrics is not None:
        timings = ctx.metrics.plugin_timings
        timings[plugin.name] = timings.get(plugin.name, 0.0) + (time.perf_counter() - start) * 1000.0


class HTMLTransformer:
    """Reusable transformer for one set of options.

    The plugin list is resolved once, at construction. Reusing a transformer
    across calls (or threads) is safe as long as its plugins hold no per-call
    state.
    """

    __slots__ = ("options", "resolver")

    def __init__(self, options: TransformOptions | None = None) -> None:
        if options is None:
            options = TransformOptions()
        elif not isinstance(options, TransformOptions):
            raise TypeError(f"options must be TransformOptions, got {type(options).__name__}")
        self.options = options
        self.resolver = PluginResolver(options.plugins)

    def create_context(self, markup: str) -> TransformContext:
        try:
            ast = parse_markup(markup)
        except TransformError as exc:
            exc.html = markup
            raise
        except Exception as exc:
            raise TransformError(str(exc), "parse", markup) from exc

        return TransformContext(
            ast,
            create_root_node(),
            metadata=self.options.to_metadata(),
            source=markup,
            metrics=TransformMetrics() if self.options.debug else None,
        )

    def run(self, ctx: TransformContext) -> None:
        """Run every resolved phase against `ctx`."""
        for phase in PHASES:
            plugins = self.resolver.plugins_for_phase(phase)
            if not plugins:
                continue
            logger.debug("Running phase {} ({} plugin(s))", phase.value, len(plugins))
            if phase == Phase.CAPABILITY:
                run_capability_phase(ctx, plugins, _run_plugin)
            else:
                for plugin in plugins:
                    _run_plugin(ctx, plugin)

    def transform_with_context(self, markup: str) -> tuple[list[SemanticNode], TransformContext]:
        """Like `transform`, but also return the context (for its metrics and metadata)."""
        if not isinstance(markup, str):
            raise TypeError(f"Expected markup as str, got {type(markup).__name__}")

        ctx = self.create_context(markup)
        self.run(ctx)

        root = ctx.root
        nodes = root.children if root.kind == "element" else [root]

        metrics = ctx.metrics
        if metrics is not None:
            metrics.node_count = sum(1 for _ in iter_nodes(root)) - (1 if root.kind == "element" else 0)
            for name, elapsed in metrics.plugin_timings.items():
                logger.debug("Plugin {} took {:.3f} ms", name, elapsed)
            logger.debug("Transform produced {} node(s) in {} capability walk(s)", metrics.node_count, metrics.walks)

        if self.options.validate:
            validate_nodes(nodes)
        return nodes, ctx

    def transform(self, markup: str) -> list[SemanticNode]:
        return self.transform_with_context(markup)[0]


def transform_html(markup: str, options: TransformOptions | None = None) -> list[SemanticNode]:
    """Transform `markup` into a list of top-level semantic nodes."""
    return HTMLTransformer(options).transform(markup)

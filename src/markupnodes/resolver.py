"""Plugin list resolution.

`PluginResolver` turns the built-in plugins plus a caller's `PluginConfig`
into the ordered list the engine runs:

1. built-ins that are enabled by default,
2. minus the names in `config.disable`,
3. with `config.replace` entries substituted in the original's slot,
4. plus `config.extra`,
5. stable-sorted by phase, then by `order`.

A resolver is an ordinary object built per configuration; there is no global
registry to mutate.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from loguru import logger

from .options import PluginConfig
from .plugin import PHASE_RANK, Phase, TransformPlugin, coerce_phase
from .plugins import get_builtin_plugins


def _sort_key(plugin: TransformPlugin) -> tuple[int, int]:
    return (PHASE_RANK[plugin.phase], plugin.order)


def resolve_plugins(
    builtins: Sequence[TransformPlugin],
    config: PluginConfig | None = None,
) -> list[TransformPlugin]:
    config = config or PluginConfig()
    disabled = set(config.disable)

    plugins: list[TransformPlugin] = []
    replaced: set[str] = set()
    for plugin in builtins:
        if not plugin.enabled_by_default or plugin.name in disabled:
            continue
        replacement = config.replace.get(plugin.name)
        if replacement is not None:
            plugins.append(replacement.in_slot_of(plugin))
            replaced.add(plugin.name)
        else:
            plugins.append(plugin)

    for name in config.replace:
        if name not in replaced:
            logger.debug("Ignoring replacement for {!r}: no enabled built-in plugin has that name", name)

    plugins.extend(config.extra)
    # list.sort is stable: equal (phase, order) keep insertion order.
    plugins.sort(key=_sort_key)
    return plugins


class PluginResolver:
    """Resolved, read-only plugin list for one configuration."""

    __slots__ = ("_by_phase", "_plugins")

    def __init__(
        self,
        config: PluginConfig | None = None,
        builtins: Sequence[TransformPlugin] | None = None,
    ) -> None:
        if builtins is None:
            builtins = get_builtin_plugins()
        self._plugins: tuple[TransformPlugin, ...] = tuple(resolve_plugins(builtins, config))
        by_phase: dict[Phase, list[TransformPlugin]] = {phase: [] for phase in PHASE_RANK}
        for plugin in self._plugins:
            by_phase[plugin.phase].append(plugin)
        self._by_phase = {phase: tuple(items) for phase, items in by_phase.items()}
        logger.debug("Resolved plugins: {}", ", ".join(f"{p.phase.value}:{p.name}" for p in self._plugins))

    def all_plugins(self) -> tuple[TransformPlugin, ...]:
        return self._plugins

    def plugins_for_phase(self, phase: Phase | str) -> tuple[TransformPlugin, ...]:
        return self._by_phase[coerce_phase(phase)]

    def names(self) -> list[str]:
        return [plugin.name for plugin in self._plugins]

    def __iter__(self) -> Iterator[TransformPlugin]:
        return iter(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

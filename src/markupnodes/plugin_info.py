"""Introspection of the built-in plugins."""

from __future__ import annotations

from dataclasses import dataclass

from .plugin import Phase, TransformPlugin, coerce_phase
from .plugins import get_builtin_plugins


@dataclass(frozen=True, slots=True)
class PluginInfo:
    name: str
    phase: Phase
    order: int
    enabled_by_default: bool

    @classmethod
    def from_plugin(cls, plugin: TransformPlugin) -> PluginInfo:
        return cls(plugin.name, plugin.phase, plugin.order, plugin.enabled_by_default)


def get_plugin_info() -> list[PluginInfo]:
    return [PluginInfo.from_plugin(plugin) for plugin in get_builtin_plugins()]


def get_plugin_info_by_name(name: str) -> PluginInfo | None:
    for plugin in get_builtin_plugins():
        if plugin.name == name:
            return PluginInfo.from_plugin(plugin)
    return None


def get_plugins_by_phase(phase: Phase | str) -> list[PluginInfo]:
    """Built-in plugins of `phase`, sorted by order."""
    phase = coerce_phase(phase)
    return sorted((info for info in get_plugin_info() if info.phase == phase), key=lambda info: info.order)

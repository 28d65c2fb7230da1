"""Transform options."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .plugin import TransformPlugin, _StrEnum
from .stylesheet import DEFAULT_ROOT_CLASS


class StyleMode(_StrEnum):
    INLINE = "inline"
    CSS_CLASS = "css-class"


@dataclass(frozen=True, slots=True)
class PluginConfig:
    """Caller adjustments to the built-in plugin list.

    - `disable`: names of built-in plugins to leave out.
    - `replace`: name -> plugin; the replacement runs in the original's slot.
    - `extra`: additional plugins, placed by their own phase and order.

    No dependency checking is done: disabling a plugin that a later plugin
    relies on is the caller's responsibility.
    """

    disable: tuple[str, ...] = ()
    replace: Mapping[str, TransformPlugin] = field(default_factory=dict)
    extra: tuple[TransformPlugin, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.disable, str):
            object.__setattr__(self, "disable", (self.disable,))
        elif not isinstance(self.disable, tuple):
            object.__setattr__(self, "disable", tuple(self.disable))

        replace = dict(self.replace)
        for name, plugin in replace.items():
            if not isinstance(plugin, TransformPlugin):
                raise TypeError(f"Replacement for {name!r} is not a TransformPlugin: {type(plugin).__name__}")
        object.__setattr__(self, "replace", replace)

        extra = tuple(self.extra) if not isinstance(self.extra, tuple) else self.extra
        for plugin in extra:
            if not isinstance(plugin, TransformPlugin):
                raise TypeError(f"Unsupported plugin: {type(plugin).__name__}")
        object.__setattr__(self, "extra", extra)


@dataclass(frozen=True, slots=True)
class TransformOptions:
    """Options for a transform.

    - `remove_all_class`: ignore `class` attributes (default True).
    - `remove_all_style`: ignore `style` attributes. Default element styles
      still apply, and images still take their size from `style`.
    - `style_mode`: "inline" puts default styles into `props["style"]`;
      "css-class" sets `props["className"]` to `mkn-<tag>` instead.
    - `root_class_name`: root container class the generated stylesheet is
      scoped under.
    - `plugins`: a `PluginConfig`.
    - `debug`: collect per-plugin timings and a node count in
      `context.metrics` and log them.
    - `validate`: validate the returned nodes before handing them back.
    """

    remove_all_class: bool = True
    remove_all_style: bool = False
    style_mode: StyleMode = StyleMode.INLINE
    root_class_name: str = DEFAULT_ROOT_CLASS
    plugins: PluginConfig | None = None
    debug: bool = False
    validate: bool = False

    def __post_init__(self) -> None:
        try:
            mode = StyleMode(str(self.style_mode))
        except ValueError:
            raise ValueError(
                f"Unknown style_mode {self.style_mode!r}; expected 'inline' or 'css-class'"
            ) from None
        object.__setattr__(self, "style_mode", mode)
        if self.plugins is not None and not isinstance(self.plugins, PluginConfig):
            raise TypeError(f"plugins must be a PluginConfig, got {type(self.plugins).__name__}")

    def to_metadata(self) -> dict[str, Any]:
        return {
            "remove_all_class": self.remove_all_class,
            "remove_all_style": self.remove_all_style,
            "style_mode": self.style_mode,
            "root_class_name": self.root_class_name,
        }

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> TransformOptions:
        """Build options from keyword arguments, accepting plugin config as a dict."""
        plugins = kwargs.pop("plugins", None)
        if isinstance(plugins, Mapping):
            plugins = PluginConfig(**plugins)
        elif isinstance(plugins, Iterable) and not isinstance(plugins, (str, PluginConfig)):
            plugins = PluginConfig(extra=tuple(plugins))
        return cls(plugins=plugins, **kwargs)

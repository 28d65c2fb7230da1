"""Exceptions raised while transforming markup into semantic nodes.

Three families:

- `TransformError` (and its `PluginError` / `NestingDepthError` subclasses)
  for failures while the pipeline runs. They carry the phase name and the
  source markup so a failure can be reported with an excerpt of the input.
- `PluginConfigError` for invalid plugin declarations, raised when a plugin or
  plugin configuration is constructed rather than when it runs.
- `NodeValidationError` for semantic trees that violate the node shape rules,
  reported with the ancestor path of the offending node.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import SemanticNode

HTML_EXCERPT_LENGTH = 200
TEXT_EXCERPT_LENGTH = 50


def _excerpt(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


class TransformError(Exception):
    """A failure while running the transform pipeline."""

    def __init__(self, message: str, phase: str, html: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.phase = str(phase)
        self.html = html

    def __str__(self) -> str:
        return f"[transform error in {self.phase}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, phase={self.phase!r})"

    def details(self) -> str:
        lines = [str(self), f"Phase: {self.phase}"]
        cause = self.__cause__
        if cause is not None:
            lines.append(f"Caused by: {type(cause).__name__}: {cause}")
        if self.html is not None:
            lines.append(f"HTML (first {HTML_EXCERPT_LENGTH} chars): {_excerpt(self.html, HTML_EXCERPT_LENGTH)}")
        return "\n".join(lines) + "\n"


class PluginError(TransformError):
    """A plugin's `apply` or one of its capability handlers raised."""

    def __init__(self, message: str, plugin_name: str, phase: str, html: str | None = None) -> None:
        super().__init__(f"{plugin_name} failed in phase {phase}: {message}", phase, html)
        self.plugin_name = plugin_name

    def __repr__(self) -> str:
        return f"PluginError(plugin_name={self.plugin_name!r}, phase={self.phase!r})"


class NestingDepthError(TransformError):
    """A tree is nested deeper than the walkers are willing to follow."""

    def __init__(self, limit: int, phase: str = "walk", html: str | None = None) -> None:
        super().__init__(f"tree nesting exceeds the maximum depth of {limit}", phase, html)
        self.limit = limit


class PluginConfigError(ValueError):
    """An invalid plugin declaration or plugin configuration."""


class NodeValidationError(ValueError):
    """A semantic node does not have a valid shape."""

    def __init__(self, message: str, node: SemanticNode | object, path: tuple[str, ...] = ()) -> None:
        where = "/".join(path) if path else "<root>"
        super().__init__(f"{message} (at {where})")
        self.message = message
        self.node = node
        self.path = path

    def details(self) -> str:
        node = self.node
        lines = [str(self)]
        kind = getattr(node, "kind", None)
        lines.append(f"Node kind: {kind}")
        if kind == "element":
            lines.append(f"Node tag: {getattr(node, 'tag', None)}")
            children = getattr(node, "children", None)
            if isinstance(children, list):
                lines.append(f"Children count: {len(children)}")
            meta = getattr(node, "meta", None) or {}
            if meta.get("source_tag"):
                lines.append(f"Source tag: {meta['source_tag']}")
        elif kind == "text":
            content = getattr(node, "content", "")
            if isinstance(content, str):
                lines.append(
                    f"Text content (first {TEXT_EXCERPT_LENGTH} chars): {_excerpt(content, TEXT_EXCERPT_LENGTH)}"
                )
        return "\n".join(lines) + "\n"

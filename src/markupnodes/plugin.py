"""Plugin declarations for the transform pipeline.

A plugin is a value: a name, the phase it belongs to, an order within that
phase and an `apply(ctx)` entry point. Capability-phase plugins may also
provide `register_handlers(ctx)`, returning per-node handlers so the engine can
serve every such plugin from a single tree walk.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .errors import PluginConfigError

if TYPE_CHECKING:
    from .context import TransformContext
    from .nodes import SemanticNode

    NodeHandler = Callable[[SemanticNode, TransformContext], "SemanticNode | None"]
    HandlerRegistration = Callable[[TransformContext], Mapping[str, NodeHandler]]


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+).

    We support Python 3.10+, so we use this small mixin instead.
    """

    def __str__(self) -> str:
        return str(self.value)


class Phase(_StrEnum):
    NORMALIZE = "normalize"
    STRUCTURE = "structure"
    CAPABILITY = "capability"
    FINALIZE = "finalize"


PHASES: tuple[Phase, ...] = (Phase.NORMALIZE, Phase.STRUCTURE, Phase.CAPABILITY, Phase.FINALIZE)
PHASE_RANK: dict[Phase, int] = {phase: rank for rank, phase in enumerate(PHASES)}

# Dispatch key for text nodes, and the key matching every element node.
TEXT_KEY = "#text"
ANY_ELEMENT_KEY = "*"


def coerce_phase(value: Phase | str) -> Phase:
    if isinstance(value, Phase):
        return value
    try:
        return Phase(str(value))
    except ValueError:
        allowed = ", ".join(p.value for p in PHASES)
        raise PluginConfigError(f"Unknown phase {value!r}; expected one of: {allowed}") from None


@dataclass(frozen=True, slots=True)
class TransformPlugin:
    """A named, phase-scoped step of the transform pipeline.

    Plugins should hold no per-call state: the same plugin objects are shared
    by every transform that uses a resolved plugin list.
    """

    name: str
    phase: Phase
    apply: Callable[[TransformContext], None]
    order: int
    enabled_by_default: bool
    register_handlers: HandlerRegistration | None

    def __init__(
        self,
        name: str,
        phase: Phase | str,
        apply: Callable[[TransformContext], None],
        *,
        order: int = 0,
        enabled_by_default: bool = True,
        register_handlers: HandlerRegistration | None = None,
    ) -> None:
        if not name:
            raise PluginConfigError("Plugin name must be a non-empty string")
        if not callable(apply):
            raise PluginConfigError(f"Plugin {name!r}: apply must be callable")
        if register_handlers is not None and not callable(register_handlers):
            raise PluginConfigError(f"Plugin {name!r}: register_handlers must be callable")
        object.__setattr__(self, "name", str(name))
        object.__setattr__(self, "phase", coerce_phase(phase))
        object.__setattr__(self, "apply", apply)
        object.__setattr__(self, "order", int(order))
        object.__setattr__(self, "enabled_by_default", bool(enabled_by_default))
        object.__setattr__(self, "register_handlers", register_handlers)

    @property
    def is_batched(self) -> bool:
        return self.register_handlers is not None

    def in_slot_of(self, original: TransformPlugin) -> TransformPlugin:
        """Return a copy of this plugin that takes over `original`'s name, phase and order."""
        return TransformPlugin(
            original.name,
            original.phase,
            self.apply,
            order=original.order,
            enabled_by_default=True,
            register_handlers=self.register_handlers,
        )

    def __repr__(self) -> str:
        return f"TransformPlugin({self.name!r}, phase={self.phase.value!r}, order={self.order})"

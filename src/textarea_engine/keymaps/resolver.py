"""Resolve raw key strokes into logical editor commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from textarea_engine.runtime.telemetry import span

from .models import Binding, Command, KeyStroke, PlatformClass
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver."""

    command: Command
    binding: Optional[Binding] = None
    argument: Optional[str] = None

    @property
    def passthrough(self) -> bool:
        return self.command is Command.PASSTHROUGH


PASSTHROUGH = ResolutionResult(Command.PASSTHROUGH)


class CommandResolver:
    """Picks the highest-priority binding that matches a stroke.

    Bindings are ordered by descending ``priority`` and then by id, so the
    precedence between key families (Escape, Tab, Backspace, Enter, wrap
    triggers, undo, redo, capture toggle) lives entirely in the keymap.
    """

    def __init__(
        self,
        registry: KeymapRegistry,
        platform: PlatformClass = PlatformClass.OTHER,
        *,
        logger_name: str | None = None,
    ) -> None:
        self._registry = registry
        self.platform = platform
        self._logger_name = logger_name
        self._cache: Optional[tuple[int, PlatformClass, tuple[Binding, ...]]] = None

    def resolve(
        self,
        stroke: KeyStroke,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"key": stroke.token, "platform": self.platform.value},
        ) as handle:
            for binding in self._ordered_bindings():
                if not binding.chord.matches(stroke):
                    continue
                if not binding.allows(ctx):
                    continue
                handle.add_metadata("binding_id", binding.id)
                return ResolutionResult(
                    command=binding.command,
                    binding=binding,
                    argument=binding.argument,
                )

            handle.add_metadata("binding_id", "-")
            return PASSTHROUGH

    def _ordered_bindings(self) -> tuple[Binding, ...]:
        revision = self._registry.revision()
        cached = self._cache
        if cached and cached[0] == revision and cached[1] is self.platform:
            return cached[2]

        ordered = tuple(
            sorted(
                self._registry.iter_bindings(self.platform),
                key=lambda b: (-b.priority, b.id),
            )
        )
        self._cache = (revision, self.platform, ordered)
        return ordered


__all__ = [
    "CommandResolver",
    "ResolutionResult",
    "PASSTHROUGH",
]

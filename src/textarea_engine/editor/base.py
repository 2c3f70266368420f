"""Key events, results, and the event bus shared by the editor and adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from textarea_engine.buffer import Snapshot
from textarea_engine.keymaps import Command, KeyStroke


@dataclass(slots=True)
class KeyInput:
    """Key event handed to the editor by the rendering surface."""

    key: str
    modifiers: Tuple[str, ...] = ()
    default_prevented: bool = field(default=False, compare=False)

    @property
    def stroke(self) -> KeyStroke:
        return KeyStroke(self.key, self.modifiers)

    def prevent_default(self) -> None:
        """Mark the event handled so the host skips its default behaviour."""

        self.default_prevented = True


@dataclass(slots=True)
class EditResult:
    """Result returned from ``EditorEngine.handle_key``.

    ``consumed`` tells the host to suppress its own handling of the key.
    """

    consumed: bool
    command: Command = Command.PASSTHROUGH
    status: str = "ok"
    snapshot: Optional[Snapshot] = None


class EditorBus:
    """Minimal event bus letting adapters observe editor activity."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = ["KeyInput", "EditResult", "EditorBus"]

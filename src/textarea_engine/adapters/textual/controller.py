"""Textual-facing adapter that routes widget events through the editor engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from textarea_engine.buffer import Snapshot
from textarea_engine.buffer.undo import Clock, monotonic_ms
from textarea_engine.config import EditorConfig
from textarea_engine.editor import EditorEngine, EditResult, KeyHook, KeyInput

# Textual reports a few keys under names the keymap does not use.
_TEXTUAL_KEY_ALIASES: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "backtab": ("tab", ("shift",)),
}

_MODIFIER_NAMES = frozenset({"ctrl", "shift", "alt", "meta", "super", "hyper"})


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    apply_snapshot: Callable[[Snapshot], None]
    value_changed: Callable[[str], None] = _noop
    blur: Callable[[], None] = _noop
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class HookSink:
    """``EditorSink`` implementation that forwards to ``TextualUIHooks``."""

    def __init__(self, hooks: TextualUIHooks) -> None:
        self.hooks = hooks

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        self.hooks.apply_snapshot(snapshot)

    def notify_value_changed(self, value: str) -> None:
        self.hooks.value_changed(value)

    def blur(self) -> None:
        self.hooks.blur()


def split_textual_key(
    key: str, character: Optional[str] = None
) -> Tuple[str, Tuple[str, ...]]:
    """Turn a Textual key name (``"ctrl+shift+z"``) into key and modifiers.

    A printable ``character`` wins over the key name so bracket and quote
    triggers arrive as the character itself rather than ``left_parenthesis``.
    """

    if key in _TEXTUAL_KEY_ALIASES:
        return _TEXTUAL_KEY_ALIASES[key]

    parts = key.split("+")
    modifiers = []
    while len(parts) > 1 and parts[0] in _MODIFIER_NAMES:
        modifiers.append(parts.pop(0))
    name = "+".join(parts)
    if character and len(character) == 1 and character.isprintable():
        name = character
    return name, tuple(modifiers)


class TextualEditorAdapter:
    """Bridges an ``EditorEngine`` and its bus events to a Textual surface."""

    def __init__(
        self,
        hooks: TextualUIHooks,
        initial: Snapshot | None = None,
        config: EditorConfig | None = None,
        *,
        on_key_down: KeyHook | None = None,
        clock: Clock = monotonic_ms,
    ) -> None:
        self.hooks = hooks
        self.engine = EditorEngine(
            HookSink(hooks),
            initial or Snapshot(""),
            config,
            on_key_down=on_key_down,
            clock=clock,
        )
        self._subscribe_events()

    def handle_textual_key(
        self,
        key: str,
        current: Snapshot,
        *,
        character: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> EditResult:
        """Dispatch a Textual key event against the widget's current state."""

        name, parsed = split_textual_key(key, character)
        held = tuple(dict.fromkeys(parsed + tuple(m.lower() for m in modifiers)))
        self._log_state("key ->", key=name, mods=held)
        result = self.engine.handle_key(KeyInput(name, held), current)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            command=result.command.value,
        )
        if result.consumed:
            self.hooks.update_status(result.status)
        return result

    def handle_text_changed(self, snapshot: Snapshot) -> None:
        """Record an edit the widget already applied (typing, paste)."""

        self.engine.handle_content_change(snapshot)
        self._log_state("change ->", length=len(snapshot.value))

    def _subscribe_events(self) -> None:
        bus = self.engine.bus
        for event in (
            "history.undo",
            "history.redo",
            "capture.changed",
            "edit.applied",
            "focus.blur",
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self.engine.snapshot()
        history = self.engine.history
        state: Dict[str, object] = {
            "selection": (snapshot.selection_start, snapshot.selection_end),
            "capture": self.engine.capture,
            "history": f"{history.offset + 1}/{len(history)}",
        }
        state.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in state.items()]
        self.hooks.log(" ".join(parts))


__all__ = [
    "HookSink",
    "TextualEditorAdapter",
    "TextualUIHooks",
    "split_textual_key",
]

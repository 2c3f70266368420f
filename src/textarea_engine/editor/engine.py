"""Editor facade: resolve a key, transform the buffer, record, and publish."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from textarea_engine.actions import is_edit, transform
from textarea_engine.buffer import (
    BlurTarget,
    EditorSink,
    History,
    HistoryManager,
    Snapshot,
    normalize_snapshot,
)
from textarea_engine.buffer.undo import Clock, monotonic_ms
from textarea_engine.config import EditorConfig
from textarea_engine.keymaps import (
    HAS_SELECTION,
    TAB_CAPTURE,
    Command,
    CommandResolver,
    KeymapRegistry,
    load_default_keymaps,
)
from textarea_engine.runtime import telemetry

from .base import EditorBus, EditResult, KeyInput

KeyHook = Callable[[KeyInput], None]


class EditorEngine:
    """Owns one editing session: history, capture flag, and keymap.

    Events are handled strictly one at a time; every call runs to completion
    before returning and nothing is scheduled for later.
    """

    def __init__(
        self,
        sink: EditorSink,
        initial: Snapshot,
        config: EditorConfig | None = None,
        *,
        keymap_registry: KeymapRegistry | None = None,
        bus: EditorBus | None = None,
        on_key_down: KeyHook | None = None,
        clock: Clock = monotonic_ms,
    ) -> None:
        self.sink = sink
        self.config = config or EditorConfig()
        self.bus = bus or EditorBus()
        self._on_key_down = on_key_down
        self._capture = True
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="textarea_engine.keymaps"
        )
        if keymap_registry is None:
            load_default_keymaps(
                self.keymap_registry, wrap_pairs=self.config.wrap_pairs
            )
        self.resolver = CommandResolver(
            self.keymap_registry,
            self.config.platform,
            logger_name="textarea_engine.keymaps",
        )
        self.history = HistoryManager(
            limit=self.config.history_limit,
            time_gap_ms=self.config.history_time_gap_ms,
            clock=clock,
            logger_name="textarea_engine.history",
        )
        self._observed = normalize_snapshot(initial)
        self.history.record_change(self._observed)

    @property
    def capture(self) -> bool:
        return self._capture

    def snapshot(self) -> Snapshot:
        """Last state seen from, or pushed to, the sink."""

        return self._observed

    def handle_key(self, key: KeyInput, current: Snapshot) -> EditResult:
        if self._on_key_down is not None:
            self._on_key_down(key)
            if key.default_prevented:
                return EditResult(consumed=False, status="intercepted")
        if not key.key:
            return EditResult(False, Command.PASSTHROUGH, "passthrough")

        snapshot = normalize_snapshot(current)
        self._observed = snapshot
        context = {
            TAB_CAPTURE: self._capture and not self.config.ignore_tab_key,
            HAS_SELECTION: snapshot.has_selection,
        }
        with telemetry.span(
            "editor::key",
            component="editor",
            metadata={"key": key.stroke.token},
        ) as handle:
            resolution = self.resolver.resolve(key.stroke, context=context)
            handle.add_metadata("command", resolution.command.value)
            result = self._dispatch(resolution.command, snapshot, resolution.argument)

        if result.consumed:
            key.prevent_default()
        return result

    def handle_content_change(self, snapshot: Snapshot) -> None:
        """Record an organic edit (typing, paste, IME) the host already shows."""

        snapshot = normalize_snapshot(snapshot)
        self._observed = snapshot
        self.history.record_change(snapshot, overwrite=True)
        self.sink.notify_value_changed(snapshot.value)

    def undo(self) -> Optional[Snapshot]:
        record = self.history.undo()
        if record is not None:
            self._publish(record)
            self.bus.emit("history.undo", record)
        return record

    def redo(self) -> Optional[Snapshot]:
        record = self.history.redo()
        if record is not None:
            self._publish(record)
            self.bus.emit("history.redo", record)
        return record

    def toggle_capture(self) -> bool:
        self._capture = not self._capture
        telemetry.record_event("editor.capture", data={"capture": self._capture})
        self.bus.emit("capture.changed", self._capture)
        return self._capture

    def export_session(self) -> dict[str, Any]:
        return {"history": self.history.export().to_dict()}

    def import_session(self, session: Mapping[str, Any]) -> None:
        """Replace history wholesale with a previously exported session."""

        history = session["history"]
        if not isinstance(history, History):
            history = History.from_dict(history)
        self.history.load(history)
        telemetry.record_event(
            "editor.session_import",
            data={"entries": len(history.stack), "offset": history.offset},
        )

    def _dispatch(
        self, command: Command, snapshot: Snapshot, argument: Optional[str]
    ) -> EditResult:
        if command is Command.UNDO:
            record = self.undo()
            return EditResult(True, command, "undo" if record else "undo_empty", record)
        if command is Command.REDO:
            record = self.redo()
            return EditResult(True, command, "redo" if record else "redo_empty", record)
        if command is Command.TOGGLE_CAPTURE:
            self.toggle_capture()
            status = "capture_on" if self._capture else "capture_off"
            return EditResult(True, command, status)
        if command is Command.BLUR:
            self._blur()
            return EditResult(False, command, "blur")
        if not is_edit(command):
            return EditResult(False, command, "passthrough")

        plan = transform(command, snapshot, self.config, argument)
        if not plan:
            return EditResult(False, command, "no_change")

        observed = snapshot
        for edit in plan:
            self.history.apply_edit(edit, observed)
            self._publish(edit)
            observed = edit
        self.bus.emit("edit.applied", {"command": command.value, "snapshot": observed})
        return EditResult(True, command, "edited", observed)

    def _publish(self, snapshot: Snapshot) -> None:
        self._observed = snapshot
        self.sink.apply_snapshot(snapshot)
        self.sink.notify_value_changed(snapshot.value)

    def _blur(self) -> None:
        if isinstance(self.sink, BlurTarget):
            self.sink.blur()
        telemetry.record_event("editor.blur")
        self.bus.emit("focus.blur", None)


__all__ = ["EditorEngine", "KeyHook"]

"""Adapter boundary types for pushing engine output into host widgets."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .state import Snapshot


class EditorSink(Protocol):
    """What the rendering surface must provide to receive edits."""

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        """Atomically replace the widget value and selection."""
        ...

    def notify_value_changed(self, value: str) -> None:
        """Tell the host the buffer value changed (after edits, undo, redo)."""
        ...


@runtime_checkable
class BlurTarget(Protocol):
    """Optional sink capability used when Escape releases focus."""

    def blur(self) -> None:
        ...


class HistoryInvariantError(AssertionError):
    """Raised when history offsets or bounds are violated."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset

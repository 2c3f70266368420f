"""Value types for buffer contents, selections, and recorded history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple

Cursor = Tuple[int, int]  # (row, column)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Buffer text plus a selection expressed as string offsets.

    A collapsed selection (``selection_start == selection_end``) is a caret.
    """

    value: str
    selection_start: int = 0
    selection_end: int = 0

    @classmethod
    def caret(cls, value: str, position: int | None = None) -> "Snapshot":
        offset = len(value) if position is None else position
        return cls(value, offset, offset)

    @property
    def has_selection(self) -> bool:
        return self.selection_start != self.selection_end

    @property
    def selected_text(self) -> str:
        return self.value[self.selection_start : self.selection_end]

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "selectionStart": self.selection_start,
            "selectionEnd": self.selection_end,
        }


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    value: str
    selection_start: int
    selection_end: int
    timestamp: float

    @classmethod
    def stamp(cls, snapshot: Snapshot, timestamp: float) -> "HistoryEntry":
        return cls(
            snapshot.value,
            snapshot.selection_start,
            snapshot.selection_end,
            timestamp,
        )

    @property
    def snapshot(self) -> Snapshot:
        return Snapshot(self.value, self.selection_start, self.selection_end)

    def with_selection(self, start: int, end: int) -> "HistoryEntry":
        return HistoryEntry(self.value, start, end, self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {**self.snapshot.to_dict(), "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        return cls(
            value=str(data["value"]),
            selection_start=int(data["selectionStart"]),
            selection_end=int(data["selectionEnd"]),
            timestamp=float(data["timestamp"]),
        )

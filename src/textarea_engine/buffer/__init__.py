"""Buffer snapshots, lexical scanning, and undo/redo history."""

from .state import Cursor, HistoryEntry, Snapshot
from .sync import BlurTarget, EditorSink, HistoryInvariantError
from .undo import (
    HISTORY_LIMIT,
    HISTORY_TIME_GAP_MS,
    History,
    HistoryManager,
)
from .validation import clamp_offset, normalize_snapshot

__all__ = [
    "Cursor",
    "Snapshot",
    "HistoryEntry",
    "History",
    "HistoryManager",
    "HISTORY_LIMIT",
    "HISTORY_TIME_GAP_MS",
    "EditorSink",
    "BlurTarget",
    "HistoryInvariantError",
    "clamp_offset",
    "normalize_snapshot",
]

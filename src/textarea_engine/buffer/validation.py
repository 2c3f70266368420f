"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .state import Snapshot


def clamp_offset(value: str, offset: int) -> int:
    return max(0, min(offset, len(value)))


def normalize_snapshot(snapshot: Snapshot) -> Snapshot:
    """Clamp offsets into ``[0, len(value)]`` and order them ``start <= end``."""

    start = clamp_offset(snapshot.value, snapshot.selection_start)
    end = clamp_offset(snapshot.value, snapshot.selection_end)
    if start > end:
        start, end = end, start
    if start == snapshot.selection_start and end == snapshot.selection_end:
        return snapshot
    return Snapshot(snapshot.value, start, end)

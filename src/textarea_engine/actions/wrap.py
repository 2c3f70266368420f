"""Bracket and quote pairing around the selection or caret."""

from __future__ import annotations

from textarea_engine.buffer.state import Snapshot
from textarea_engine.keymaps.models import WrapPair


def wrap_or_duplicate(snapshot: Snapshot, pair: WrapPair) -> Snapshot:
    value, start, end = snapshot.value, snapshot.selection_start, snapshot.selection_end
    if snapshot.has_selection:
        wrapped = pair.start + value[start:end] + pair.closing
        return Snapshot(value[:start] + wrapped + value[end:], start, end + 2)
    caret = start + 1
    inserted = pair.start + pair.closing
    return Snapshot(value[:start] + inserted + value[end:], caret, caret)


__all__ = ["wrap_or_duplicate"]

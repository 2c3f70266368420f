"""Bounded linear undo/redo history with word-level coalescing.

``History`` is an immutable value. The module-level functions are reducers
that take a history and return the next one; ``HistoryManager`` owns the
single live instance for an editing session along with the clock and the
limits it is recorded under.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional, Tuple

from textarea_engine.runtime import telemetry

from .scanner import trailing_word
from .state import HistoryEntry, Snapshot
from .sync import HistoryInvariantError

HISTORY_LIMIT = 100
HISTORY_TIME_GAP_MS = 3000.0

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True, slots=True)
class History:
    stack: Tuple[HistoryEntry, ...] = ()
    offset: int = -1

    @property
    def current(self) -> Optional[HistoryEntry]:
        return self.entry_at(self.offset)

    def entry_at(self, index: int) -> Optional[HistoryEntry]:
        if 0 <= index < len(self.stack):
            return self.stack[index]
        return None

    def check(self, *, limit: int | None = None) -> "History":
        """Raise ``HistoryInvariantError`` unless offset and size are legal."""

        if not -1 <= self.offset <= len(self.stack) - 1:
            raise HistoryInvariantError(
                f"offset {self.offset} outside [-1, {len(self.stack) - 1}]",
                offset=self.offset,
            )
        if self.stack and self.offset == -1:
            raise HistoryInvariantError(
                "non-empty history must point at an entry", offset=self.offset
            )
        if limit is not None and len(self.stack) > limit:
            raise HistoryInvariantError(
                f"history holds {len(self.stack)} entries, limit is {limit}",
                offset=self.offset,
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "stack": [entry.to_dict() for entry in self.stack],
            "offset": self.offset,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "History":
        stack = tuple(HistoryEntry.from_dict(item) for item in data.get("stack", ()))
        return cls(stack=stack, offset=int(data.get("offset", -1)))


def continues_word(previous: HistoryEntry, snapshot: Snapshot) -> bool:
    """True when ``snapshot`` only extends the word ``previous`` ended on."""

    before = trailing_word(previous.value, previous.selection_start)
    after = trailing_word(snapshot.value, snapshot.selection_start)
    if before is None or after is None:
        return False
    return after.startswith(before)


def _evict(
    stack: Tuple[HistoryEntry, ...], offset: int, limit: int
) -> Tuple[Tuple[HistoryEntry, ...], int]:
    excess = len(stack) - limit
    if excess <= 0:
        return stack, offset
    return stack[excess:], max(offset - excess, 0)


def record_change(
    history: History,
    snapshot: Snapshot,
    *,
    timestamp: float,
    overwrite: bool = False,
    limit: int = HISTORY_LIMIT,
    time_gap_ms: float = HISTORY_TIME_GAP_MS,
) -> History:
    """Return ``history`` with ``snapshot`` recorded at ``timestamp``.

    Entries past ``offset`` are dropped first. With ``overwrite`` set, a
    snapshot arriving within ``time_gap_ms`` of the current entry that keeps
    extending the same trailing word replaces that entry instead of adding a
    new undo step.
    """

    stack, offset = history.stack, history.offset
    if stack and offset > -1:
        stack, offset = _evict(stack[: offset + 1], offset, limit)

    entry = HistoryEntry.stamp(snapshot, timestamp)
    if overwrite:
        last = History(stack, offset).current
        if (
            last is not None
            and timestamp - last.timestamp < time_gap_ms
            and continues_word(last, snapshot)
        ):
            return History(stack[:offset] + (entry,) + stack[offset + 1 :], offset)

    stack, offset = _evict(stack + (entry,), offset + 1, limit)
    return History(stack, offset)


def patch_selection(history: History, start: int, end: int) -> History:
    """Overwrite the selection stored on the current entry."""

    current = history.current
    if current is None:
        return history
    stack = list(history.stack)
    stack[history.offset] = current.with_selection(start, end)
    return replace(history, stack=tuple(stack))


def undo(history: History) -> Tuple[History, Optional[Snapshot]]:
    record = history.entry_at(history.offset - 1)
    if record is None:
        return history, None
    return replace(history, offset=max(history.offset - 1, 0)), record.snapshot


def redo(history: History) -> Tuple[History, Optional[Snapshot]]:
    record = history.entry_at(history.offset + 1)
    if record is None:
        return history, None
    offset = min(history.offset + 1, len(history.stack) - 1)
    return replace(history, offset=offset), record.snapshot


class HistoryManager:
    """Owns the live ``History`` of one editing session."""

    def __init__(
        self,
        *,
        limit: int = HISTORY_LIMIT,
        time_gap_ms: float = HISTORY_TIME_GAP_MS,
        clock: Clock = monotonic_ms,
        logger_name: str | None = None,
    ) -> None:
        self.limit = limit
        self.time_gap_ms = time_gap_ms
        self._clock = clock
        self._logger_name = logger_name
        self._history = History()

    @property
    def history(self) -> History:
        return self._history

    @property
    def offset(self) -> int:
        return self._history.offset

    def __len__(self) -> int:
        return len(self._history.stack)

    def current(self) -> Optional[Snapshot]:
        entry = self._history.current
        return entry.snapshot if entry else None

    def can_undo(self) -> bool:
        return self._history.entry_at(self._history.offset - 1) is not None

    def can_redo(self) -> bool:
        return self._history.entry_at(self._history.offset + 1) is not None

    def record_change(self, snapshot: Snapshot, *, overwrite: bool = False) -> None:
        with telemetry.span(
            "history::record",
            logger_name=self._logger_name,
            component="history",
            metadata={"overwrite": overwrite},
        ) as handle:
            before = self._history
            after = record_change(
                before,
                snapshot,
                timestamp=self._clock(),
                overwrite=overwrite,
                limit=self.limit,
                time_gap_ms=self.time_gap_ms,
            ).check(limit=self.limit)
            handle.add_metadata("size", len(after.stack))
            handle.add_metadata("offset", after.offset)
            self._history = after

    def apply_edit(self, snapshot: Snapshot, observed: Snapshot) -> None:
        """Record a structural edit.

        ``observed`` is the widget state just before the edit; its selection
        is written back onto the current entry so undoing restores the caret
        the user actually had.
        """

        self._history = patch_selection(
            self._history, observed.selection_start, observed.selection_end
        )
        self.record_change(snapshot, overwrite=False)

    def undo(self) -> Optional[Snapshot]:
        with telemetry.span(
            "history::undo", logger_name=self._logger_name, component="history"
        ) as handle:
            self._history, record = undo(self._history)
            handle.add_metadata("offset", self._history.offset)
            return record

    def redo(self) -> Optional[Snapshot]:
        with telemetry.span(
            "history::redo", logger_name=self._logger_name, component="history"
        ) as handle:
            self._history, record = redo(self._history)
            handle.add_metadata("offset", self._history.offset)
            return record

    def export(self) -> History:
        return self._history

    def load(self, history: History) -> None:
        self._history = history.check(limit=self.limit)


__all__ = [
    "HISTORY_LIMIT",
    "HISTORY_TIME_GAP_MS",
    "History",
    "HistoryManager",
    "continues_word",
    "monotonic_ms",
    "patch_selection",
    "record_change",
    "redo",
    "undo",
]

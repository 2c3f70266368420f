"""Tab, Shift+Tab and Backspace rules operating on indent units."""

from __future__ import annotations

from typing import Optional

from textarea_engine.buffer.scanner import (
    NON_WHITESPACE_PATTERN,
    covered_lines,
    line_before,
)
from textarea_engine.buffer.state import Snapshot


def insert_tab(snapshot: Snapshot, tab: str) -> Snapshot:
    value, start, end = snapshot.value, snapshot.selection_start, snapshot.selection_end
    caret = start + len(tab)
    return Snapshot(value[:start] + tab + value[end:], caret, caret)


def indent_lines(snapshot: Snapshot, tab: str) -> Snapshot:
    """Prefix every line touched by the selection with ``tab``.

    The selection start only moves when there was text before it on its
    line; otherwise the caret stays at column 0 ahead of the new indent.
    """

    value, start, end = snapshot.value, snapshot.selection_start, snapshot.selection_end
    lines = covered_lines(value, start, end)
    updated = "\n".join(
        tab + line if i in lines else line for i, line in enumerate(value.split("\n"))
    )
    if NON_WHITESPACE_PATTERN.search(line_before(value, start)):
        start += len(tab)
    return Snapshot(updated, start, end + len(tab) * len(lines))


def dedent_lines(snapshot: Snapshot, tab: str) -> Optional[Snapshot]:
    """Strip one leading ``tab`` from covered lines; ``None`` if none had one."""

    value, start, end = snapshot.value, snapshot.selection_start, snapshot.selection_end
    lines = covered_lines(value, start, end)
    updated = "\n".join(
        line[len(tab) :] if i in lines and line.startswith(tab) else line
        for i, line in enumerate(value.split("\n"))
    )
    if updated == value:
        return None

    if line_before(value, start).startswith(tab):
        start -= len(tab)
    end -= len(value) - len(updated)
    return Snapshot(updated, start, max(start, end))


def delete_indent(snapshot: Snapshot, tab: str) -> Optional[Snapshot]:
    """Remove a whole indent unit ending at the caret, if one is there."""

    if snapshot.has_selection:
        return None
    value, caret = snapshot.value, snapshot.selection_start
    if not value[:caret].endswith(tab):
        return None
    caret -= len(tab)
    return Snapshot(value[:caret] + value[snapshot.selection_end :], caret, caret)


__all__ = ["insert_tab", "indent_lines", "dedent_lines", "delete_indent"]

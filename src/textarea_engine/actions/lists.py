"""Enter handling: keep indentation and continue Markdown-style lists."""

from __future__ import annotations

from typing import Optional

from textarea_engine.buffer.scanner import (
    LIST_MARKER_PATTERN,
    leading_whitespace,
    line_before,
)
from textarea_engine.buffer.state import Snapshot


def _insert_line(snapshot: Snapshot, text: str) -> Snapshot:
    value, start = snapshot.value, snapshot.selection_start
    caret = start + len(text)
    updated = value[:start] + text + value[snapshot.selection_end :]
    return Snapshot(updated, caret, caret)


def carry_indent(snapshot: Snapshot) -> Optional[Snapshot]:
    indent = leading_whitespace(line_before(snapshot.value, snapshot.selection_start))
    if not indent:
        return None
    return _insert_line(snapshot, "\n" + indent)


def next_marker(line: str) -> Optional[str]:
    """Marker to start the following line with, or ``None`` if not a list.

    Ordered markers count up (``"3."`` becomes ``"4."``); bullets and
    blockquotes repeat unchanged. Leading whitespace is kept.
    """

    match = LIST_MARKER_PATTERN.match(line)
    if match is None:
        return None
    indent, marker = match.groups()
    if marker.endswith("."):
        number = int(marker[:-1])
        if number > 0:
            marker = f"{number + 1}."
    return indent + marker


def continue_list(snapshot: Snapshot) -> Optional[Snapshot]:
    marker = next_marker(line_before(snapshot.value, snapshot.selection_start))
    if marker is None:
        return None
    return _insert_line(snapshot, f"\n{marker} ")


def newline_continue(snapshot: Snapshot) -> tuple[Snapshot, ...]:
    """Edits for Enter, each computed against the same starting snapshot.

    When both rules fire the list edit comes second and supersedes the
    indentation edit; both stay in history as separate undo steps.
    """

    if snapshot.has_selection:
        return ()
    edits = (carry_indent(snapshot), continue_list(snapshot))
    return tuple(edit for edit in edits if edit is not None)


__all__ = ["carry_indent", "continue_list", "newline_continue", "next_marker"]

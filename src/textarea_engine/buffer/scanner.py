"""Lexical helpers deriving lines, words, and positions from a flat string.

Nothing here parses the text; every rule is a split on ``"\\n"`` or one of
the pattern constants below.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .state import Cursor

# Trailing word on a line, preceded by a non-word character. Start of line
# also counts as a boundary so a word typed at column 0 can coalesce.
TRAILING_WORD_PATTERN = re.compile(r"(?:^|[^a-z0-9])([a-z0-9]+)$", re.IGNORECASE)
LEADING_WHITESPACE_PATTERN = re.compile(r"^\s+")
NON_WHITESPACE_PATTERN = re.compile(r"\S")
# Ordered ("12."), unordered ("*", "+", "-") and blockquote (">") markers.
LIST_MARKER_PATTERN = re.compile(r"^(\s*?)([0-9]+\.|\*|\+|-|>)")


def lines_before(text: str, position: int) -> List[str]:
    """Lines of ``text[:position]``; the last item is the partial caret line."""

    return text[:position].split("\n")


def line_before(text: str, position: int) -> str:
    """Text from the start of the caret's line up to ``position``."""

    return text[text.rfind("\n", 0, position) + 1 : position]


def line_index(text: str, position: int) -> int:
    return text.count("\n", 0, position)


def covered_lines(text: str, start: int, end: int) -> range:
    """Line numbers touched by the selection ``[start, end]``, inclusive."""

    return range(line_index(text, start), line_index(text, end) + 1)


def trailing_word(text: str, position: int) -> Optional[str]:
    match = TRAILING_WORD_PATTERN.search(line_before(text, position))
    if match is None:
        return None
    return match.group(1)


def leading_whitespace(line: str) -> str:
    match = LEADING_WHITESPACE_PATTERN.match(line)
    return match.group(0) if match else ""


def offset_for_cursor(text: str, cursor: Cursor) -> int:
    """Convert a ``(row, column)`` location into a string offset."""

    lines = text.split("\n")
    row, col = cursor
    row = max(0, min(row, len(lines) - 1))
    offset = 0
    for i in range(row):
        offset += len(lines[i]) + 1  # newline
    return offset + max(0, min(col, len(lines[row])))


def cursor_from_offset(text: str, offset: int) -> Cursor:
    lines = text.split("\n")
    running = 0
    for row, line in enumerate(lines):
        line_len = len(line)
        if offset <= running + line_len:
            return (row, max(0, offset - running))
        running += line_len + 1
    return (len(lines) - 1, len(lines[-1]))


__all__ = [
    "TRAILING_WORD_PATTERN",
    "LEADING_WHITESPACE_PATTERN",
    "NON_WHITESPACE_PATTERN",
    "LIST_MARKER_PATTERN",
    "lines_before",
    "line_before",
    "line_index",
    "covered_lines",
    "trailing_word",
    "leading_whitespace",
    "offset_for_cursor",
    "cursor_from_offset",
]

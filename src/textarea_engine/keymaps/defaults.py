"""Built-in keymap: structural editing keys plus per-platform history chords."""

from __future__ import annotations

from typing import Iterable, Sequence

from .models import (
    DEFAULT_WRAP_PAIRS,
    Binding,
    Chord,
    Command,
    PlatformClass,
    WhenClause,
    WrapPair,
)
from .registry import KeymapRegistry

# Context flags supplied by the editor on every resolve.
TAB_CAPTURE = "tab_capture"
HAS_SELECTION = "has_selection"

# Precedence between key families; higher wins.
PRIORITY_ESCAPE = 80
PRIORITY_TAB = 70
PRIORITY_BACKSPACE = 60
PRIORITY_ENTER = 50
PRIORITY_WRAP = 40
PRIORITY_UNDO = 30
PRIORITY_REDO = 20
PRIORITY_CAPTURE = 10

_MAC = PlatformClass.MAC_LIKE
_WINDOWS = PlatformClass.WINDOWS
_OTHER = PlatformClass.OTHER

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="focus.blur",
        chord=Chord("Escape"),
        command=Command.BLUR,
        description="Release focus",
        priority=PRIORITY_ESCAPE,
    ),
    Binding(
        id="tab.dedent",
        chord=Chord("Tab", required=("shift",)),
        command=Command.DEDENT,
        description="Remove one indent unit from covered lines",
        when=(WhenClause(TAB_CAPTURE),),
        priority=PRIORITY_TAB,
    ),
    Binding(
        id="tab.indent",
        chord=Chord("Tab", forbidden=("shift",)),
        command=Command.INDENT,
        description="Indent covered lines",
        when=(WhenClause(TAB_CAPTURE), WhenClause(HAS_SELECTION)),
        priority=PRIORITY_TAB,
    ),
    Binding(
        id="tab.insert",
        chord=Chord("Tab", forbidden=("shift",)),
        command=Command.INSERT_TAB,
        description="Insert one indent unit at the caret",
        when=(WhenClause(TAB_CAPTURE), WhenClause(HAS_SELECTION, False)),
        priority=PRIORITY_TAB,
    ),
    Binding(
        id="backspace.delete_indent",
        chord=Chord("Backspace"),
        command=Command.DELETE_INDENT,
        description="Delete a whole indent unit before the caret",
        when=(WhenClause(HAS_SELECTION, False),),
        priority=PRIORITY_BACKSPACE,
    ),
    Binding(
        id="enter.continue",
        chord=Chord("Enter"),
        command=Command.NEWLINE_CONTINUE,
        description="Carry indentation and list markers onto the new line",
        when=(WhenClause(HAS_SELECTION, False),),
        priority=PRIORITY_ENTER,
    ),
    Binding(
        id="history.undo.mac",
        chord=Chord("z", required=("meta",), forbidden=("shift", "alt")),
        command=Command.UNDO,
        platform=_MAC,
        priority=PRIORITY_UNDO,
    ),
    Binding(
        id="history.undo.windows",
        chord=Chord("z", required=("ctrl",), forbidden=("shift", "alt")),
        command=Command.UNDO,
        platform=_WINDOWS,
        priority=PRIORITY_UNDO,
    ),
    Binding(
        id="history.undo.other",
        chord=Chord("z", required=("ctrl",), forbidden=("shift", "alt")),
        command=Command.UNDO,
        platform=_OTHER,
        priority=PRIORITY_UNDO,
    ),
    Binding(
        id="history.redo.mac",
        chord=Chord("z", required=("meta", "shift"), forbidden=("alt",)),
        command=Command.REDO,
        platform=_MAC,
        priority=PRIORITY_REDO,
    ),
    Binding(
        id="history.redo.windows",
        chord=Chord("y", required=("ctrl",), forbidden=("alt",)),
        command=Command.REDO,
        platform=_WINDOWS,
        priority=PRIORITY_REDO,
    ),
    Binding(
        id="history.redo.other",
        chord=Chord("z", required=("ctrl", "shift"), forbidden=("alt",)),
        command=Command.REDO,
        platform=_OTHER,
        priority=PRIORITY_REDO,
    ),
    Binding(
        id="capture.toggle.mac",
        chord=Chord("m", required=("ctrl", "shift")),
        command=Command.TOGGLE_CAPTURE,
        platform=_MAC,
        description="Toggle Tab capture so focus can leave the editor",
        priority=PRIORITY_CAPTURE,
    ),
    Binding(
        id="capture.toggle.windows",
        chord=Chord("m", required=("ctrl",)),
        command=Command.TOGGLE_CAPTURE,
        platform=_WINDOWS,
        description="Toggle Tab capture so focus can leave the editor",
        priority=PRIORITY_CAPTURE,
    ),
    Binding(
        id="capture.toggle.other",
        chord=Chord("m", required=("ctrl",)),
        command=Command.TOGGLE_CAPTURE,
        platform=_OTHER,
        description="Toggle Tab capture so focus can leave the editor",
        priority=PRIORITY_CAPTURE,
    ),
)


def wrap_bindings(pairs: Iterable[WrapPair]) -> tuple[Binding, ...]:
    """One binding per configured trigger character."""

    return tuple(
        Binding(
            id=f"wrap.{pair.start}",
            chord=Chord(pair.start),
            command=Command.WRAP_OR_DUPLICATE,
            argument=pair.start,
            description=f"Wrap selection in {pair.start}{pair.closing}",
            priority=PRIORITY_WRAP,
        )
        for pair in pairs
    )


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    wrap_pairs: Iterable[WrapPair] = DEFAULT_WRAP_PAIRS,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register the built-in bindings and one wrap binding per pair."""

    allowed = _build_filters(include_bindings, exclude_bindings)

    for binding in DEFAULT_BINDINGS + wrap_bindings(wrap_pairs):
        if not _selected(binding.id, allowed):
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    return item_id not in exclude


__all__ = [
    "DEFAULT_BINDINGS",
    "HAS_SELECTION",
    "TAB_CAPTURE",
    "load_default_keymaps",
    "wrap_bindings",
]

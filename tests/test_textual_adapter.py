from __future__ import annotations

from typing import List

import pytest

from textarea_engine.adapters.textual import (
    HookSink,
    TextualEditorAdapter,
    TextualUIHooks,
    split_textual_key,
)
from textarea_engine.buffer import BlurTarget, Snapshot


def make_adapter(
    clock, initial: Snapshot | None = None, **hooks
) -> TextualEditorAdapter:
    hooks.setdefault("apply_snapshot", lambda snapshot: None)
    return TextualEditorAdapter(TextualUIHooks(**hooks), initial, clock=clock)


@pytest.mark.parametrize(
    ("key", "character", "expected"),
    [
        ("ctrl+shift+z", None, ("z", ("ctrl", "shift"))),
        ("left_parenthesis", "(", ("(", ())),
        ("shift+tab", None, ("tab", ("shift",))),
        ("backtab", None, ("tab", ("shift",))),
        ("plus", "+", ("+", ())),
        ("enter", "\r", ("enter", ())),
        ("escape", "\x1b", ("escape", ())),
    ],
)
def test_split_textual_key(key: str, character: str | None, expected) -> None:
    assert split_textual_key(key, character) == expected


def test_hook_sink_is_a_blur_target() -> None:
    assert isinstance(HookSink(TextualUIHooks(apply_snapshot=print)), BlurTarget)


def test_adapter_pushes_edits_and_status(clock) -> None:
    applied: List[Snapshot] = []
    values: List[str] = []
    statuses: List[str] = []
    adapter = make_adapter(
        clock,
        apply_snapshot=applied.append,
        value_changed=values.append,
        update_status=statuses.append,
    )

    result = adapter.handle_textual_key("tab", Snapshot.caret("ab"))

    assert result.consumed
    assert applied == [Snapshot.caret("ab  ")]
    assert values == ["ab  "]
    assert statuses == ["edited"]


def test_adapter_reports_capture_toggle(clock) -> None:
    statuses: List[str] = []
    adapter = make_adapter(clock, update_status=statuses.append)

    adapter.handle_textual_key("ctrl+m", Snapshot(""))

    assert adapter.engine.capture is False
    assert statuses == ["capture_off"]
    assert not adapter.handle_textual_key("tab", Snapshot("")).consumed


def test_adapter_records_text_changes(clock) -> None:
    values: List[str] = []
    adapter = make_adapter(clock, value_changed=values.append)

    adapter.handle_text_changed(Snapshot.caret("hi"))

    assert values == ["hi"]
    assert adapter.engine.history.current() == Snapshot.caret("hi")


def test_adapter_blurs_on_escape(clock) -> None:
    blurred: List[bool] = []
    adapter = make_adapter(clock, blur=lambda: blurred.append(True))

    result = adapter.handle_textual_key("escape", Snapshot(""), character="\x1b")

    assert blurred == [True]
    assert not result.consumed


def test_adapter_emits_log_lines(clock) -> None:
    logs: List[str] = []
    adapter = make_adapter(clock, Snapshot.caret("x"), log=logs.append)

    adapter.handle_textual_key("left_parenthesis", Snapshot.caret("x"), character="(")

    assert any(line.startswith("key ->") for line in logs)
    assert any("event='edit.applied'" in line for line in logs)
    assert adapter.engine.snapshot() == Snapshot("x()", 2, 2)

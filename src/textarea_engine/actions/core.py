"""Dispatch from edit commands to the pure rules that implement them."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Optional

from textarea_engine.buffer.state import Snapshot
from textarea_engine.buffer.validation import normalize_snapshot
from textarea_engine.config import EditorConfig
from textarea_engine.keymaps.models import Command
from textarea_engine.runtime import telemetry

from .indent import dedent_lines, delete_indent, indent_lines, insert_tab
from .lists import newline_continue
from .wrap import wrap_or_duplicate

EditPlan = tuple[Snapshot, ...]
Transform = Callable[[Snapshot, EditorConfig, Optional[str]], EditPlan]


def _single(result: Optional[Snapshot]) -> EditPlan:
    return () if result is None else (result,)


def _insert_tab(snapshot: Snapshot, config: EditorConfig, _: Optional[str]) -> EditPlan:
    return (insert_tab(snapshot, config.tab_character),)


def _indent(snapshot: Snapshot, config: EditorConfig, _: Optional[str]) -> EditPlan:
    return (indent_lines(snapshot, config.tab_character),)


def _dedent(snapshot: Snapshot, config: EditorConfig, _: Optional[str]) -> EditPlan:
    return _single(dedent_lines(snapshot, config.tab_character))


def _delete_indent(
    snapshot: Snapshot, config: EditorConfig, _: Optional[str]
) -> EditPlan:
    return _single(delete_indent(snapshot, config.tab_character))


def _newline(snapshot: Snapshot, config: EditorConfig, _: Optional[str]) -> EditPlan:
    del config
    return newline_continue(snapshot)


def _wrap(snapshot: Snapshot, config: EditorConfig, trigger: Optional[str]) -> EditPlan:
    pair = config.pair_for(trigger) if trigger else None
    if pair is None:
        return ()
    return (wrap_or_duplicate(snapshot, pair),)


TRANSFORMS: Mapping[Command, Transform] = MappingProxyType(
    {
        Command.INSERT_TAB: _insert_tab,
        Command.INDENT: _indent,
        Command.DEDENT: _dedent,
        Command.DELETE_INDENT: _delete_indent,
        Command.NEWLINE_CONTINUE: _newline,
        Command.WRAP_OR_DUPLICATE: _wrap,
    }
)


def is_edit(command: Command) -> bool:
    return command in TRANSFORMS


def transform(
    command: Command,
    snapshot: Snapshot,
    config: EditorConfig,
    argument: Optional[str] = None,
) -> EditPlan:
    """Compute the snapshots ``command`` produces, in application order.

    An empty plan means the command does not apply and the key should fall
    through to the host's default handling.
    """

    try:
        rule = TRANSFORMS[command]
    except KeyError as exc:
        raise ValueError(f"'{command.value}' is not a buffer edit") from exc

    with telemetry.span(
        f"actions::{command.value}",
        component="actions",
        metadata={"argument": argument or ""},
    ) as handle:
        plan = rule(normalize_snapshot(snapshot), config, argument)
        handle.add_metadata("edits", len(plan))
        if not plan:
            handle.debug("actions::not_applicable")
        return plan


__all__ = ["EditPlan", "TRANSFORMS", "is_edit", "transform"]

from __future__ import annotations

import pytest

from textarea_engine.keymaps import (
    HAS_SELECTION,
    TAB_CAPTURE,
    Binding,
    Chord,
    Command,
    CommandResolver,
    KeymapRegistry,
    KeyStroke,
    PlatformClass,
    WhenClause,
    load_default_keymaps,
)

CAPTURING = {TAB_CAPTURE: True, HAS_SELECTION: False}


def make_binding(
    binding_id: str,
    *,
    key: str = "x",
    command: Command = Command.INDENT,
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        chord=Chord(key),
        command=command,
        when=when,
        priority=priority,
    )


def build_resolver(
    platform: PlatformClass = PlatformClass.OTHER,
) -> CommandResolver:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    return CommandResolver(registry, platform)


def resolve(resolver: CommandResolver, token: str, **context: bool) -> Command:
    ctx = {**CAPTURING, **context}
    return resolver.resolve(KeyStroke.parse(token), context=ctx).command


def test_resolver_honors_when_clauses() -> None:
    registry = KeymapRegistry()
    gating = make_binding("panel.x", when=(WhenClause("panel_open"),))
    registry.register_binding(gating)
    resolver = CommandResolver(registry)

    miss = resolver.resolve(KeyStroke("x"), context={})
    assert miss.passthrough

    hit = resolver.resolve(KeyStroke("x"), context={"panel_open": True})
    assert hit.command is Command.INDENT
    assert hit.binding == gating


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = KeymapRegistry()
    resolver = CommandResolver(registry)

    assert resolver.resolve(KeyStroke("x")).passthrough

    registry.register_binding(make_binding("plain.x", command=Command.DEDENT))

    assert resolver.resolve(KeyStroke("x")).command is Command.DEDENT


@pytest.mark.parametrize(
    ("platform", "token", "command"),
    [
        (PlatformClass.MAC_LIKE, "meta+z", Command.UNDO),
        (PlatformClass.MAC_LIKE, "cmd+shift+z", Command.REDO),
        (PlatformClass.MAC_LIKE, "ctrl+z", Command.PASSTHROUGH),
        (PlatformClass.MAC_LIKE, "meta+alt+z", Command.PASSTHROUGH),
        (PlatformClass.MAC_LIKE, "ctrl+shift+m", Command.TOGGLE_CAPTURE),
        (PlatformClass.MAC_LIKE, "ctrl+m", Command.PASSTHROUGH),
        (PlatformClass.WINDOWS, "ctrl+z", Command.UNDO),
        (PlatformClass.WINDOWS, "ctrl+y", Command.REDO),
        (PlatformClass.WINDOWS, "ctrl+shift+z", Command.PASSTHROUGH),
        (PlatformClass.WINDOWS, "ctrl+m", Command.TOGGLE_CAPTURE),
        (PlatformClass.OTHER, "ctrl+Z", Command.UNDO),
        (PlatformClass.OTHER, "ctrl+shift+z", Command.REDO),
        (PlatformClass.OTHER, "ctrl+y", Command.PASSTHROUGH),
        (PlatformClass.OTHER, "ctrl+alt+z", Command.PASSTHROUGH),
        (PlatformClass.OTHER, "ctrl+shift+m", Command.TOGGLE_CAPTURE),
    ],
)
def test_history_and_capture_chords_per_platform(
    platform: PlatformClass, token: str, command: Command
) -> None:
    assert resolve(build_resolver(platform), token) is command


def test_tab_depends_on_selection_and_capture() -> None:
    resolver = build_resolver()

    assert resolve(resolver, "Tab") is Command.INSERT_TAB
    assert resolve(resolver, "Tab", has_selection=True) is Command.INDENT
    assert resolve(resolver, "shift+Tab") is Command.DEDENT
    assert resolve(resolver, "Tab", tab_capture=False) is Command.PASSTHROUGH
    assert resolve(resolver, "shift+Tab", tab_capture=False) is Command.PASSTHROUGH


def test_escape_blurs_in_any_context() -> None:
    resolver = build_resolver()

    assert resolve(resolver, "Escape") is Command.BLUR
    assert resolve(resolver, "esc", tab_capture=False) is Command.BLUR


def test_enter_and_backspace_skip_selections() -> None:
    resolver = build_resolver()

    assert resolve(resolver, "Enter") is Command.NEWLINE_CONTINUE
    assert resolve(resolver, "return") is Command.NEWLINE_CONTINUE
    assert resolve(resolver, "Enter", has_selection=True) is Command.PASSTHROUGH
    assert resolve(resolver, "Backspace") is Command.DELETE_INDENT
    assert resolve(resolver, "Backspace", has_selection=True) is Command.PASSTHROUGH


def test_wrap_trigger_carries_its_character() -> None:
    resolver = build_resolver()

    result = resolver.resolve(KeyStroke("(", ("shift",)), context=CAPTURING)

    assert result.command is Command.WRAP_OR_DUPLICATE
    assert result.argument == "("
    assert resolve(resolver, "a") is Command.PASSTHROUGH


def test_lower_priority_binding_fires_when_higher_is_gated_out() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    registry.register_binding(
        Binding(
            id="custom.tab",
            chord=Chord("Tab", forbidden=("shift",)),
            command=Command.BLUR,
        )
    )
    resolver = CommandResolver(registry)

    assert resolve(resolver, "Tab") is Command.INSERT_TAB
    assert resolve(resolver, "Tab", tab_capture=False) is Command.BLUR

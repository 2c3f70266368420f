import pytest

from textarea_engine.keymaps import (
    Binding,
    Chord,
    Command,
    KeymapConflictError,
    KeymapRegistry,
    PlatformClass,
    WhenClause,
    WrapPair,
    load_default_keymaps,
)


def make_binding(
    *,
    binding_id: str,
    chord: Chord | None = None,
    command: Command = Command.INDENT,
    platform: PlatformClass | None = None,
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        chord=chord or Chord("g", required=("ctrl",)),
        command=command,
        platform=platform,
        when=when,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    binding = make_binding(binding_id="ctrl.g")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings()) == [binding]
    assert "ctrl.g" in registry


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="ctrl.g"))

    with pytest.raises(KeymapConflictError) as info:
        registry.register_binding(make_binding(binding_id="ctrl.g.duplicate"))

    assert [b.id for b in info.value.conflicts] == ["ctrl.g"]


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="panel", when=(WhenClause("panel_open"),))
    )
    registry.register_binding(
        make_binding(binding_id="no_panel", when=(WhenClause.parse("!panel_open"),))
    )

    assert registry.stats().binding_count == 3


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", command=Command.DEDENT)

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_register_duplicate_id_without_replace_fails() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="binding"))

    with pytest.raises(ValueError):
        registry.register_binding(
            make_binding(binding_id="binding", chord=Chord("h", required=("ctrl",)))
        )


def test_platform_bindings_only_conflict_on_their_platform() -> None:
    registry = KeymapRegistry()
    chord = Chord("z", required=("ctrl",))
    windows = make_binding(
        binding_id="undo.windows", chord=chord, platform=PlatformClass.WINDOWS
    )
    other = make_binding(
        binding_id="undo.other", chord=chord, platform=PlatformClass.OTHER
    )

    registry.register_binding(windows)
    registry.register_binding(other)

    assert list(registry.iter_bindings(PlatformClass.WINDOWS)) == [windows]
    assert list(registry.iter_bindings(PlatformClass.MAC_LIKE)) == []
    with pytest.raises(KeymapConflictError) as info:
        registry.register_binding(make_binding(binding_id="undo.all", chord=chord))
    assert {b.id for b in info.value.conflicts} == {"undo.windows", "undo.other"}


def test_update_binding_changes_chord() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="binding"))

    updated = registry.update_binding(
        "binding", chord=Chord("d", required=("alt",)), description="dedent"
    )

    assert updated.chord.key == "d"
    assert updated.description == "dedent"
    assert registry.get_binding("binding") is updated


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_revision_tracks_changes() -> None:
    registry = KeymapRegistry()
    before = registry.revision()

    registry.register_binding(make_binding(binding_id="binding"))
    registry.unregister_binding("binding")

    assert registry.revision() == before + 2


def test_load_default_keymaps_has_no_conflicts() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert registry.get_binding("tab.insert").command is Command.INSERT_TAB
    assert registry.get_binding("wrap.(").argument == "("
    assert registry.stats().platforms == ("*", "mac", "other", "windows")


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, include_bindings=("tab.insert", "wrap.*"))

    assert registry.stats().binding_count == 2


def test_load_default_keymaps_custom_wrap_pairs() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        wrap_pairs=(WrapPair("<", ">"),),
        exclude_bindings=("focus.blur",),
    )

    assert "wrap.<" in registry
    assert "wrap.(" not in registry
    assert "focus.blur" not in registry

from __future__ import annotations

import pytest

from textarea_engine.config import ConfigurationError, EditorConfig
from textarea_engine.keymaps import PlatformClass, WrapPair


def test_defaults_use_two_spaces() -> None:
    config = EditorConfig()

    assert config.tab_character == "  "
    assert config.pair_for("(") == WrapPair("(", ")")
    assert config.platform is PlatformClass.OTHER


def test_tab_character_honours_insert_spaces() -> None:
    config = EditorConfig(tab_size=3, insert_spaces=False)

    assert config.tab_character == "\t\t\t"


@pytest.mark.parametrize("tab_size", [0, -2, True, "4"])
def test_invalid_tab_size_is_rejected(tab_size) -> None:
    with pytest.raises(ConfigurationError) as info:
        EditorConfig(tab_size=tab_size)

    assert info.value.option == "tab_size"
    assert isinstance(info.value, ValueError)


def test_history_limits_are_validated() -> None:
    with pytest.raises(ConfigurationError):
        EditorConfig(history_limit=0)
    with pytest.raises(ConfigurationError):
        EditorConfig(history_time_gap_ms=-1)


def test_from_options_accepts_host_option_names() -> None:
    config = EditorConfig.from_options(
        {
            "tabSize": 4,
            "insertSpaces": False,
            "ignoreTabKey": True,
            "platformClass": "mac",
            "history_limit": 10,
        }
    )

    assert config.tab_character == "\t\t\t\t"
    assert config.ignore_tab_key is True
    assert config.platform is PlatformClass.MAC_LIKE
    assert config.history_limit == 10


def test_from_options_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigurationError) as info:
        EditorConfig.from_options({"tabWidth": 4})

    assert info.value.option == "tabWidth"


def test_wrap_pairs_are_coerced() -> None:
    config = EditorConfig(wrap_pairs=("()", "*", ("<", ">"), WrapPair("|")))

    assert [pair.start for pair in config.wrap_pairs] == ["(", "*", "<", "|"]
    assert config.pair_for("<").closing == ">"
    assert config.pair_for("*").closing == "*"
    assert config.pair_for("{") is None


@pytest.mark.parametrize("pairs", [("()", "(]"), ("abc",), ("",)])
def test_bad_wrap_pairs_are_rejected(pairs) -> None:
    with pytest.raises(ConfigurationError) as info:
        EditorConfig(wrap_pairs=pairs)

    assert info.value.option == "wrap_pairs"


def test_unknown_platform_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        EditorConfig(platform="amiga")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("MacIntel", PlatformClass.MAC_LIKE),
        ("iPhone", PlatformClass.MAC_LIKE),
        ("macOS-14.4-arm64-arm-64bit", PlatformClass.MAC_LIKE),
        ("Win32", PlatformClass.WINDOWS),
        ("Windows-10-10.0.19041-SP0", PlatformClass.WINDOWS),
        ("Darwin", PlatformClass.MAC_LIKE),
        ("darwin", PlatformClass.MAC_LIKE),
        ("Darwin-23.4.0-arm64-arm-64bit", PlatformClass.MAC_LIKE),
        ("Linux x86_64", PlatformClass.OTHER),
        ("", PlatformClass.OTHER),
        (None, PlatformClass.OTHER),
    ],
)
def test_platform_detection(raw, expected) -> None:
    assert PlatformClass.from_platform_string(raw) is expected

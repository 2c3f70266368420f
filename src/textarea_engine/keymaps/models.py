"""Dataclasses describing key chords, bindings, and the commands they yield."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, MutableMapping, Optional

_MODIFIER_ALIASES = {
    "control": "ctrl",
    "cmd": "meta",
    "command": "meta",
    "super": "meta",
    "option": "alt",
}

_KEY_ALIASES = {
    "esc": "escape",
    "return": "enter",
}

# "Darwin" must not reach the Windows check, so Windows is anchored to a word start.
_WINDOWS_PLATFORM = re.compile(r"\bWin", re.IGNORECASE)
_MAC_PLATFORM = re.compile(r"(Mac|iPhone|iPod|iPad|Darwin)", re.IGNORECASE)


class PlatformClass(str, Enum):
    """Keybinding scheme families."""

    MAC_LIKE = "mac"
    WINDOWS = "windows"
    OTHER = "other"

    @classmethod
    def from_platform_string(cls, platform: str | None) -> "PlatformClass":
        """Classify a host platform string such as ``"MacIntel"`` or ``"Win32"``."""

        if not platform:
            return cls.OTHER
        if _MAC_PLATFORM.search(platform):
            return cls.MAC_LIKE
        if _WINDOWS_PLATFORM.search(platform):
            return cls.WINDOWS
        return cls.OTHER


class Command(str, Enum):
    """Logical operations a key press can resolve to."""

    INDENT = "indent"
    DEDENT = "dedent"
    INSERT_TAB = "insert_tab"
    DELETE_INDENT = "delete_indent"
    NEWLINE_CONTINUE = "newline_continue"
    WRAP_OR_DUPLICATE = "wrap_or_duplicate"
    UNDO = "undo"
    REDO = "redo"
    TOGGLE_CAPTURE = "toggle_capture"
    BLUR = "blur"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True, slots=True)
class WrapPair:
    """Characters placed around a selection (or caret) by a trigger key."""

    start: str
    end: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.start) != 1:
            raise ValueError(
                f"wrap trigger must be one character, got {self.start!r}"
            )
        if self.end is None:
            object.__setattr__(self, "end", self.start)
        elif len(self.end) != 1:
            raise ValueError(f"wrap end must be one character, got {self.end!r}")

    @property
    def closing(self) -> str:
        return self.end or self.start

    @classmethod
    def coerce(cls, item: "WrapPair | str | tuple[str, ...]") -> "WrapPair":
        """Accept ``WrapPair``, ``"*"``, ``"()"``, ``("(",)`` or ``("(", ")")``."""

        if isinstance(item, WrapPair):
            return item
        if isinstance(item, str):
            if len(item) == 2:
                return cls(item[0], item[1])
            return cls(item)
        if len(item) == 1:
            return cls(item[0])
        if len(item) == 2:
            return cls(item[0], item[1])
        raise ValueError(f"cannot build a wrap pair from {item!r}")


DEFAULT_WRAP_PAIRS: tuple[WrapPair, ...] = (
    WrapPair("(", ")"),
    WrapPair("{", "}"),
    WrapPair("[", "]"),
    WrapPair('"'),
    WrapPair("'"),
    WrapPair("*"),
    WrapPair("~"),
)


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = []
    for modifier in modifiers:
        cleaned = modifier.strip().lower()
        if cleaned:
            values.append(_MODIFIER_ALIASES.get(cleaned, cleaned))
    return tuple(sorted(dict.fromkeys(values)))


def _normalize_key(key: str) -> str:
    folded = key.casefold()
    return _KEY_ALIASES.get(folded, folded)


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single key press: logical key identity plus held modifiers."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Build a stroke from ``"ctrl+shift+z"`` style tokens."""

        parts = token.split("+")
        # "+" itself, or a chord ending in it ("ctrl++")
        if token.endswith("+") and len(token) > 1 and token[-2] == "+":
            return cls("+", tuple(p for p in token[:-2].split("+") if p))
        if token == "+":
            return cls("+")
        return cls(parts[-1], tuple(parts[:-1]))

    @property
    def normalized_key(self) -> str:
        return _normalize_key(self.key)

    def has(self, modifier: str) -> bool:
        return modifier in self.modifiers

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers) + f"+{self.key}"
        return self.key


@dataclass(frozen=True, slots=True)
class Chord:
    """Key pattern: modifiers in ``required`` must be held, ``forbidden`` not.

    Modifiers named in neither set are ignored when matching.
    """

    key: str
    required: tuple[str, ...] = ()
    forbidden: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("chord key cannot be empty")
        required = _normalize_modifiers(self.required)
        forbidden = _normalize_modifiers(self.forbidden)
        overlap = set(required) & set(forbidden)
        if overlap:
            raise ValueError(
                f"modifiers both required and forbidden: {sorted(overlap)}"
            )
        object.__setattr__(self, "required", required)
        object.__setattr__(self, "forbidden", forbidden)

    def matches(self, stroke: KeyStroke) -> bool:
        if _normalize_key(self.key) != stroke.normalized_key:
            return False
        if not all(stroke.has(mod) for mod in self.required):
            return False
        return not any(stroke.has(mod) for mod in self.forbidden)

    @property
    def token(self) -> str:
        parts = list(self.required) + [_normalize_key(self.key)]
        signature = "+".join(parts)
        if self.forbidden:
            signature += " " + " ".join(f"!{mod}" for mod in self.forbidden)
        return signature


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Simple boolean condition used to gate bindings."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        expected = True
        if expr.startswith("!"):
            expected = False
            expr = expr[1:]
        return cls(expr, expected)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a chord with a command, optionally per platform.

    ``platform=None`` applies on every platform. ``argument`` is handed to
    the command (the trigger character for wrap bindings).
    """

    id: str
    chord: Chord
    command: Command
    platform: Optional[PlatformClass] = None
    argument: Optional[str] = None
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    tags: tuple[str, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if self.command is Command.PASSTHROUGH:
            raise ValueError("passthrough is the absence of a binding")
        object.__setattr__(self, "tags", _normalize_tags(self.tags))
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return self.chord.token


__all__ = [
    "PlatformClass",
    "Command",
    "WrapPair",
    "DEFAULT_WRAP_PAIRS",
    "KeyStroke",
    "Chord",
    "WhenClause",
    "Binding",
]

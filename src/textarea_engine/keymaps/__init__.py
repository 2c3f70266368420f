"""Declarative keymap registry, default bindings, and command resolution."""

from .models import (
    DEFAULT_WRAP_PAIRS,
    Binding,
    Chord,
    Command,
    KeyStroke,
    PlatformClass,
    WhenClause,
    WrapPair,
)
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import CommandResolver, ResolutionResult
from .defaults import HAS_SELECTION, TAB_CAPTURE, load_default_keymaps

__all__ = [
    "Binding",
    "Chord",
    "Command",
    "KeyStroke",
    "PlatformClass",
    "WhenClause",
    "WrapPair",
    "DEFAULT_WRAP_PAIRS",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "CommandResolver",
    "ResolutionResult",
    "HAS_SELECTION",
    "TAB_CAPTURE",
    "load_default_keymaps",
]

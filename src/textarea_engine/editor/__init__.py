"""Editor facade wiring keymaps, editing rules, and history together."""

from .base import EditorBus, EditResult, KeyInput
from .engine import EditorEngine, KeyHook

__all__ = [
    "EditorBus",
    "EditResult",
    "EditorEngine",
    "KeyHook",
    "KeyInput",
]

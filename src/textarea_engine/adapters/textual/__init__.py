"""Textual integration for the editing engine."""

from .controller import (
    HookSink,
    TextualEditorAdapter,
    TextualUIHooks,
    split_textual_key,
)

__all__ = [
    "HookSink",
    "TextualEditorAdapter",
    "TextualUIHooks",
    "split_textual_key",
]

"""UI-agnostic keyboard editing engine for plain-text input widgets."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "editor",
    "keymaps",
    "runtime",
]

__version__ = "0.1.0"

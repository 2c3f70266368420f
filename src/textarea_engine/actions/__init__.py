"""Pure editing rules: (command, snapshot, config) -> new snapshots."""

from .core import EditPlan, TRANSFORMS, is_edit, transform
from .indent import dedent_lines, delete_indent, indent_lines, insert_tab
from .lists import carry_indent, continue_list, newline_continue, next_marker
from .wrap import wrap_or_duplicate

__all__ = [
    "EditPlan",
    "TRANSFORMS",
    "is_edit",
    "transform",
    "insert_tab",
    "indent_lines",
    "dedent_lines",
    "delete_indent",
    "carry_indent",
    "continue_list",
    "newline_continue",
    "next_marker",
    "wrap_or_duplicate",
]

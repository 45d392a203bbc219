"""
Editing Package

Indent and reorder engines. Every operation is single-step and runs as one
store transaction: it either applies completely or leaves the store as it
was.
"""

from .indent import (
    IndentEngine,
    align_with_above_rule,
    indent_rule,
    nest_under_above_rule,
    unindent_rule,
    unindent_to_top_rule,
)
from .reorder import (
    DropTargetKind,
    ReorderEngine,
    move_marker_onto,
    move_stack_onto,
    reverse_stack,
)

__all__ = [
    "IndentEngine",
    "align_with_above_rule",
    "indent_rule",
    "nest_under_above_rule",
    "unindent_rule",
    "unindent_to_top_rule",
    "DropTargetKind",
    "ReorderEngine",
    "move_marker_onto",
    "move_stack_onto",
    "reverse_stack",
]

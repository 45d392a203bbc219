"""
Outline Package

Outline-text export and predecessor lookups over flat marker sequences.
"""

from .codec import (
    EXPORT_INDENT_WIDTH,
    OutlineOrder,
    format_marker_line,
    format_outline,
    hierarchy_violations,
    predecessor_at_level,
    previous_indent,
    reverse_markers,
    serialize,
)

__all__ = [
    "EXPORT_INDENT_WIDTH",
    "OutlineOrder",
    "format_marker_line",
    "format_outline",
    "hierarchy_violations",
    "predecessor_at_level",
    "previous_indent",
    "reverse_markers",
    "serialize",
]

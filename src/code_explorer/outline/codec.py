"""
Module: outline.codec

Purpose:
    Pure functions over a stack's flat marker sequence: predecessor lookups
    used by the indent rules, reversal, and the outline-text export.

    Export format, one marker per line:

        <indent spaces>- [tag1][tag2] <relpath>:<line+1>:<col+1> <code> # <title>

    The tag group (and its trailing space) and the " # title" suffix are
    omitted when absent. Nesting is recoverable from the leading-space count
    divided by the indent width; parsing it back is not provided.

Key Functions:
    - predecessor_at_level(): Nearest earlier marker at a given indent
    - previous_indent(): Indent of the immediate predecessor (-1 at index 0)
    - reverse_markers(): Reversed order, indents travel with markers
    - hierarchy_violations(): Positions with no ancestor chain back to 0
    - format_marker_line() / serialize() / format_outline(): Export

Dependencies:
    - core.models
    - utils.paths.relative_file_path

Used By:
    - editing.indent
    - editing.reorder
    - view.controller (copy commands)
    - cli (export)

Nothing in this module mutates its input.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from typing import List, Optional, Sequence, Tuple, Union

from code_explorer.core.models import Marker, Stack
from code_explorer.utils.paths import relative_file_path

EXPORT_INDENT_WIDTH = 2


class OutlineOrder(str, Enum):
    """Order in which serialize() walks the stack."""
    FORWARD = "forward"
    REVERSED = "reversed"

    def __str__(self) -> str:
        return self.value


# ─────────────────────────────────────────────────────────────────────────────
# Predecessor Lookups
# ─────────────────────────────────────────────────────────────────────────────

def predecessor_at_level(
    markers: Sequence[Marker],
    index: int,
    level: int,
) -> Optional[Marker]:
    """
    Nearest marker before `index` whose indent equals `level`.

    Scans backward from index - 1 to 0. With level == indent - 1 this finds
    the nearest ancestor; with level == indent, the nearest earlier sibling
    (or cousin, since there are no parent links to tell them apart).

    Args:
        markers: Stack marker sequence
        index: Position to scan back from (exclusive)
        level: Indent level to match

    Returns:
        Matching Marker or None
    """
    for i in range(min(index, len(markers)) - 1, -1, -1):
        if markers[i].indent == level:
            return markers[i]
    return None


def previous_indent(markers: Sequence[Marker], index: int) -> int:
    """Indent of the marker at index - 1, or -1 for the first marker."""
    if index <= 0:
        return -1
    return markers[index - 1].indent


def hierarchy_violations(markers: Sequence[Marker]) -> List[int]:
    """
    Positions whose indent has no ancestor chain back to level 0.

    A marker at position i with indent k > 0 is valid when some earlier
    marker has indent k - 1. Engine indent rules never create violations;
    reversal, move-onto-marker and bulk imports can. Rendering tolerates
    them, this is for diagnostics only.
    """
    violations: List[int] = []
    seen_levels: set[int] = set()
    for i, marker in enumerate(markers):
        if marker.indent > 0 and (marker.indent - 1) not in seen_levels:
            violations.append(i)
        seen_levels.add(marker.indent)
    return violations


def reverse_markers(markers: Sequence[Marker]) -> Tuple[Marker, ...]:
    """
    Reverse marker order; indent values travel with their markers.

    [(A,0),(B,1),(C,1)] becomes [(C,1),(B,1),(A,0)]. Flipping a call-stack
    trace is the intended use, so the result may violate the hierarchy
    invariant. Applying it twice restores the input exactly.
    """
    return tuple(reversed(markers))


# ─────────────────────────────────────────────────────────────────────────────
# Outline Export
# ─────────────────────────────────────────────────────────────────────────────

def format_marker_line(
    marker: Marker,
    root: Optional[Union[str, PurePath]] = None,
    indent_width: int = EXPORT_INDENT_WIDTH,
) -> str:
    """
    Render one marker as an outline line.

    Args:
        marker: Marker to render
        root: Workspace folder that file paths are made relative to
        indent_width: Spaces per indent level

    Returns:
        Line without trailing newline
    """
    indent = " " * (indent_width * marker.indent)
    tags = f"{marker.tag_text} " if marker.tags else ""
    loc = f"{relative_file_path(marker.file, root)}:{marker.line + 1}:{marker.column + 1}"
    title = f" # {marker.title}" if marker.title else ""
    return f"{indent}- {tags}{loc} {marker.code}{title}"


def serialize(
    stack: Stack,
    order: OutlineOrder = OutlineOrder.FORWARD,
    root: Optional[Union[str, PurePath]] = None,
    indent_width: int = EXPORT_INDENT_WIDTH,
) -> List[str]:
    """
    Serialize a stack to outline lines.

    Args:
        stack: Stack to export
        order: FORWARD (document order) or REVERSED (see reverse_markers)
        root: Workspace folder for relative paths
        indent_width: Spaces per indent level

    Returns:
        One line per marker
    """
    markers: Sequence[Marker] = stack.markers
    if order == OutlineOrder.REVERSED:
        markers = reverse_markers(markers)
    return [format_marker_line(m, root, indent_width) for m in markers]


def format_outline(
    stack: Stack,
    order: OutlineOrder = OutlineOrder.FORWARD,
    root: Optional[Union[str, PurePath]] = None,
    indent_width: int = EXPORT_INDENT_WIDTH,
) -> str:
    """serialize() joined with newlines (clipboard / stdout text)."""
    return "\n".join(serialize(stack, order, root, indent_width))

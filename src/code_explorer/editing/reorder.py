"""
Module: editing.reorder

Purpose:
    Cross-position moves of markers and stacks (drag and drop), and stack
    reversal. The list transformations are pure functions over a copy of the
    scope's stack list; ReorderEngine runs them inside a store transaction so
    a failure never leaves a marker removed without being re-inserted.

Key Functions:
    - reverse_stack(): Reverse one stack's markers, indents travel
    - move_marker_onto(): Reparent a marker under a marker or onto a stack
    - move_stack_onto(): Reorder the stack list

Key Classes:
    - DropTargetKind: What a drop landed on (marker or stack)
    - ReorderEngine: Store-backed entry points

Dependencies:
    - outline.codec.reverse_markers
    - store.marker_position / store.stack_position

Used By:
    - view.drag_drop
    - view.controller
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import List, Optional

from code_explorer.core.errors import InvalidOperationError
from code_explorer.core.models import Marker, Stack
from code_explorer.outline.codec import reverse_markers
from code_explorer.store.facade import StoreFacade
from code_explorer.store.marker_store import marker_position, stack_position

logger = logging.getLogger(__name__)


class DropTargetKind(str, Enum):
    """Kind of node a marker or stack was dropped onto."""
    MARKER = "marker"
    STACK = "stack"

    def __str__(self) -> str:
        return self.value


# ─────────────────────────────────────────────────────────────────────────────
# Pure list transformations
# ─────────────────────────────────────────────────────────────────────────────

def reverse_stack(stacks: List[Stack], stack_id: str) -> Optional[List[Stack]]:
    """
    Reverse the marker order of one stack.

    Indents are not recomputed, so the result may place a deeper marker
    before any of its ancestors. Returns None for stacks with fewer than two
    markers.
    """
    i = stack_position(stacks, stack_id)
    if len(stacks[i].markers) < 2:
        return None
    stacks[i] = stacks[i].with_markers(reverse_markers(stacks[i].markers))
    return stacks


def move_marker_onto(
    stacks: List[Stack],
    source_id: str,
    target_id: str,
    target_kind: DropTargetKind,
) -> Optional[List[Stack]]:
    """
    Move a marker onto another marker or onto a stack.

    MARKER: the source is removed from its stack, inserted directly after
    the target in the target's stack, and given indent target.indent + 1.
    The reparent is unconditional (not capped by the hierarchy invariant).

    STACK: the source is removed and appended to the target stack with its
    indent unchanged.

    Args:
        stacks: Copy of the scope's stack list (modified in place)
        source_id: Marker being moved
        target_id: Marker or stack id dropped onto
        target_kind: Kind of target_id

    Returns:
        Updated list, or None when the move changes nothing

    Raises:
        NotFoundError: If the source or target does not exist
    """
    si, mi = marker_position(stacks, source_id)
    source = stacks[si].markers[mi]

    if target_kind == DropTargetKind.MARKER:
        ti, tj = marker_position(stacks, target_id)
        if source_id == target_id:
            return None
        target = stacks[ti].markers[tj]
        moved = replace(source, indent=target.indent + 1)
        if si == ti and mi == tj + 1 and source.indent == moved.indent:
            return None

        stacks[si] = stacks[si].with_markers(m for m in stacks[si].markers if m.id != source_id)
        markers = list(stacks[ti].markers)
        markers.insert(stacks[ti].index_of(target_id) + 1, moved)
        stacks[ti] = stacks[ti].with_markers(markers)
        return stacks

    if target_kind == DropTargetKind.STACK:
        ti = stack_position(stacks, target_id)
        if si == ti and mi == len(stacks[si].markers) - 1:
            return None
        stacks[si] = stacks[si].with_markers(m for m in stacks[si].markers if m.id != source_id)
        stacks[ti] = stacks[ti].with_markers(stacks[ti].markers + (source,))
        return stacks

    raise ValueError(f"Unknown drop target kind: {target_kind!r}")


def move_stack_onto(
    stacks: List[Stack],
    source_id: str,
    target_id: str,
    target_kind: DropTargetKind,
) -> List[Stack]:
    """
    Place the source stack at the target stack's position.

    Moving down lands the source just after the target, moving up just
    before it. With a MARKER target the marker's owning stack is the target.
    Marker membership is not touched.

    Raises:
        NotFoundError: If the source or target does not exist
        InvalidOperationError: If the source and target are the same stack
    """
    source = stack_position(stacks, source_id)
    if target_kind == DropTargetKind.MARKER:
        target = marker_position(stacks, target_id)[0]
    elif target_kind == DropTargetKind.STACK:
        target = stack_position(stacks, target_id)
    else:
        raise ValueError(f"Unknown drop target kind: {target_kind!r}")

    if source == target:
        raise InvalidOperationError("Cannot move a stack onto itself")

    stacks.insert(target, stacks.pop(source))
    return stacks


class ReorderEngine:
    """Store-backed reorder operations."""

    def __init__(self, store: StoreFacade) -> None:
        self._store = store

    def reverse(self, stack_id: str) -> Stack:
        """Reverse a stack's markers in place."""
        committed = self._store.transaction(lambda stacks: reverse_stack(stacks, stack_id))
        stack = committed[stack_position(committed, stack_id)]
        logger.info(f"Reversed {len(stack.markers)} markers of {stack.display_title!r}")
        return stack

    def move_marker(
        self,
        source_id: str,
        target_id: str,
        target_kind: DropTargetKind,
    ) -> Marker:
        """
        Move a marker onto a marker (reparent) or a stack (append).

        Returns:
            The moved marker as committed

        Raises:
            NotFoundError: If the source or target does not exist
            PersistenceError: If the store fails to write
        """
        target_kind = DropTargetKind(target_kind)
        committed = self._store.transaction(
            lambda stacks: move_marker_onto(stacks, source_id, target_id, target_kind)
        )
        si, mi = marker_position(committed, source_id)
        marker = committed[si].markers[mi]
        logger.info(
            f"Moved marker {marker.description} onto {target_kind} {target_id} "
            f"(stack {committed[si].display_title!r}, position {mi}, indent {marker.indent})"
        )
        return marker

    def move_stack(
        self,
        source_id: str,
        target_id: str,
        target_kind: DropTargetKind,
    ) -> List[Stack]:
        """
        Move a stack next to the target stack.

        Returns:
            The committed stack list

        Raises:
            NotFoundError: If the source or target does not exist
            InvalidOperationError: If a stack is dropped onto itself
        """
        target_kind = DropTargetKind(target_kind)
        committed = self._store.transaction(
            lambda stacks: move_stack_onto(stacks, source_id, target_id, target_kind)
        )
        logger.info(f"Moved stack {source_id} to position {stack_position(committed, source_id)}")
        return committed

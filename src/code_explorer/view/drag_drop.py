"""
Drag-and-drop controller for the stack tree.

A drag carries exactly one node (the first of the selection); a drop pairs
it with one target node. Labels can be neither dragged nor dropped onto.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from code_explorer.editing.reorder import DropTargetKind, ReorderEngine

from .nodes import LabelNode, MarkerNode, StackNode, TreeNode

logger = logging.getLogger(__name__)

TREE_MIME_TYPE = "application/vnd.code.tree.codeExplorer"


@dataclass(frozen=True)
class DragPayload:
    """Data transferred between handle_drag() and handle_drop()."""
    node: TreeNode
    mime_type: str = TREE_MIME_TYPE


class StackTreeDragAndDrop:
    """Turns drag/drop gestures into reorder engine calls."""

    drag_mime_types = (TREE_MIME_TYPE,)
    drop_mime_types = (TREE_MIME_TYPE,)

    def __init__(self, reorder: ReorderEngine) -> None:
        self._reorder = reorder

    def handle_drag(self, sources: Sequence[TreeNode]) -> Optional[DragPayload]:
        """Payload for the first dragged node, or None for labels / empty selections."""
        if not sources:
            return None
        node = sources[0]
        if isinstance(node, LabelNode):
            return None
        if isinstance(node, (StackNode, MarkerNode)):
            return DragPayload(node)
        raise TypeError(f"Unknown node: {node!r}")

    def handle_drop(self, target: Optional[TreeNode], payload: Optional[DragPayload]) -> bool:
        """
        Apply a drop.

        Returns:
            True if a move was performed, False if the drop was rejected

        Raises:
            NotFoundError: If the source or target vanished since the drag
            InvalidOperationError: If a stack is dropped onto itself
        """
        if target is None or payload is None or payload.mime_type != TREE_MIME_TYPE:
            return False

        if isinstance(target, LabelNode):
            logger.debug("Drop on a label ignored")
            return False
        if isinstance(target, StackNode):
            target_id, target_kind = target.stack.id, DropTargetKind.STACK
        elif isinstance(target, MarkerNode):
            target_id, target_kind = target.marker.id, DropTargetKind.MARKER
        else:
            raise TypeError(f"Unknown node: {target!r}")

        source = payload.node
        if isinstance(source, StackNode):
            self._reorder.move_stack(source.stack.id, target_id, target_kind)
        elif isinstance(source, MarkerNode):
            self._reorder.move_marker(source.marker.id, target_id, target_kind)
        elif isinstance(source, LabelNode):
            return False
        else:
            raise TypeError(f"Unknown node: {source!r}")
        return True

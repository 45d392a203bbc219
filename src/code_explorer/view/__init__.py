"""
View Package

Tree projection for a host tree UI, drag and drop, and the stack view
command handlers.
"""

from .controller import NONE_CHOICE, PREDEFINED_COLORS, OperationResult, StackViewController, parse_position
from .drag_drop import TREE_MIME_TYPE, DragPayload, StackTreeDragAndDrop
from .nodes import (
    Collapsible,
    CommandRef,
    IconSpec,
    LabelKind,
    LabelNode,
    MarkerNode,
    StackNode,
    TreeItem,
    TreeNode,
)
from .projection import StackTreeProjection

__all__ = [
    "NONE_CHOICE",
    "PREDEFINED_COLORS",
    "OperationResult",
    "StackViewController",
    "parse_position",
    "TREE_MIME_TYPE",
    "DragPayload",
    "StackTreeDragAndDrop",
    "Collapsible",
    "CommandRef",
    "IconSpec",
    "LabelKind",
    "LabelNode",
    "MarkerNode",
    "StackNode",
    "TreeItem",
    "TreeNode",
    "StackTreeProjection",
]

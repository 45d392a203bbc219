"""
Module: view.nodes

Purpose:
    Closed set of node kinds handed to a host tree UI, and the plain data
    types describing how each node renders.

Key Classes:
    - LabelNode / StackNode / MarkerNode: Node variants (TreeNode union)
    - LabelKind: Placeholder label variants
    - TreeItem: Rendering description of one node
    - IconSpec, CommandRef, Collapsible: TreeItem parts

Used By:
    - view.projection
    - view.drag_drop
    - view.controller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from code_explorer.core.models import Marker, Stack


class LabelKind(str, Enum):
    """Placeholder labels shown instead of real content."""
    PLAIN = "plain"
    NO_WORKSPACE = "no_workspace"
    CHOOSE_FOLDER = "choose_folder"
    NO_STACKS = "no_stacks"
    NO_MARKERS = "no_markers"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LabelNode:
    """Informational leaf (possibly carrying an action, e.g. 'create stack')."""
    label: str
    kind: LabelKind = LabelKind.PLAIN


@dataclass(frozen=True)
class StackNode:
    stack: Stack


@dataclass(frozen=True)
class MarkerNode:
    marker: Marker


TreeNode = Union[LabelNode, StackNode, MarkerNode]


class Collapsible(str, Enum):
    NONE = "none"
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


@dataclass(frozen=True)
class IconSpec:
    """Theme icon name with optional theme color token."""
    name: str
    color: Optional[str] = None


@dataclass(frozen=True)
class CommandRef:
    """Host command run when the item is clicked."""
    command: str
    title: str
    arguments: Tuple[object, ...] = ()


@dataclass(frozen=True)
class TreeItem:
    """
    Rendering description of a node.

    Attributes:
        label: Text shown for the node
        highlights: (start, end) spans of `label` rendered distinctly
        description: Secondary, dimmed text
        tooltip: Hover text (markdown allowed when it starts with '**')
        icon: Optional theme icon
        collapsible: Expansion state
        context_value: Key for context menu contributions
        command: Command run on click
    """
    label: str
    highlights: Tuple[Tuple[int, int], ...] = ()
    description: Optional[str] = None
    tooltip: Optional[str] = None
    icon: Optional[IconSpec] = None
    collapsible: Collapsible = Collapsible.NONE
    context_value: str = ""
    command: Optional[CommandRef] = field(default=None)

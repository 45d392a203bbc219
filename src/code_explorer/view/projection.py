"""
Module: view.projection

Purpose:
    Maps the (Stack, Marker) data model onto nodes for a host tree UI and
    back. The projection is deliberately one level deep per stack: a stack's
    children are its markers in sequence order, flat. Indentation is only a
    visual prefix on the marker label, because indent and drag/drop are
    defined against the flat encoding.

    The projection holds no node state of its own. It subscribes once to the
    store's change signal and the scope context's change signal and answers
    each with a full refresh (`treeChanged`).

Key Classes:
    - StackTreeProjection: children() / parent_of() / tree_item()

Dependencies:
    - PySide6.QtCore: QObject/Signal refresh notification
    - store.StoreFacade
    - config.ExplorerConfig

Used By:
    - view.drag_drop
    - view.controller
"""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from code_explorer.config import ExplorerConfig
from code_explorer.core.models import Marker, Stack
from code_explorer.store.facade import StoreFacade
from code_explorer.store.scope import WorkspaceScope
from code_explorer.utils.dates import get_date_str, get_date_time_str

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

logger = logging.getLogger(__name__)

# Host command ids
OPEN_MARKER_COMMAND = "codeExplorer.stackView.openMarker"
CREATE_STACK_COMMAND = "codeExplorer.createStack"
CHOOSE_FOLDER_COMMAND = "codeExplorer.chooseWorkspaceFolder"

ACTIVE_STACK_ICON = IconSpec("circle-filled", "terminal.ansiGreen")


class StackTreeProjection(QObject):
    """Tree data provider over a store."""

    treeChanged = Signal()

    def __init__(self, store: StoreFacade, config: Optional[ExplorerConfig] = None) -> None:
        super().__init__()
        self._store = store
        self._config = config or ExplorerConfig()
        self._subscription = store.on_change(self._on_data_changed)
        store.scopes.scopeChanged.connect(self._on_scope_changed)

    def refresh(self) -> None:
        """Ask the host to re-read the whole tree."""
        self.treeChanged.emit()

    def dispose(self) -> None:
        """Stop listening to the store and the scope context."""
        self._subscription.dispose()
        self._store.scopes.scopeChanged.disconnect(self._on_scope_changed)

    def _on_data_changed(self, scope_key: str) -> None:
        current = self._store.scopes.current
        if current is not None and current.key == scope_key:
            self.refresh()

    def _on_scope_changed(self, scope: Optional[WorkspaceScope]) -> None:
        logger.debug(f"Scope changed to {scope.folder if scope else None}, refreshing tree")
        self.refresh()

    # ─────────────────────────────────────────────────────────────────────────
    # Structure
    # ─────────────────────────────────────────────────────────────────────────

    def children(self, node: Optional[TreeNode] = None) -> List[TreeNode]:
        """
        Child nodes of `node` (root when None).

        Root: stacks of the current scope, or one placeholder label when no
        folder is open, a folder must be chosen, or there are no stacks.
        StackNode: its markers, flat, or a placeholder when empty.
        MarkerNode / LabelNode: none.
        """
        if node is None:
            return self._root_children()

        if isinstance(node, StackNode):
            current = self._store.get_stack(node.stack.id)
            if current is None:
                return []
            if not current.markers:
                return [LabelNode("No markers", LabelKind.NO_MARKERS)]
            return [MarkerNode(m) for m in current.markers]
        if isinstance(node, (LabelNode, MarkerNode)):
            return []
        raise TypeError(f"Unknown node: {node!r}")

    def _root_children(self) -> List[TreeNode]:
        scopes = self._store.scopes
        if not scopes.folders:
            return [LabelNode("No workspace opened", LabelKind.NO_WORKSPACE)]
        if scopes.needs_choice:
            return [LabelNode("Choose a workspace folder", LabelKind.CHOOSE_FOLDER)]

        stacks = self._store.list_stacks()
        if not stacks:
            return [LabelNode("No stacks", LabelKind.NO_STACKS)]
        return [StackNode(s) for s in stacks]

    def parent_of(self, node: TreeNode) -> Optional[TreeNode]:
        """
        Parent of a node.

        A marker's parent is whichever stack currently holds its id, looked
        up across all stacks of the scope. Stacks and labels have none.
        """
        if isinstance(node, MarkerNode):
            found = self._store.locate_marker(node.marker.id)
            if found is None:
                return None
            return StackNode(found[0])
        if isinstance(node, (LabelNode, StackNode)):
            return None
        raise TypeError(f"Unknown node: {node!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────────

    def tree_item(self, node: TreeNode) -> TreeItem:
        """How the host should render `node`."""
        if isinstance(node, LabelNode):
            return self._label_item(node)
        if isinstance(node, StackNode):
            return self._stack_item(node.stack)
        if isinstance(node, MarkerNode):
            return self._marker_item(node)
        raise TypeError(f"Unknown node: {node!r}")

    def _label_item(self, node: LabelNode) -> TreeItem:
        if node.kind == LabelKind.CHOOSE_FOLDER:
            return TreeItem(
                label="Click to choose a workspace folder to load data",
                highlights=((0, 5),),
                command=CommandRef(CHOOSE_FOLDER_COMMAND, "Choose workspace folder"),
            )
        if node.kind == LabelKind.NO_STACKS:
            return TreeItem(
                label="No stacks",
                description=(
                    "Add a first code marker will create a stack automatically. "
                    "Or click to create a stack manually."
                ),
                command=CommandRef(CREATE_STACK_COMMAND, "Create stack"),
            )
        if node.kind == LabelKind.NO_MARKERS:
            return TreeItem(
                label="No markers",
                description="Add a marker by right clicking code line or gutter, or through command palette.",
            )
        return TreeItem(label=node.label)

    def _stack_item(self, stack: Stack) -> TreeItem:
        tooltip = f"Created at {get_date_time_str(stack.created_at)}"
        if stack.is_active:
            tooltip = f"**ACTIVE**(Markers will be added into this stack). {tooltip}"

        return TreeItem(
            label=stack.title or self._config.untitled_stack_title,
            description=f"{len(stack.markers)} markers {get_date_str(stack.created_at)}",
            tooltip=tooltip,
            icon=ACTIVE_STACK_ICON if stack.is_active else None,
            collapsible=Collapsible.EXPANDED if stack.is_active else Collapsible.COLLAPSED,
            context_value="stack",
        )

    def _marker_item(self, node: MarkerNode) -> TreeItem:
        m: Marker = node.marker
        label = m.display_title
        prefix = ""
        if m.indent > 0:
            prefix = " " * (self._config.label_indent_width * m.indent)
            label = prefix + label

        # Spans cover the tag text inside each pair of brackets
        highlights = []
        last = len(prefix)
        for tag in m.tags:
            length = len(tag) + 2
            highlights.append((last + 1, last + length - 1))
            last += length

        tooltip = f"Created at {get_date_time_str(m.created_at)}"
        if m.title:
            tooltip = f"Code: `{m.code}`. {tooltip}"

        return TreeItem(
            label=label,
            highlights=tuple(highlights),
            description=m.description,
            tooltip=tooltip,
            icon=IconSpec(m.icon, m.icon_color) if m.icon else None,
            collapsible=Collapsible.NONE,
            context_value="marker_indent" if prefix else "marker",
            command=CommandRef(OPEN_MARKER_COMMAND, "Click to go", (node,)),
        )

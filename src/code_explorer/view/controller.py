"""
Module: view.controller

Purpose:
    Host command handlers for the stack view, without any UI prompts. The
    host collects user input (titles, tags, confirmation) and passes it in;
    each handler resolves the node it was invoked on, calls the store or an
    engine, and reports an OperationResult.

    Expected failures (NotFoundError, InvalidOperationError, and
    PersistenceError after the store's rollback) are returned as
    OperationResult(success=False, ...) and logged; they are never retried.

Key Classes:
    - OperationResult: Outcome reported to the host
    - StackViewController: One method per stack view command

Key Functions:
    - parse_position(): Parse "line" or "line:col" reposition input

Dependencies:
    - editing.IndentEngine / editing.ReorderEngine
    - outline.codec: Copy commands
    - view.drag_drop.StackTreeDragAndDrop

Used By:
    - Host integrations (command registration lives in the host)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

from code_explorer.config import ExplorerConfig
from code_explorer.core.errors import CodeExplorerError, InvalidOperationError, NotFoundError
from code_explorer.core.models import Marker, Stack
from code_explorer.editing.indent import IndentEngine
from code_explorer.editing.reorder import ReorderEngine
from code_explorer.outline.codec import OutlineOrder, format_marker_line, format_outline
from code_explorer.store.facade import StoreFacade

from .drag_drop import DragPayload, StackTreeDragAndDrop
from .nodes import MarkerNode, StackNode, TreeNode

logger = logging.getLogger(__name__)

NONE_CHOICE = "<None>"

PREDEFINED_COLORS = (
    "terminal.ansiBlack",
    "terminal.ansiBlue",
    "terminal.ansiBrightBlack",
    "terminal.ansiBrightBlue",
    "terminal.ansiBrightCyan",
    "terminal.ansiBrightGreen",
    "terminal.ansiBrightMagenta",
    "terminal.ansiBrightRed",
    "terminal.ansiBrightWhite",
    "terminal.ansiBrightYellow",
    "terminal.ansiCyan",
    "terminal.ansiGreen",
    "terminal.ansiMagenta",
    "terminal.ansiRed",
    "terminal.ansiWhite",
    "terminal.ansiYellow",
)


@dataclass(frozen=True)
class OperationResult:
    """
    Result of a stack view command.

    Attributes:
        success: Whether the command changed (or produced) what it should
        message: Human-readable summary for logs or a status message
        details: Optional structured output (e.g. exported text)
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


def parse_position(text: str) -> Optional[Tuple[int, Optional[int]]]:
    """
    Parse reposition input "line" or "line:col" (1-based).

    Returns:
        (line, column) 0-based, column None when absent or invalid;
        None when the line is missing or below 1

    Example:
        >>> parse_position("12:5")
        (11, 4)
        >>> parse_position("12")
        (11, None)
    """
    parts = text.strip().split(":")
    try:
        line = int(parts[0])
    except ValueError:
        return None
    if line < 1:
        return None

    column: Optional[int] = None
    if len(parts) > 1:
        try:
            col = int(parts[1])
        except ValueError:
            col = 0
        if col >= 1:
            column = col - 1
    return line - 1, column


class StackViewController:
    """Command handlers of the stack view."""

    def __init__(self, store: StoreFacade, config: Optional[ExplorerConfig] = None) -> None:
        self._store = store
        self._config = config or ExplorerConfig()
        self.indent_engine = IndentEngine(store)
        self.reorder_engine = ReorderEngine(store)
        self.drag_and_drop = StackTreeDragAndDrop(self.reorder_engine)

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _run(self, name: str, action: Callable[[], OperationResult]) -> OperationResult:
        try:
            return action()
        except CodeExplorerError as e:
            logger.warning(f"{name} failed: {e}")
            return OperationResult(False, str(e), {"error": type(e).__name__})

    def _stack_for(self, node: Optional[TreeNode]) -> Optional[Stack]:
        """Stack a stack command applies to: the node's stack, or the active stack."""
        if node is None:
            return self._store.get_active_stack()
        if isinstance(node, StackNode):
            stack = self._store.get_stack(node.stack.id)
            if stack is None:
                raise NotFoundError("stack", node.stack.id)
            return stack
        return None

    def _require_stack(self, node: Optional[TreeNode]) -> Stack:
        stack = self._stack_for(node)
        if stack is None:
            raise InvalidOperationError("No stack selected")
        return stack

    def _require_marker(self, node: Optional[TreeNode]) -> Marker:
        if not isinstance(node, MarkerNode):
            raise InvalidOperationError("No marker selected")
        marker = self._store.get_marker(node.marker.id)
        if marker is None:
            raise NotFoundError("marker", node.marker.id)
        return marker

    def _export_root(self) -> Optional[Path]:
        scope = self._store.scopes.current
        return scope.folder if scope else None

    # ─────────────────────────────────────────────────────────────────────────
    # Workspace / Stack Commands
    # ─────────────────────────────────────────────────────────────────────────

    def choose_workspace_folder(self, folder: Union[str, Path]) -> OperationResult:
        def _do() -> OperationResult:
            scope = self._store.scopes.select(folder)
            return OperationResult(True, f"Loaded stacks of {scope.name}")
        return self._run("choose_workspace_folder", _do)

    def create_stack(self, title: Optional[str] = None) -> OperationResult:
        def _do() -> OperationResult:
            stack = self._store.create_stack(title)
            return OperationResult(True, f"Created stack {stack.display_title}", {"stack": stack})
        return self._run("create_stack", _do)

    def add_marker(self, file: str, line: int, column: int, code: str) -> OperationResult:
        """Add a marker to the active stack (auto-creating one if needed)."""
        def _do() -> OperationResult:
            marker = self._store.create_marker(file, line, column, code)
            return OperationResult(True, f"Added marker {marker.description}", {"marker": marker})
        return self._run("add_marker", _do)

    def activate_stack(
        self,
        node: Optional[TreeNode] = None,
        stack_id: Optional[str] = None,
        create_if_missing: bool = False,
    ) -> OperationResult:
        """
        Activate the node's stack, the picked `stack_id`, or a new stack.

        With no node the active stack is re-activated; when there is none,
        `stack_id` (the host's pick) is used, or a new stack is created when
        `create_if_missing` is set.
        """
        def _do() -> OperationResult:
            stack = self._stack_for(node)
            if stack is None and stack_id is not None:
                stack = self._store.get_stack(stack_id)
                if stack is None:
                    raise NotFoundError("stack", stack_id)
            if stack is None:
                if not create_if_missing:
                    raise InvalidOperationError("No stack selected")
                stack = self._store.create_stack(activate=True)
                return OperationResult(True, f"Activated new stack {stack.display_title}", {"stack": stack})
            stack = self._store.activate_stack(stack.id)
            return OperationResult(True, f"Activated stack {stack.display_title}", {"stack": stack})
        return self._run("activate_stack", _do)

    def rename_stack(self, node: Optional[TreeNode], title: Optional[str]) -> OperationResult:
        def _do() -> OperationResult:
            stack = self._require_stack(node)
            if not title:
                return OperationResult(False, "Rename cancelled")
            renamed = self._store.rename_stack(stack.id, title)
            return OperationResult(True, f"Renamed stack to {renamed.display_title}", {"stack": renamed})
        return self._run("rename_stack", _do)

    def reverse_markers(self, node: Optional[TreeNode] = None) -> OperationResult:
        def _do() -> OperationResult:
            stack = self.reorder_engine.reverse(self._require_stack(node).id)
            return OperationResult(True, f"Reversed {stack.display_title}", {"stack": stack})
        return self._run("reverse_markers", _do)

    def copy_markers(self, node: Optional[TreeNode] = None, reversed_order: bool = False) -> OperationResult:
        """Outline text of the stack in details['text'] (the host puts it on the clipboard)."""
        def _do() -> OperationResult:
            stack = self._require_stack(node)
            order = OutlineOrder.REVERSED if reversed_order else OutlineOrder.FORWARD
            text = format_outline(stack, order, self._export_root(), self._config.export_indent_width)
            return OperationResult(True, f"Copied {len(stack.markers)} markers", {"text": text})
        return self._run("copy_markers", _do)

    def delete_stack(
        self,
        node: Optional[TreeNode] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> OperationResult:
        """
        Delete a stack. Non-empty stacks are only deleted when `confirm`
        returns True for the prompt; empty stacks need no confirmation.
        """
        def _do() -> OperationResult:
            stack = self._require_stack(node)
            if stack.markers:
                prompt = f"Do you really want to delete stack: {stack.title or self._config.untitled_stack_title}?"
                if confirm is None or not confirm(prompt):
                    return OperationResult(False, "Deletion cancelled")
            self._store.delete_stack(stack.id)
            return OperationResult(True, f"Deleted stack {stack.display_title}")
        return self._run("delete_stack", _do)

    # ─────────────────────────────────────────────────────────────────────────
    # Marker Commands
    # ─────────────────────────────────────────────────────────────────────────

    def _indent_command(self, name: str, node: Optional[TreeNode], op: Callable[[str], Marker]) -> OperationResult:
        def _do() -> OperationResult:
            marker = op(self._require_marker(node).id)
            return OperationResult(True, f"Indent is now {marker.indent}", {"marker": marker})
        return self._run(name, _do)

    def indent_marker(self, node: Optional[TreeNode]) -> OperationResult:
        return self._indent_command("indent_marker", node, self.indent_engine.indent)

    def unindent_marker(self, node: Optional[TreeNode]) -> OperationResult:
        return self._indent_command("unindent_marker", node, self.indent_engine.unindent)

    def indent_to_same_level_with_above(self, node: Optional[TreeNode]) -> OperationResult:
        return self._indent_command("indent_to_same_level_with_above", node, self.indent_engine.align_with_above)

    def indent_to_next_level_with_above(self, node: Optional[TreeNode]) -> OperationResult:
        return self._indent_command("indent_to_next_level_with_above", node, self.indent_engine.nest_under_above)

    def unindent_to_top(self, node: Optional[TreeNode]) -> OperationResult:
        return self._indent_command("unindent_to_top", node, self.indent_engine.unindent_to_top)

    def copy_marker(self, node: Optional[TreeNode]) -> OperationResult:
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            text = format_marker_line(marker, self._export_root(), self._config.export_indent_width)
            return OperationResult(True, "Copied marker", {"text": text})
        return self._run("copy_marker", _do)

    def delete_marker(self, node: Optional[TreeNode]) -> OperationResult:
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            self._store.delete_marker(marker.id)
            return OperationResult(True, f"Deleted marker {marker.description}")
        return self._run("delete_marker", _do)

    def set_marker_title(self, node: Optional[TreeNode], title: Optional[str]) -> OperationResult:
        """Set the title; None means the prompt was dismissed, '' clears it."""
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            if title is None:
                return OperationResult(False, "Cancelled")
            updated = self._store.set_title(marker.id, title)
            return OperationResult(True, "Title updated", {"marker": updated})
        return self._run("set_marker_title", _do)

    def set_marker_icon(self, node: Optional[TreeNode], icon: Optional[str]) -> OperationResult:
        """Set the icon name; '<None>' clears it, None means dismissed."""
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            if icon is None:
                return OperationResult(False, "Cancelled")
            updated = self._store.set_icon(marker.id, "" if icon == NONE_CHOICE else icon)
            return OperationResult(True, "Icon updated", {"marker": updated})
        return self._run("set_marker_icon", _do)

    def set_marker_icon_color(self, node: Optional[TreeNode], color: Optional[str]) -> OperationResult:
        """Set the icon color from PREDEFINED_COLORS; '<None>' clears it."""
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            if color is None:
                return OperationResult(False, "Cancelled")
            if color != NONE_CHOICE and color not in PREDEFINED_COLORS:
                raise InvalidOperationError(f"Unknown icon color: {color}")
            updated = self._store.set_icon_color(marker.id, "" if color == NONE_CHOICE else color)
            return OperationResult(True, "Icon color updated", {"marker": updated})
        return self._run("set_marker_icon_color", _do)

    def add_tag(self, node: Optional[TreeNode], tag: Optional[str]) -> OperationResult:
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            if not tag:
                return OperationResult(False, "Cancelled")
            updated = self._store.add_tag(marker.id, tag)
            return OperationResult(True, f"Added tag {tag}", {"marker": updated})
        return self._run("add_tag", _do)

    def delete_tag(self, node: Optional[TreeNode], tag: Optional[str]) -> OperationResult:
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            if not marker.tags:
                return OperationResult(False, "No tags to delete")
            if not tag:
                return OperationResult(False, "Cancelled")
            updated = self._store.delete_tag(marker.id, tag)
            return OperationResult(True, f"Deleted tag {tag}", {"marker": updated})
        return self._run("delete_tag", _do)

    def reposition_marker(self, node: Optional[TreeNode], text: Optional[str]) -> OperationResult:
        """Move the marker to 'line' or 'line:col' (1-based input)."""
        def _do() -> OperationResult:
            marker = self._require_marker(node)
            position = parse_position(text) if text else None
            if position is None:
                return OperationResult(False, f"Invalid position: {text!r}")
            line, column = position
            updated = self._store.reposition(marker.id, line, column)
            return OperationResult(True, f"Moved marker to {updated.description}", {"marker": updated})
        return self._run("reposition_marker", _do)

    # ─────────────────────────────────────────────────────────────────────────
    # Drag and Drop
    # ─────────────────────────────────────────────────────────────────────────

    def drop(self, target: Optional[TreeNode], payload: Optional[DragPayload]) -> OperationResult:
        def _do() -> OperationResult:
            if not self.drag_and_drop.handle_drop(target, payload):
                return OperationResult(False, "Drop rejected")
            return OperationResult(True, "Moved")
        return self._run("drop", _do)

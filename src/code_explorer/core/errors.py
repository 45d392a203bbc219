"""
Module: errors

Purpose:
    Error taxonomy shared by the store, the engines and the view layer.

Key Classes:
    - CodeExplorerError: Base class, caught by the stack view controller
    - NotFoundError: An id does not resolve to a live stack or marker
    - InvalidOperationError: Structurally impossible request
    - PersistenceError: Durable write failed (in-memory state rolled back)

Used By:
    - store.marker_store.MarkerStore
    - editing.indent / editing.reorder
    - view.controller.StackViewController
    - cli
"""

from __future__ import annotations


class CodeExplorerError(Exception):
    """Base class for all errors raised by this package."""
    pass


class NotFoundError(CodeExplorerError):
    """Raised when a stack or marker id does not resolve."""

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"{kind.capitalize()} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id


class InvalidOperationError(CodeExplorerError):
    """Raised for requests that can never succeed, e.g. moving a stack onto itself."""
    pass


class PersistenceError(CodeExplorerError):
    """Raised when the backend fails to write; the store keeps its last committed state."""
    pass

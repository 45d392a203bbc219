"""
Store facade contract.

The engines and the tree projection depend on this protocol only.
MarkerStore is the implementation shipped with the package; anything with
the same methods (for example a store bound to a different database) can
be passed in its place.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Protocol, Tuple

from code_explorer.core.models import Marker, Stack

from .scope import ScopeContext, WorkspaceScope


class ChangeSubscription(Protocol):
    def dispose(self) -> None:
        ...


class StoreFacade(Protocol):
    """Create/read/update/delete stacks and markers of a workspace scope."""

    @property
    def scopes(self) -> ScopeContext:
        ...

    # Reads
    def list_stacks(self, scope: Optional[WorkspaceScope] = None) -> List[Stack]:
        ...

    def get_active_stack(self, scope: Optional[WorkspaceScope] = None) -> Optional[Stack]:
        ...

    def get_stack(self, stack_id: str, scope: Optional[WorkspaceScope] = None) -> Optional[Stack]:
        ...

    def get_marker(self, marker_id: str, scope: Optional[WorkspaceScope] = None) -> Optional[Marker]:
        ...

    def locate_marker(
        self, marker_id: str, scope: Optional[WorkspaceScope] = None
    ) -> Optional[Tuple[Stack, int]]:
        ...

    # Mutations
    def transaction(
        self,
        mutator: Callable[[List[Stack]], Optional[List[Stack]]],
        scope: Optional[WorkspaceScope] = None,
    ) -> List[Stack]:
        ...

    def create_stack(
        self, title: Optional[str] = None, scope: Optional[WorkspaceScope] = None, activate: bool = False
    ) -> Stack:
        ...

    def rename_stack(self, stack_id: str, title: str, scope: Optional[WorkspaceScope] = None) -> Stack:
        ...

    def delete_stack(self, stack_id: str, scope: Optional[WorkspaceScope] = None) -> bool:
        ...

    def activate_stack(self, stack_id: str, scope: Optional[WorkspaceScope] = None) -> Stack:
        ...

    def create_marker(
        self,
        file: str,
        line: int,
        column: int,
        code: str,
        stack_id: Optional[str] = None,
        scope: Optional[WorkspaceScope] = None,
    ) -> Marker:
        ...

    def delete_marker(self, marker_id: str, scope: Optional[WorkspaceScope] = None) -> bool:
        ...

    def set_title(self, marker_id: str, title: Optional[str], scope: Optional[WorkspaceScope] = None) -> Marker:
        ...

    def set_icon(self, marker_id: str, icon: Optional[str], scope: Optional[WorkspaceScope] = None) -> Marker:
        ...

    def set_icon_color(self, marker_id: str, color: Optional[str], scope: Optional[WorkspaceScope] = None) -> Marker:
        ...

    def add_tag(self, marker_id: str, tag: str, scope: Optional[WorkspaceScope] = None) -> Marker:
        ...

    def delete_tag(self, marker_id: str, tag: str, scope: Optional[WorkspaceScope] = None) -> Marker:
        ...

    def reposition(
        self, marker_id: str, line: int, column: Optional[int] = None, scope: Optional[WorkspaceScope] = None
    ) -> Marker:
        ...

    # Notification
    def on_change(
        self, callback: Callable[[str], None], scope: Optional[WorkspaceScope] = None
    ) -> ChangeSubscription:
        ...

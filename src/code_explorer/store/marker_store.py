"""
Module: store.marker_store

Purpose:
    In-memory working copy of all stacks per workspace scope, backed by a
    durable StackBackend. Every mutation is a transaction: it runs under the
    scope's lock against a copy of the stack list, is persisted, and only
    then replaces the committed list. A failed write leaves the committed
    list untouched and raises PersistenceError.

    After each committed mutation `dataChanged(scope_key)` is emitted exactly
    once, outside the lock. Mutations that change nothing emit nothing.

Key Classes:
    - MarkerStore: StoreFacade implementation
    - Subscription: Handle returned by MarkerStore.on_change()

Key Functions:
    - stack_position(): Index of a stack id in a stack list
    - marker_position(): (stack index, marker index) of a marker id

Dependencies:
    - PySide6.QtCore: QObject/Signal change notification
    - threading (std): Per-scope mutation lock

Used By:
    - editing.indent / editing.reorder
    - view.projection / view.controller
    - cli
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from code_explorer.core.errors import InvalidOperationError, NotFoundError, PersistenceError
from code_explorer.core.models import Marker, Stack

from .backends import StackBackend
from .scope import ScopeContext, WorkspaceScope

logger = logging.getLogger(__name__)

Mutator = Callable[[List[Stack]], Optional[List[Stack]]]


# ─────────────────────────────────────────────────────────────────────────────
# Lookups over a stack list
# ─────────────────────────────────────────────────────────────────────────────

def stack_position(stacks: List[Stack], stack_id: str) -> int:
    """
    Index of the stack in the list.

    Raises:
        NotFoundError: If no stack has this id
    """
    for i, stack in enumerate(stacks):
        if stack.id == stack_id:
            return i
    raise NotFoundError("stack", stack_id)


def marker_position(stacks: List[Stack], marker_id: str) -> Tuple[int, int]:
    """
    (stack index, marker index) of the marker.

    Raises:
        NotFoundError: If no stack holds a marker with this id
    """
    for si, stack in enumerate(stacks):
        mi = stack.index_of(marker_id)
        if mi is not None:
            return si, mi
    raise NotFoundError("marker", marker_id)


class Subscription:
    """Connected change callback; dispose() disconnects it."""

    def __init__(self, signal, slot: Callable[[str], None]) -> None:
        self._signal = signal
        self._slot = slot
        self._active = True
        signal.connect(slot)

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        if self._active:
            self._signal.disconnect(self._slot)
            self._active = False


class MarkerStore(QObject):
    """Stack/marker store for the workspace scopes of one process."""

    dataChanged = Signal(str)  # scope key

    def __init__(self, backend: StackBackend, scopes: ScopeContext) -> None:
        super().__init__()
        self._backend = backend
        self._scopes = scopes
        self._committed: Dict[str, List[Stack]] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @property
    def scopes(self) -> ScopeContext:
        return self._scopes

    # ─────────────────────────────────────────────────────────────────────────
    # Transactions
    # ─────────────────────────────────────────────────────────────────────────

    def _resolve_scope(self, scope: Optional[WorkspaceScope]) -> WorkspaceScope:
        resolved = scope or self._scopes.current
        if resolved is None:
            raise InvalidOperationError("No workspace folder selected")
        return resolved

    def _lock(self, key: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    def _loaded(self, scope: WorkspaceScope) -> List[Stack]:
        """Committed list for the scope, loading it on first use. Caller holds the lock."""
        stacks = self._committed.get(scope.key)
        if stacks is None:
            stacks = self._committed[scope.key] = list(self._backend.load(scope))
            logger.debug(f"Loaded {len(stacks)} stacks for {scope.folder}")
        return stacks

    def transaction(self, mutator: Mutator, scope: Optional[WorkspaceScope] = None) -> List[Stack]:
        """
        Apply a mutation to the scope's stacks atomically.

        The mutator receives a copy of the committed list and returns the new
        list, or None when nothing changed. Exceptions raised by the mutator
        propagate and leave the store untouched.

        Args:
            mutator: Function building the new stack list
            scope: Target scope (default: current scope)

        Returns:
            The committed stack list after the transaction

        Raises:
            PersistenceError: If the backend fails to write
            InvalidOperationError: If no scope is selected
        """
        scope = self._resolve_scope(scope)
        with self._lock(scope.key):
            updated = mutator(list(self._loaded(scope)))
            if updated is None:
                return list(self._committed[scope.key])
            try:
                self._backend.save(scope, updated)
            except PersistenceError as e:
                logger.warning(f"Rolled back mutation for {scope.folder}: {e}")
                raise
            except OSError as e:
                logger.warning(f"Rolled back mutation for {scope.folder}: {e}")
                raise PersistenceError(str(e)) from e
            self._committed[scope.key] = list(updated)
            committed = list(updated)
        self.dataChanged.emit(scope.key)
        return committed

    def on_change(
        self,
        callback: Callable[[str], None],
        scope: Optional[WorkspaceScope] = None,
    ) -> Subscription:
        """
        Subscribe to committed mutations.

        Args:
            callback: Called with the scope key after each commit
            scope: Only report changes to this scope (default: all scopes)
        """
        if scope is None:
            return Subscription(self.dataChanged, callback)
        key = scope.key

        def _filtered(changed_key: str) -> None:
            if changed_key == key:
                callback(changed_key)

        return Subscription(self.dataChanged, _filtered)

    # ─────────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────────

    def list_stacks(self, scope: Optional[WorkspaceScope] = None) -> List[Stack]:
        """Stacks of the scope in display order."""
        scope = self._resolve_scope(scope)
        with self._lock(scope.key):
            return list(self._loaded(scope))

    def get_active_stack(self, scope: Optional[WorkspaceScope] = None) -> Optional[Stack]:
        return next((s for s in self.list_stacks(scope) if s.is_active), None)

    def get_stack(self, stack_id: str, scope: Optional[WorkspaceScope] = None) -> Optional[Stack]:
        return next((s for s in self.list_stacks(scope) if s.id == stack_id), None)

    def get_marker(self, marker_id: str, scope: Optional[WorkspaceScope] = None) -> Optional[Marker]:
        for stack in self.list_stacks(scope):
            marker = stack.find_marker(marker_id)
            if marker is not None:
                return marker
        return None

    def locate_marker(
        self,
        marker_id: str,
        scope: Optional[WorkspaceScope] = None,
    ) -> Optional[Tuple[Stack, int]]:
        """Owning stack and position of a marker, or None."""
        for stack in self.list_stacks(scope):
            index = stack.index_of(marker_id)
            if index is not None:
                return stack, index
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Stack Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def create_stack(
        self,
        title: Optional[str] = None,
        scope: Optional[WorkspaceScope] = None,
        activate: bool = False,
    ) -> Stack:
        """Append a new empty stack, optionally making it the active one."""
        created = Stack.create(title)

        def _create(stacks: List[Stack]) -> List[Stack]:
            if activate:
                stacks = [replace(s, is_active=False) if s.is_active else s for s in stacks]
            stacks.append(replace(created, is_active=activate))
            return stacks

        committed = self.transaction(_create, scope)
        logger.info(f"Created stack {created.display_title!r}")
        return committed[stack_position(committed, created.id)]

    def rename_stack(self, stack_id: str, title: str, scope: Optional[WorkspaceScope] = None) -> Stack:
        def _rename(stacks: List[Stack]) -> Optional[List[Stack]]:
            i = stack_position(stacks, stack_id)
            if stacks[i].title == (title or None):
                return None
            stacks[i] = replace(stacks[i], title=title or None)
            return stacks

        committed = self.transaction(_rename, scope)
        logger.info(f"Renamed stack {stack_id} to {title!r}")
        return committed[stack_position(committed, stack_id)]

    def delete_stack(self, stack_id: str, scope: Optional[WorkspaceScope] = None) -> bool:
        """
        Delete a stack and its markers.

        Idempotent: deleting an id that no longer exists is a no-op.

        Returns:
            True if a stack was removed
        """
        removed: List[Stack] = []

        def _delete(stacks: List[Stack]) -> Optional[List[Stack]]:
            kept = [s for s in stacks if s.id != stack_id]
            if len(kept) == len(stacks):
                return None
            removed.extend(s for s in stacks if s.id == stack_id)
            return kept

        self.transaction(_delete, scope)
        if removed:
            logger.info(f"Deleted stack {removed[0].display_title!r} ({len(removed[0].markers)} markers)")
        else:
            logger.debug(f"Stack {stack_id} already deleted")
        return bool(removed)

    def activate_stack(self, stack_id: str, scope: Optional[WorkspaceScope] = None) -> Stack:
        """Make the stack active and deactivate any other stack of the scope."""
        def _activate(stacks: List[Stack]) -> Optional[List[Stack]]:
            target = stack_position(stacks, stack_id)
            updated = [
                replace(s, is_active=(i == target)) if s.is_active != (i == target) else s
                for i, s in enumerate(stacks)
            ]
            if all(a is b for a, b in zip(updated, stacks)):
                return None
            return updated

        committed = self.transaction(_activate, scope)
        stack = committed[stack_position(committed, stack_id)]
        logger.info(f"Activated stack {stack.display_title!r}")
        return stack

    # ─────────────────────────────────────────────────────────────────────────
    # Marker Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def create_marker(
        self,
        file: str,
        line: int,
        column: int,
        code: str,
        stack_id: Optional[str] = None,
        scope: Optional[WorkspaceScope] = None,
    ) -> Marker:
        """
        Append a new top-level marker.

        Goes to `stack_id` when given, else to the active stack. With no
        active stack a new stack is created and activated.
        """
        marker = Marker.create(file, line, column, code)

        def _create(stacks: List[Stack]) -> List[Stack]:
            if stack_id is not None:
                target = stack_position(stacks, stack_id)
            else:
                target = next((i for i, s in enumerate(stacks) if s.is_active), None)
                if target is None:
                    stacks.append(replace(Stack.create(), is_active=True))
                    target = len(stacks) - 1
                    logger.info("No active stack, created one for the new marker")
            stacks[target] = stacks[target].with_markers(stacks[target].markers + (marker,))
            return stacks

        self.transaction(_create, scope)
        logger.info(f"Added marker {marker.description}")
        return marker

    def delete_marker(self, marker_id: str, scope: Optional[WorkspaceScope] = None) -> bool:
        """
        Remove a marker. Markers below it keep their indent.

        Idempotent: returns False when the marker no longer exists.
        """
        removed: List[Marker] = []

        def _delete(stacks: List[Stack]) -> Optional[List[Stack]]:
            try:
                si, mi = marker_position(stacks, marker_id)
            except NotFoundError:
                return None
            markers = list(stacks[si].markers)
            removed.append(markers.pop(mi))
            stacks[si] = stacks[si].with_markers(markers)
            return stacks

        self.transaction(_delete, scope)
        if removed:
            logger.info(f"Deleted marker {removed[0].description}")
        return bool(removed)

    def update_marker(
        self,
        marker_id: str,
        scope: Optional[WorkspaceScope] = None,
        **changes,
    ) -> Marker:
        """
        Replace fields of one marker (dataclasses.replace semantics).

        Raises:
            NotFoundError: If the marker does not exist
        """
        def _update(stacks: List[Stack]) -> Optional[List[Stack]]:
            si, mi = marker_position(stacks, marker_id)
            current = stacks[si].markers[mi]
            updated = replace(current, **changes)
            if updated == current:
                return None
            stacks[si] = stacks[si].with_marker(updated)
            return stacks

        committed = self.transaction(_update, scope)
        si, mi = marker_position(committed, marker_id)
        logger.debug(f"Updated marker {marker_id}: {sorted(changes)}")
        return committed[si].markers[mi]

    def set_title(self, marker_id: str, title: Optional[str], scope: Optional[WorkspaceScope] = None) -> Marker:
        return self.update_marker(marker_id, scope, title=title or None)

    def set_icon(self, marker_id: str, icon: Optional[str], scope: Optional[WorkspaceScope] = None) -> Marker:
        return self.update_marker(marker_id, scope, icon=icon or None)

    def set_icon_color(self, marker_id: str, color: Optional[str], scope: Optional[WorkspaceScope] = None) -> Marker:
        return self.update_marker(marker_id, scope, icon_color=color or None)

    def add_tag(self, marker_id: str, tag: str, scope: Optional[WorkspaceScope] = None) -> Marker:
        """Append a tag (duplicates are kept)."""
        tag = tag.strip()
        if not tag:
            raise InvalidOperationError("Tag cannot be empty")

        def _add(stacks: List[Stack]) -> List[Stack]:
            si, mi = marker_position(stacks, marker_id)
            current = stacks[si].markers[mi]
            stacks[si] = stacks[si].with_marker(replace(current, tags=current.tags + (tag,)))
            return stacks

        committed = self.transaction(_add, scope)
        si, mi = marker_position(committed, marker_id)
        return committed[si].markers[mi]

    def delete_tag(self, marker_id: str, tag: str, scope: Optional[WorkspaceScope] = None) -> Marker:
        """Remove the first occurrence of a tag; no-op if the marker lacks it."""
        def _delete(stacks: List[Stack]) -> Optional[List[Stack]]:
            si, mi = marker_position(stacks, marker_id)
            current = stacks[si].markers[mi]
            if tag not in current.tags:
                return None
            tags = list(current.tags)
            tags.remove(tag)
            stacks[si] = stacks[si].with_marker(replace(current, tags=tuple(tags)))
            return stacks

        committed = self.transaction(_delete, scope)
        si, mi = marker_position(committed, marker_id)
        return committed[si].markers[mi]

    def reposition(
        self,
        marker_id: str,
        line: int,
        column: Optional[int] = None,
        scope: Optional[WorkspaceScope] = None,
    ) -> Marker:
        """Move the marker's anchor; column is kept when not given."""
        if column is None:
            return self.update_marker(marker_id, scope, line=line)
        return self.update_marker(marker_id, scope, line=line, column=column)

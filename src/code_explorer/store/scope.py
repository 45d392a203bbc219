"""
Workspace scope selection.

A scope is one workspace folder; each scope owns its own list of stacks.
ScopeContext holds the open folders and the selected one and is passed
explicitly to the store and the tree projection.
"""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from PySide6.QtCore import QObject, Signal

from code_explorer.core.errors import InvalidOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkspaceScope:
    """A workspace folder whose stacks are loaded together."""

    folder: Path

    @property
    def name(self) -> str:
        return self.folder.name or self.folder.as_posix()

    @property
    def key(self) -> str:
        """Stable identifier used for storage file names and change signals."""
        return hashlib.sha1(self.folder.as_posix().encode("utf-8")).hexdigest()[:16]

    @classmethod
    def of(cls, folder: Union[str, Path, WorkspaceScope]) -> WorkspaceScope:
        if isinstance(folder, WorkspaceScope):
            return folder
        return cls(Path(folder))


class ScopeContext(QObject):
    """
    Open workspace folders and the currently selected one.

    With a single folder that folder is current without an explicit
    selection; with several, a folder must be selected first.
    """

    scopeChanged = Signal(object)  # Optional[WorkspaceScope]

    def __init__(self, folders: Iterable[Union[str, Path]] = ()) -> None:
        super().__init__()
        self._folders: Tuple[WorkspaceScope, ...] = tuple(WorkspaceScope.of(f) for f in folders)
        self._selected: Optional[WorkspaceScope] = None

    @property
    def folders(self) -> Tuple[WorkspaceScope, ...]:
        return self._folders

    @property
    def selected(self) -> Optional[WorkspaceScope]:
        return self._selected

    @property
    def current(self) -> Optional[WorkspaceScope]:
        """Selected folder, or the only open folder."""
        if self._selected is not None:
            return self._selected
        if len(self._folders) == 1:
            return self._folders[0]
        return None

    @property
    def needs_choice(self) -> bool:
        """True when several folders are open and none is selected."""
        return len(self._folders) > 1 and self._selected is None

    def set_folders(self, folders: Iterable[Union[str, Path]]) -> None:
        """Replace the open folders; drops the selection if its folder closed."""
        before = self.current
        self._folders = tuple(WorkspaceScope.of(f) for f in folders)
        if self._selected is not None and self._selected not in self._folders:
            logger.debug(f"Selected folder {self._selected.folder} was closed")
            self._selected = None
        if self.current != before:
            self.scopeChanged.emit(self.current)

    def select(self, folder: Union[str, Path, WorkspaceScope]) -> WorkspaceScope:
        """
        Select one of the open folders.

        Raises:
            InvalidOperationError: If the folder is not open
        """
        scope = WorkspaceScope.of(folder)
        if scope not in self._folders:
            raise InvalidOperationError(f"Workspace folder is not open: {scope.folder}")
        if scope != self._selected:
            self._selected = scope
            logger.info(f"Selected workspace folder {scope.folder}")
            self.scopeChanged.emit(scope)
        return scope

    def clear(self) -> None:
        """Forget the selection (folder closed or workspace switched)."""
        if self._selected is None:
            return
        self._selected = None
        self.scopeChanged.emit(self.current)

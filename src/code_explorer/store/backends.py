"""
Module: store.backends

Purpose:
    Durable storage for the stacks of one workspace scope. The store keeps
    the working copy in memory and hands the full list to a backend on every
    committed mutation.

Key Classes:
    - StackBackend: Abstract base class for all backends
    - MemoryBackend: Dict-backed, for tests and throwaway sessions
    - JsonFileBackend: One JSON document per scope, written atomically

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - store.marker_store.MarkerStore
    - cli
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator, List, Sequence

import portalocker

from code_explorer.core.errors import PersistenceError
from code_explorer.core.models import Stack
from code_explorer.utils.dates import utc_now

from .scope import WorkspaceScope

logger = logging.getLogger(__name__)


class StackBackend(ABC):
    """Loads and saves the ordered stack list of a scope."""

    @abstractmethod
    def load(self, scope: WorkspaceScope) -> List[Stack]:
        """Stacks of the scope in display order (empty when nothing is stored)."""

    @abstractmethod
    def save(self, scope: WorkspaceScope, stacks: Sequence[Stack]) -> None:
        """Persist the full list. Raises PersistenceError on failure."""


class MemoryBackend(StackBackend):
    """
    Backend holding serialized dicts in memory.

    Stacks are round-tripped through to_dict()/from_dict() so callers never
    share objects with the "durable" copy.
    """

    def __init__(self) -> None:
        self._data: Dict[str, List[dict]] = {}

    def load(self, scope: WorkspaceScope) -> List[Stack]:
        return [Stack.from_dict(d) for d in self._data.get(scope.key, [])]

    def save(self, scope: WorkspaceScope, stacks: Sequence[Stack]) -> None:
        self._data[scope.key] = [s.to_dict() for s in stacks]


@contextmanager
def locked_file(path: Path, lock_type: int = portalocker.LOCK_EX) -> Generator:
    """
    Hold a lock on a sidecar lock file for the duration of the block.

    Args:
        path: Lock file path (created if missing)
        lock_type: LOCK_EX for writers, LOCK_SH for readers
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


class JsonFileBackend(StackBackend):
    """
    Stores each scope in `<root_dir>/stacks-<scope key>.json`.

    Document layout:
        {"version": 1, "scope": "/path/to/folder", "stacks": [...]}

    Writes go to a temp file under an exclusive lock and are then atomically
    renamed over the target, so an interrupted write never corrupts the
    previous document. A corrupted document is renamed to
    `stacks-<scope key>.corrupt-<timestamp>.json` and loads as an empty list.
    """

    FORMAT_VERSION = 1

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir)

    def path_for(self, scope: WorkspaceScope) -> Path:
        return self.root_dir / f"stacks-{scope.key}.json"

    def _lock_path(self, path: Path) -> Path:
        return path.with_suffix(".lock")

    def load(self, scope: WorkspaceScope) -> List[Stack]:
        path = self.path_for(scope)
        if not path.exists():
            return []

        try:
            with locked_file(self._lock_path(path), portalocker.LOCK_SH):
                content = path.read_text(encoding="utf-8")
        except (OSError, portalocker.exceptions.BaseLockException) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

        try:
            data = json.loads(content)
            version = data.get("version", 0)
            if version > self.FORMAT_VERSION:
                logger.warning(
                    f"{path.name} was written by a newer version (format {version}), loading anyway"
                )
            return [Stack.from_dict(s) for s in data.get("stacks", [])]
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            backup = self._set_aside(path)
            logger.warning(f"Stack file {path} is corrupted, moved to {backup.name}, starting empty: {e}")
            return []

    def _set_aside(self, path: Path) -> Path:
        """
        Rename an unreadable stack file so the next save cannot overwrite it.

        Raises:
            PersistenceError: If the file cannot be moved
        """
        stamp = utc_now().strftime("%Y%m%dT%H%M%S%f")
        backup = path.with_name(f"{path.stem}.corrupt-{stamp}.json")
        try:
            with locked_file(self._lock_path(path), portalocker.LOCK_EX):
                path.replace(backup)
        except (OSError, portalocker.exceptions.BaseLockException) as e:
            raise PersistenceError(f"Failed to set aside corrupted {path}: {e}") from e
        return backup

    def save(self, scope: WorkspaceScope, stacks: Sequence[Stack]) -> None:
        path = self.path_for(scope)
        temp_path = path.with_suffix(".tmp")
        document = {
            "version": self.FORMAT_VERSION,
            "scope": scope.folder.as_posix(),
            "stacks": [s.to_dict() for s in stacks],
        }
        try:
            with locked_file(self._lock_path(path), portalocker.LOCK_EX):
                temp_path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
                # Atomic rename (overwrites existing)
                temp_path.replace(path)
        except (OSError, TypeError, ValueError, portalocker.exceptions.BaseLockException) as e:
            try:
                if temp_path.exists():
                    temp_path.unlink()
            except OSError:
                pass
            raise PersistenceError(f"Failed to save stacks to {path}: {e}") from e

        logger.debug(f"Saved {len(stacks)} stacks to {path.name}")

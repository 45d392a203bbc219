"""
Path utilities for locating stored stacks and rendering marker locations.

Data directory resolution order:
    1. CODE_EXPLORER_DATA_DIR environment variable
    2. Qt's generic data location + "code-explorer"
"""
from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Optional, Union

from PySide6.QtCore import QStandardPaths

DATA_DIR_ENV = "CODE_EXPLORER_DATA_DIR"
APP_DIR_NAME = "code-explorer"


def get_app_data_dir() -> Path:
    """
    Get the directory holding persisted stacks and settings.

    Linux: ~/.local/share/code-explorer
    macOS: ~/Library/Application Support/code-explorer
    Windows: %LOCALAPPDATA%/code-explorer
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    base = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.GenericDataLocation
    )
    if not base:
        # No writable location reported (headless CI, sandboxed user)
        return Path.home() / f".{APP_DIR_NAME}"
    return Path(base) / APP_DIR_NAME


def get_config_path() -> Path:
    """Get the path of the optional JSON configuration file."""
    return get_app_data_dir() / "config.json"


def relative_file_path(
    file: Union[str, PurePath],
    root: Optional[Union[str, PurePath]] = None,
) -> str:
    """
    Render a marker file path relative to the workspace folder.

    Paths outside the root (or with no root) are returned unchanged.
    The result always uses forward slashes.

    Example:
        >>> relative_file_path("/ws/src/app.py", "/ws")
        'src/app.py'
    """
    path = PurePath(file)
    if root is not None:
        try:
            path = path.relative_to(PurePath(root))
        except ValueError:
            pass
    return path.as_posix()

"""
Module: config

Purpose:
    Configuration dataclass for the stack view. Immutable, validated on
    construction, optionally read from a JSON file.

Key Classes:
    - ExplorerConfig: Data location and rendering widths

Key Functions:
    - load_config(path): Read config JSON, falling back to defaults

Dependencies:
    - dataclasses (std)
    - json (std)
    - utils.paths: Default data directory

Used By:
    - view.projection: Label indent width, untitled placeholder
    - view.controller: Export indent width
    - cli
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from code_explorer.core.models import UNTITLED_STACK
from code_explorer.utils.paths import get_app_data_dir, get_config_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExplorerConfig:
    """
    Configuration for the stack view (immutable).

    Attributes:
        data_dir: Directory holding the per-scope stack files
        label_indent_width: Spaces per indent level in tree labels
        export_indent_width: Spaces per indent level in outline text
        untitled_stack_title: Label for stacks without a title

    Example:
        >>> config = ExplorerConfig(data_dir=Path("/tmp/stacks"))
        >>> config.label_indent_width
        4
    """

    data_dir: Path = field(default_factory=get_app_data_dir)
    label_indent_width: int = 4
    export_indent_width: int = 2
    untitled_stack_title: str = UNTITLED_STACK

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.label_indent_width < 1:
            raise ValueError(f"label_indent_width must be positive: {self.label_indent_width}")
        if self.export_indent_width < 1:
            raise ValueError(f"export_indent_width must be positive: {self.export_indent_width}")
        if not self.untitled_stack_title:
            raise ValueError("untitled_stack_title cannot be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExplorerConfig:
        """Build from a JSON object; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if "data_dir" in values:
            values["data_dir"] = Path(values["data_dir"]).expanduser()
        return cls(**values)


def load_config(path: Optional[Path] = None) -> ExplorerConfig:
    """
    Load configuration from JSON.

    A missing file gives the defaults. A malformed file, or one with invalid
    values, is logged and also gives the defaults.

    Args:
        path: Config file (default: utils.paths.get_config_path())
    """
    if path is None:
        path = get_config_path()

    if not path.exists():
        return ExplorerConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top-level value must be an object")
        return ExplorerConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Ignoring invalid config file {path}: {e}")
        return ExplorerConfig()

"""
Module: markers

Purpose:
    Provides the Marker dataclass - an immutable bookmark anchored to a
    source location. A marker's only structural attribute is its integer
    indent; hierarchy is implicit in (order, indent) pairs of the owning
    stack, never in parent pointers.

Key Functions:
    - Marker.create(...): New marker at indent 0 with a fresh id
    - Marker.display_title: Tags + title-or-code label text
    - Marker.description: "<file name>:<line>" description text
    - Marker.to_dict() / Marker.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - uuid (std)
    - code_explorer.utils.dates

Used By:
    - core.models.stacks.Stack
    - outline.codec
    - editing.indent / editing.reorder
    - view.projection
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from typing import Optional, Tuple

from code_explorer.utils.dates import parse_timestamp, utc_now


def new_id() -> str:
    """Opaque unique id for stacks and markers."""
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Marker:
    """
    Bookmark on a source location (immutable).

    Attributes:
        id: Opaque unique id, stable across moves and renames
        file: Absolute path of the annotated file
        line: 0-based line
        column: 0-based column
        code: Code snippet captured when the marker was added
        title: Optional user title, shown instead of the code
        icon: Optional theme icon name
        icon_color: Optional theme color token for the icon
        tags: Ordered free-text tags (duplicates allowed)
        indent: Nesting depth within the owning stack (0 = top level)
        created_at: Creation time (UTC)

    Invariants:
        - indent >= 0
        - line >= 0 and column >= 0

    Example:
        >>> m = Marker.create("/ws/app.py", 9, 4, "def main():")
        >>> m.indent
        0
        >>> m.description
        'app.py:10'
    """

    id: str
    file: str
    line: int
    column: int
    code: str
    title: Optional[str] = None
    icon: Optional[str] = None
    icon_color: Optional[str] = None
    tags: Tuple[str, ...] = ()
    indent: int = 0
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Validate marker on construction."""
        if self.indent < 0:
            raise ValueError(f"Marker indent cannot be negative: {self.indent}")
        if self.line < 0 or self.column < 0:
            raise ValueError(
                f"Marker position cannot be negative: line={self.line}, column={self.column}"
            )

    @classmethod
    def create(cls, file: str, line: int, column: int, code: str) -> Marker:
        """New top-level marker with a fresh id."""
        return cls(id=new_id(), file=file, line=line, column=column, code=code)

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def location(self) -> Tuple[str, int, int]:
        """(file, line, column), 0-based."""
        return (self.file, self.line, self.column)

    @property
    def tag_text(self) -> str:
        """Tags rendered as '[a][b]', empty string when there are none."""
        return "".join(f"[{tag}]" for tag in self.tags)

    @property
    def display_title(self) -> str:
        """
        Label text: bracketed tags, a space, then the title or the code.

        The tag group is written without separators so that the tree
        projection can compute highlight spans from tag lengths alone.
        """
        text = self.title or self.code
        if self.tags:
            return f"{self.tag_text} {text}"
        return text

    @property
    def description(self) -> str:
        """Short location text, e.g. 'app.py:10' (1-based line)."""
        return f"{PurePath(self.file).name}:{self.line + 1}"

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to dictionary for JSON storage.

        Optional display fields are omitted when unset.
        """
        d = {
            "id": self.id,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "code": self.code,
            "tags": list(self.tags),
            "indent": self.indent,
            "created_at": self.created_at.isoformat(),
        }
        if self.title:
            d["title"] = self.title
        if self.icon:
            d["icon"] = self.icon
        if self.icon_color:
            d["icon_color"] = self.icon_color
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Marker:
        """
        Deserialize from dictionary.

        Missing indent is read as 0 (older stores had no indent field).
        """
        return cls(
            id=data["id"],
            file=data["file"],
            line=data["line"],
            column=data.get("column", 0),
            code=data.get("code", ""),
            title=data.get("title") or None,
            icon=data.get("icon") or None,
            icon_color=data.get("icon_color") or None,
            tags=tuple(data.get("tags", [])),
            indent=data.get("indent", 0),
            created_at=(
                parse_timestamp(data["created_at"])
                if data.get("created_at") else utc_now()
            ),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Marker({self.id[:8]!r}, {self.description!r}, indent={self.indent})"

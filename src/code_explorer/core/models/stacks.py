"""
Module: stacks

Purpose:
    Provides the Stack dataclass - a named, ordered collection of markers.
    Marker order is document order and hierarchy-computation order, so every
    read path keeps it untouched.

Key Functions:
    - Stack.create(title): New inactive, empty stack
    - Stack.index_of(marker_id): Position of a marker in the sequence
    - Stack.find_marker(marker_id): Marker lookup
    - Stack.with_markers(markers): Copy with a new marker sequence
    - Stack.to_dict() / Stack.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - .markers.Marker

Used By:
    - store.marker_store.MarkerStore
    - outline.codec.serialize
    - editing.reorder
    - view.projection
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, Optional, Tuple

from code_explorer.utils.dates import parse_timestamp, utc_now

from .markers import Marker, new_id

UNTITLED_STACK = "<Untitled Stack>"


@dataclass(frozen=True, slots=True)
class Stack:
    """
    Ordered collection of markers (immutable).

    Attributes:
        id: Opaque unique id
        title: Optional title (display falls back to UNTITLED_STACK)
        created_at: Creation time (UTC)
        is_active: Whether new markers are added to this stack
        markers: Marker sequence in document order

    Invariants:
        - Marker ids are unique within the stack
        - At most one stack per scope is active (enforced by the store)
    """

    id: str
    title: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    is_active: bool = False
    markers: Tuple[Marker, ...] = ()

    def __post_init__(self) -> None:
        """Validate marker ids are unique."""
        ids = [m.id for m in self.markers]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Stack {self.id} contains duplicate marker ids")

    @classmethod
    def create(cls, title: Optional[str] = None) -> Stack:
        """New empty, inactive stack with a fresh id."""
        return cls(id=new_id(), title=title or None)

    @property
    def display_title(self) -> str:
        """Title or the untitled placeholder."""
        return self.title or UNTITLED_STACK

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def index_of(self, marker_id: str) -> Optional[int]:
        """Position of the marker in the sequence, or None."""
        for i, marker in enumerate(self.markers):
            if marker.id == marker_id:
                return i
        return None

    def find_marker(self, marker_id: str) -> Optional[Marker]:
        """Marker with this id, or None."""
        index = self.index_of(marker_id)
        return None if index is None else self.markers[index]

    # ─────────────────────────────────────────────────────────────────────────
    # Copy Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def with_markers(self, markers: Iterable[Marker]) -> Stack:
        """Copy of this stack holding a new marker sequence."""
        return replace(self, markers=tuple(markers))

    def with_marker(self, marker: Marker) -> Stack:
        """Copy with the marker of the same id replaced in place."""
        return self.with_markers(
            marker if m.id == marker.id else m for m in self.markers
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON storage."""
        d = {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "is_active": self.is_active,
            "markers": [m.to_dict() for m in self.markers],
        }
        if self.title:
            d["title"] = self.title
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Stack:
        """Deserialize from dictionary."""
        return cls(
            id=data["id"],
            title=data.get("title") or None,
            created_at=(
                parse_timestamp(data["created_at"])
                if data.get("created_at") else utc_now()
            ),
            is_active=bool(data.get("is_active", False)),
            markers=tuple(Marker.from_dict(m) for m in data.get("markers", [])),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Stack({self.id[:8]!r}, {self.display_title!r}, "
            f"markers={len(self.markers)}, active={self.is_active})"
        )

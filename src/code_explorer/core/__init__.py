"""
Code Explorer Core Package

Shared data models and the error taxonomy. These are the single source of
truth for every other subpackage.

Hierarchy is never stored as parent/child links. A stack is a flat, ordered
sequence of markers and each marker carries an integer indent; the outline
is re-derived from (order, indent) pairs whenever it is needed.
"""

from .errors import (
    CodeExplorerError,
    InvalidOperationError,
    NotFoundError,
    PersistenceError,
)
from .models import Marker, Stack, UNTITLED_STACK

__all__ = [
    "Marker",
    "Stack",
    "UNTITLED_STACK",
    "CodeExplorerError",
    "InvalidOperationError",
    "NotFoundError",
    "PersistenceError",
]

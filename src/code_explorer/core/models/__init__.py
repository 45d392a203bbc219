"""
Core Models Package

Immutable data models for markers and stacks.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. Mutations build new
instances with `dataclasses.replace`, and the store swaps the whole list of
stacks for a scope on commit. This ensures:
1. A failed write never leaves a half-applied reorder behind
2. Rollback is keeping the previous list
3. Nodes handed to the tree view cannot be mutated behind the store's back
"""

from .markers import Marker, new_id
from .stacks import Stack, UNTITLED_STACK

__all__ = [
    "Marker",
    "Stack",
    "UNTITLED_STACK",
    "new_id",
]

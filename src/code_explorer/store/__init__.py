"""
Store Package

Workspace scope selection, the store facade and its persistence backends.
"""

from .backends import JsonFileBackend, MemoryBackend, StackBackend
from .facade import StoreFacade
from .marker_store import MarkerStore, Subscription, marker_position, stack_position
from .scope import ScopeContext, WorkspaceScope

__all__ = [
    "JsonFileBackend",
    "MemoryBackend",
    "StackBackend",
    "StoreFacade",
    "MarkerStore",
    "Subscription",
    "marker_position",
    "stack_position",
    "ScopeContext",
    "WorkspaceScope",
]

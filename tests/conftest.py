import os
import sys
from pathlib import Path
from typing import Iterable, Tuple

import pytest

# Add src to sys.path so we can import code_explorer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Headless Qt for signal tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from code_explorer.core.models import Marker, Stack  # noqa: E402
from code_explorer.store import MarkerStore, MemoryBackend, ScopeContext  # noqa: E402

WORKSPACE = Path("/ws")


def make_marker(name: str, indent: int = 0, line: int = 0, **kwargs) -> Marker:
    """Marker whose id is `name`, anchored in /ws/src/<name>.py."""
    return Marker(
        id=name,
        file=f"/ws/src/{name.lower()}.py",
        line=line,
        column=kwargs.pop("column", 0),
        code=kwargs.pop("code", f"call_{name.lower()}()"),
        indent=indent,
        **kwargs,
    )


def make_stack(stack_id: str, layout: Iterable[Tuple[str, int]], **kwargs) -> Stack:
    """Stack from (marker name, indent) pairs."""
    markers = tuple(make_marker(name, indent, line=i) for i, (name, indent) in enumerate(layout))
    return Stack(id=stack_id, title=kwargs.pop("title", stack_id), markers=markers, **kwargs)


# Common test fixtures
@pytest.fixture
def scopes():
    """Scope context with a single open workspace folder."""
    return ScopeContext([WORKSPACE])


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(qapp, backend, scopes):
    """Store over an in-memory backend (QApplication created by pytest-qt)."""
    return MarkerStore(backend, scopes)


@pytest.fixture
def seed(store):
    """Append stacks to the store's current scope, bypassing the engines."""
    def _seed(*stacks: Stack):
        store.transaction(lambda current: current + list(stacks))
        return stacks[0] if len(stacks) == 1 else stacks
    return _seed


@pytest.fixture
def changes(store):
    """Scope keys reported by the store's change signal, in order."""
    events = []
    subscription = store.on_change(events.append)
    yield events
    subscription.dispose()

"""
Tests for StackTreeDragAndDrop.
"""

import pytest

from code_explorer.core.errors import InvalidOperationError
from code_explorer.editing.reorder import ReorderEngine
from code_explorer.view import (
    TREE_MIME_TYPE,
    DragPayload,
    LabelNode,
    MarkerNode,
    StackNode,
    StackTreeDragAndDrop,
)

from conftest import make_stack


@pytest.fixture
def dnd(store):
    return StackTreeDragAndDrop(ReorderEngine(store))


@pytest.fixture
def stacks(seed):
    return seed(make_stack("s", [("A", 0), ("B", 0)]), make_stack("t", [("X", 0)]))


def layout(store):
    return {s.id: [(m.id, m.indent) for m in s.markers] for s in store.list_stacks()}


class TestHandleDrag:

    def test_handle_drag_when_several_nodes_then_first_only(self, dnd, stacks):
        s, t = stacks
        payload = dnd.handle_drag([MarkerNode(s.markers[1]), StackNode(t)])
        assert payload.node == MarkerNode(s.markers[1])
        assert payload.mime_type == TREE_MIME_TYPE

    def test_handle_drag_when_label_or_empty_then_none(self, dnd):
        assert dnd.handle_drag([]) is None
        assert dnd.handle_drag([LabelNode("No stacks")]) is None


class TestHandleDrop:

    def test_handle_drop_when_marker_on_marker_then_reparented(self, dnd, store, stacks):
        s, t = stacks
        payload = dnd.handle_drag([MarkerNode(t.markers[0])])
        assert dnd.handle_drop(MarkerNode(s.markers[0]), payload) is True
        assert layout(store) == {"s": [("A", 0), ("X", 1), ("B", 0)], "t": []}

    def test_handle_drop_when_marker_on_stack_then_appended(self, dnd, store, stacks):
        s, t = stacks
        payload = dnd.handle_drag([MarkerNode(s.markers[0])])
        assert dnd.handle_drop(StackNode(t), payload) is True
        assert layout(store) == {"s": [("B", 0)], "t": [("X", 0), ("A", 0)]}

    def test_handle_drop_when_stack_on_stack_then_reordered(self, dnd, store, stacks):
        s, t = stacks
        assert dnd.handle_drop(StackNode(t), dnd.handle_drag([StackNode(s)])) is True
        assert [x.id for x in store.list_stacks()] == ["t", "s"]

    def test_handle_drop_when_stack_on_itself_then_raises_invalid(self, dnd, stacks):
        s, _ = stacks
        with pytest.raises(InvalidOperationError):
            dnd.handle_drop(StackNode(s), DragPayload(StackNode(s)))

    def test_handle_drop_when_rejected_then_false_and_unchanged(self, dnd, store, stacks, changes):
        s, t = stacks
        changes.clear()
        payload = DragPayload(MarkerNode(s.markers[0]))
        assert dnd.handle_drop(None, payload) is False
        assert dnd.handle_drop(StackNode(t), None) is False
        assert dnd.handle_drop(LabelNode("No markers"), payload) is False
        assert dnd.handle_drop(StackNode(t), DragPayload(MarkerNode(s.markers[0]), "text/plain")) is False
        assert dnd.handle_drop(StackNode(t), DragPayload(LabelNode("x"))) is False
        assert changes == []

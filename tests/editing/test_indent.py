"""
Tests for indent rules and IndentEngine.

The standard fixture stack is [A0, B1, C1, D0] (name + indent).
"""

import pytest

from code_explorer.core.errors import NotFoundError
from code_explorer.editing.indent import (
    IndentEngine,
    align_with_above_rule,
    indent_rule,
    nest_under_above_rule,
    unindent_rule,
)
from code_explorer.outline.codec import hierarchy_violations

from conftest import make_stack

STANDARD = [("A", 0), ("B", 1), ("C", 1), ("D", 0)]


def indents(store, stack_id="s"):
    return [(m.id, m.indent) for m in store.get_stack(stack_id).markers]


@pytest.fixture
def engine(store):
    return IndentEngine(store)


@pytest.fixture
def standard(seed):
    return seed(make_stack("s", STANDARD))


class TestIndentRules:
    """The pure rules, on marker sequences."""

    def setup_method(self):
        self.markers = make_stack("s", STANDARD).markers

    def test_indent_rule_when_first_marker_then_stays_zero(self):
        assert indent_rule(self.markers, 0) == 0

    def test_indent_rule_when_deeper_than_predecessor_allows_then_capped(self):
        deep = make_stack("s", [("A", 0), ("B", 1), ("C", 2)]).markers
        assert indent_rule(deep, 2) == 2

    def test_unindent_rule_when_top_level_then_floored(self):
        assert unindent_rule(self.markers, 3) == 0

    def test_align_and_nest_when_first_marker_then_unchanged(self):
        assert align_with_above_rule(self.markers, 0) == 0
        assert nest_under_above_rule(self.markers, 0) == 0


class TestIndentEngine:
    """IndentEngine applied through the store."""

    def test_indent_when_sibling_above_then_nests_under_it(self, engine, store, standard):
        marker = engine.indent("C")
        assert marker.indent == 2
        assert indents(store) == [("A", 0), ("B", 1), ("C", 2), ("D", 0)]

    def test_indent_when_top_level_then_one_deeper(self, engine, store, standard):
        assert engine.indent("D").indent == 1
        assert indents(store) == [("A", 0), ("B", 1), ("C", 1), ("D", 1)]

    def test_indent_when_first_marker_then_stays_top_level(self, engine, store, standard, changes):
        assert engine.indent("A").indent == 0
        assert indents(store) == STANDARD
        assert changes == []

    def test_indent_when_applied_repeatedly_then_invariant_holds(self, engine, store, standard):
        for _ in range(4):
            engine.indent("C")
            engine.indent("D")
        assert hierarchy_violations(store.get_stack("s").markers) == []
        assert indents(store) == [("A", 0), ("B", 1), ("C", 2), ("D", 3)]

    def test_unindent_when_nested_then_one_shallower(self, engine, store, standard):
        assert engine.unindent("B").indent == 0
        # Siblings below keep their indent
        assert indents(store) == [("A", 0), ("B", 0), ("C", 1), ("D", 0)]

    def test_unindent_when_top_level_then_no_change_and_no_signal(self, engine, store, standard, changes):
        assert engine.unindent("A").indent == 0
        assert changes == []

    def test_align_with_above_when_called_then_matches_predecessor(self, engine, store, standard):
        assert engine.align_with_above("D").indent == 1

    def test_nest_under_above_when_called_then_one_below_predecessor(self, engine, store, standard):
        assert engine.nest_under_above("D").indent == 2
        assert indents(store)[-1] == ("D", 2)

    def test_unindent_to_top_when_called_twice_then_idempotent(self, engine, store, standard, changes):
        engine.unindent_to_top("C")
        engine.unindent_to_top("C")
        assert indents(store) == [("A", 0), ("B", 1), ("C", 0), ("D", 0)]
        assert len(changes) == 1

    def test_indent_when_committed_then_one_signal(self, engine, standard, changes, store):
        engine.indent("C")
        assert changes == [store.scopes.current.key]

    def test_indent_when_marker_missing_then_raises_not_found(self, engine, store, standard, changes):
        with pytest.raises(NotFoundError):
            engine.indent("missing")
        assert indents(store) == STANDARD
        assert changes == []

    def test_indent_when_other_stack_then_untouched(self, engine, store, seed):
        seed(make_stack("s", STANDARD), make_stack("t", [("X", 0), ("Y", 0)]))
        engine.indent("Y")
        assert indents(store, "s") == STANDARD
        assert indents(store, "t") == [("X", 0), ("Y", 1)]

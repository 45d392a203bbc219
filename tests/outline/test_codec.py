"""
Unit Tests for the Outline Codec

Predecessor lookups, reversal and outline-text export.
"""

from collections import Counter

from code_explorer.outline.codec import (
    OutlineOrder,
    format_marker_line,
    format_outline,
    hierarchy_violations,
    predecessor_at_level,
    previous_indent,
    reverse_markers,
    serialize,
)

from conftest import WORKSPACE, make_marker, make_stack


class TestPredecessorLookups:
    """Tests for predecessor_at_level() and previous_indent()."""

    def setup_method(self):
        self.markers = make_stack("s", [("A", 0), ("B", 1), ("C", 2), ("D", 1), ("E", 0)]).markers

    def test_predecessor_at_level_when_ancestor_exists_then_nearest(self):
        assert predecessor_at_level(self.markers, 4, 1).id == "D"
        assert predecessor_at_level(self.markers, 3, 1).id == "B"
        assert predecessor_at_level(self.markers, 3, 0).id == "A"

    def test_predecessor_at_level_when_no_match_then_none(self):
        assert predecessor_at_level(self.markers, 2, 2) is None
        assert predecessor_at_level(self.markers, 0, 0) is None

    def test_previous_indent_when_first_then_minus_one(self):
        assert previous_indent(self.markers, 0) == -1
        assert previous_indent(self.markers, 3) == 2

    def test_lookups_when_called_then_input_untouched(self):
        before = tuple(self.markers)
        predecessor_at_level(self.markers, 4, 0)
        serialize(make_stack("s", [("A", 0)]))
        assert tuple(self.markers) == before


class TestHierarchy:
    """Tests for hierarchy_violations() and reverse_markers()."""

    def test_hierarchy_violations_when_well_formed_then_empty(self):
        markers = make_stack("s", [("A", 0), ("B", 1), ("C", 2), ("D", 1)]).markers
        assert hierarchy_violations(markers) == []

    def test_hierarchy_violations_when_orphan_then_reports_position(self):
        markers = make_stack("s", [("A", 0), ("B", 2), ("C", 1)]).markers
        assert hierarchy_violations(markers) == [1]

    def test_reverse_markers_when_applied_then_indents_travel(self):
        markers = make_stack("s", [("A", 0), ("B", 1), ("C", 1)]).markers
        reversed_ = reverse_markers(markers)
        assert [(m.id, m.indent) for m in reversed_] == [("C", 1), ("B", 1), ("A", 0)]
        assert hierarchy_violations(reversed_) == [0, 1]

    def test_reverse_markers_when_applied_twice_then_identity(self):
        markers = make_stack("s", [("A", 0), ("B", 1), ("C", 2), ("D", 0)]).markers
        assert reverse_markers(reverse_markers(markers)) == markers


class TestOutlineExport:
    """Tests for format_marker_line() / serialize()."""

    def test_format_marker_line_when_plain_then_location_and_code(self):
        m = make_marker("App", line=9, column=4, code="main()")
        assert format_marker_line(m, WORKSPACE) == "- src/app.py:10:5 main()"

    def test_format_marker_line_when_tags_title_indent_then_all_parts(self):
        m = make_marker("App", indent=2, line=0, code="main()", tags=("a", "b"), title="Entry")
        assert format_marker_line(m, WORKSPACE) == "    - [a][b] src/app.py:1:1 main() # Entry"

    def test_format_marker_line_when_outside_root_then_path_unchanged(self):
        m = make_marker("App")
        assert format_marker_line(m, "/elsewhere") == "- /ws/src/app.py:1:1 call_app()"

    def test_format_marker_line_when_custom_width_then_scaled_indent(self):
        m = make_marker("App", indent=1)
        assert format_marker_line(m, WORKSPACE, indent_width=4).startswith("    - ")

    def test_serialize_when_forward_then_one_line_per_marker_in_order(self):
        stack = make_stack("s", [("A", 0), ("B", 1), ("C", 1)])
        lines = serialize(stack, OutlineOrder.FORWARD, WORKSPACE)
        assert lines == [
            "- src/a.py:1:1 call_a()",
            "  - src/b.py:2:1 call_b()",
            "  - src/c.py:3:1 call_c()",
        ]

    def test_serialize_when_reversed_then_permutation_of_forward(self):
        stack = make_stack("s", [("A", 0), ("B", 1), ("C", 2), ("D", 0)])
        forward = serialize(stack, OutlineOrder.FORWARD, WORKSPACE)
        backward = serialize(stack, OutlineOrder.REVERSED, WORKSPACE)
        assert Counter(line.strip() for line in forward) == Counter(line.strip() for line in backward)
        assert backward[0].strip() == "- src/d.py:4:1 call_d()"

    def test_serialize_when_leading_spaces_then_indent_recoverable(self):
        stack = make_stack("s", [("A", 0), ("B", 1), ("C", 2)])
        lines = serialize(stack, root=WORKSPACE)
        assert [(len(l) - len(l.lstrip(" "))) // 2 for l in lines] == [0, 1, 2]

    def test_format_outline_when_empty_stack_then_empty_text(self):
        assert format_outline(make_stack("s", [])) == ""

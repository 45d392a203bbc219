"""
Module: editing.indent

Purpose:
    Indent/unindent/align operations on a single marker. Each operation is a
    pure rule `(markers, index) -> new indent` applied inside one store
    transaction; sibling and descendant markers are never touched.

    Changing a marker's indent does not cascade: markers below it keep their
    old values even if that leaves a deeper marker without a direct ancestor.

Key Functions:
    - indent_rule / unindent_rule / align_with_above_rule /
      nest_under_above_rule / unindent_to_top_rule: Pure rules

Key Classes:
    - IndentEngine: Applies a rule to a marker id through the store

Dependencies:
    - outline.codec.previous_indent
    - store.marker_position

Used By:
    - view.controller
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from code_explorer.core.models import Marker, Stack
from code_explorer.outline.codec import previous_indent
from code_explorer.store.facade import StoreFacade
from code_explorer.store.marker_store import marker_position

logger = logging.getLogger(__name__)

IndentRule = Callable[[Sequence[Marker], int], int]


# ─────────────────────────────────────────────────────────────────────────────
# Rules
# ─────────────────────────────────────────────────────────────────────────────

def indent_rule(markers: Sequence[Marker], index: int) -> int:
    """
    One level deeper, but never more than one below the predecessor.

    The first marker has predecessor indent -1 and therefore stays at 0.
    """
    return min(markers[index].indent + 1, previous_indent(markers, index) + 1)


def unindent_rule(markers: Sequence[Marker], index: int) -> int:
    """One level shallower, floored at 0."""
    return max(markers[index].indent - 1, 0)


def align_with_above_rule(markers: Sequence[Marker], index: int) -> int:
    """Same level as the immediate predecessor; unchanged for the first marker."""
    if index == 0:
        return markers[index].indent
    return markers[index - 1].indent


def nest_under_above_rule(markers: Sequence[Marker], index: int) -> int:
    """One level below the immediate predecessor; unchanged for the first marker."""
    if index == 0:
        return markers[index].indent
    return markers[index - 1].indent + 1


def unindent_to_top_rule(markers: Sequence[Marker], index: int) -> int:
    return 0


class IndentEngine:
    """Applies indent rules to markers held by a store."""

    def __init__(self, store: StoreFacade) -> None:
        self._store = store

    def indent(self, marker_id: str) -> Marker:
        return self._apply(marker_id, indent_rule, "indent")

    def unindent(self, marker_id: str) -> Marker:
        return self._apply(marker_id, unindent_rule, "unindent")

    def align_with_above(self, marker_id: str) -> Marker:
        return self._apply(marker_id, align_with_above_rule, "align_with_above")

    def nest_under_above(self, marker_id: str) -> Marker:
        return self._apply(marker_id, nest_under_above_rule, "nest_under_above")

    def unindent_to_top(self, marker_id: str) -> Marker:
        return self._apply(marker_id, unindent_to_top_rule, "unindent_to_top")

    def _apply(self, marker_id: str, rule: IndentRule, name: str) -> Marker:
        """
        Run a rule on one marker inside a store transaction.

        Raises:
            NotFoundError: If the marker does not exist
            PersistenceError: If the store fails to write
        """
        def _mutate(stacks: List[Stack]) -> Optional[List[Stack]]:
            si, mi = marker_position(stacks, marker_id)
            markers = stacks[si].markers
            new_indent = rule(markers, mi)
            if new_indent == markers[mi].indent:
                logger.debug(f"{name}: marker {marker_id} stays at indent {new_indent}")
                return None
            stacks[si] = stacks[si].with_marker(replace(markers[mi], indent=new_indent))
            return stacks

        committed = self._store.transaction(_mutate)
        si, mi = marker_position(committed, marker_id)
        marker = committed[si].markers[mi]
        logger.info(f"{name}: marker {marker.description} now at indent {marker.indent}")
        return marker

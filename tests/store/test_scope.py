"""
Tests for WorkspaceScope and ScopeContext.
"""

from pathlib import Path

import pytest

from code_explorer.core.errors import InvalidOperationError
from code_explorer.store import ScopeContext, WorkspaceScope


class TestWorkspaceScope:

    def test_key_when_same_folder_then_equal(self):
        assert WorkspaceScope.of("/ws").key == WorkspaceScope(Path("/ws")).key
        assert WorkspaceScope.of("/ws").key != WorkspaceScope.of("/other").key
        assert len(WorkspaceScope.of("/ws").key) == 16

    def test_name_when_called_then_folder_name(self):
        assert WorkspaceScope.of("/home/dev/project").name == "project"


class TestScopeContext:

    def test_current_when_single_folder_then_that_folder(self, qapp):
        scopes = ScopeContext(["/ws"])
        assert scopes.current == WorkspaceScope.of("/ws")
        assert not scopes.needs_choice

    def test_current_when_no_folders_then_none(self, qapp):
        assert ScopeContext().current is None

    def test_current_when_several_folders_then_choice_needed(self, qapp):
        scopes = ScopeContext(["/one", "/two"])
        assert scopes.current is None
        assert scopes.needs_choice

    def test_select_when_open_folder_then_current_and_signal(self, qapp, qtbot):
        scopes = ScopeContext(["/one", "/two"])
        with qtbot.waitSignal(scopes.scopeChanged, timeout=1000) as blocker:
            scopes.select("/two")
        assert blocker.args == [WorkspaceScope.of("/two")]
        assert scopes.current == WorkspaceScope.of("/two")
        assert not scopes.needs_choice

    def test_select_when_folder_not_open_then_raises_invalid(self, qapp):
        scopes = ScopeContext(["/one"])
        with pytest.raises(InvalidOperationError):
            scopes.select("/elsewhere")

    def test_set_folders_when_selected_closed_then_selection_dropped(self, qapp):
        scopes = ScopeContext(["/one", "/two"])
        scopes.select("/two")
        scopes.set_folders(["/one", "/three"])
        assert scopes.selected is None
        assert scopes.needs_choice

    def test_clear_when_selected_then_back_to_choice(self, qapp):
        scopes = ScopeContext(["/one", "/two"])
        scopes.select("/one")
        scopes.clear()
        assert scopes.current is None

"""
Tests for ExplorerConfig and load_config().
"""

import json
from pathlib import Path

import pytest

from code_explorer.config import ExplorerConfig, load_config
from code_explorer.utils.paths import DATA_DIR_ENV, get_app_data_dir


class TestExplorerConfig:

    def test_init_when_defaults_then_standard_widths(self, tmp_path):
        config = ExplorerConfig(data_dir=tmp_path)
        assert config.label_indent_width == 4
        assert config.export_indent_width == 2
        assert config.untitled_stack_title == "<Untitled Stack>"

    @pytest.mark.parametrize("field, value", [
        ("label_indent_width", 0),
        ("export_indent_width", -1),
        ("untitled_stack_title", ""),
    ])
    def test_init_when_invalid_value_then_raises_error(self, tmp_path, field, value):
        with pytest.raises(ValueError):
            ExplorerConfig(data_dir=tmp_path, **{field: value})

    def test_from_dict_when_unknown_keys_then_ignored(self):
        config = ExplorerConfig.from_dict({"data_dir": "~/stacks", "export_indent_width": 4, "theme": "dark"})
        assert config.export_indent_width == 4
        assert config.data_dir == Path("~/stacks").expanduser()

    def test_data_dir_when_env_override_then_used(self, monkeypatch, tmp_path):
        monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "override"))
        assert get_app_data_dir() == tmp_path / "override"
        assert ExplorerConfig().data_dir == tmp_path / "override"


class TestLoadConfig:

    def test_load_config_when_missing_file_then_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
        assert load_config(tmp_path / "absent.json") == ExplorerConfig()

    def test_load_config_when_valid_file_then_values_read(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"data_dir": str(tmp_path), "label_indent_width": 2}), encoding="utf-8")
        config = load_config(path)
        assert config.label_indent_width == 2
        assert config.data_dir == tmp_path

    @pytest.mark.parametrize("content", ["{broken", "[1, 2]", '{"label_indent_width": 0}'])
    def test_load_config_when_invalid_file_then_defaults(self, tmp_path, monkeypatch, content):
        monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
        path = tmp_path / "config.json"
        path.write_text(content, encoding="utf-8")
        assert load_config(path) == ExplorerConfig()

    def test_load_config_when_no_path_then_data_dir_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
        (tmp_path / "config.json").write_text('{"export_indent_width": 3}', encoding="utf-8")
        assert load_config().export_indent_width == 3

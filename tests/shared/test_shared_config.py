"""Tests for shared configuration helpers."""

import os
from unittest import mock

from shared.config import (
    CONFIG_FILENAME,
    collect_settings,
    find_config_file,
    get_section,
    load_yaml_file,
    parse_bool,
)


class TestFindConfigFile:
    """Tests for find_config_file()."""

    def test_found_in_parent(self, tmp_path) -> None:
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("site: {}\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config_path

    def test_not_found(self, tmp_path) -> None:
        # tmp dirs live under the system temp root, which has no config file
        assert find_config_file(tmp_path) is None


class TestLoadYamlFile:
    """Tests for load_yaml_file()."""

    def test_missing_file(self, tmp_path) -> None:
        assert load_yaml_file(tmp_path / "nope.yaml") == {}

    def test_non_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert load_yaml_file(path) == {}

    def test_get_section(self) -> None:
        assert get_section({"site": {"port": 1}}, "site") == {"port": 1}
        assert get_section({"site": "oops"}, "site") == {}
        assert get_section({}, "site") == {}


class TestCollectSettings:
    """Tests for collect_settings()."""

    def test_priority_order(self, tmp_path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("demo:\n  a: yaml\n  b: yaml\n  c: yaml\n")
        env_mapping = {"a": "DEMO_A", "b": "DEMO_B", "c": "DEMO_C"}

        with mock.patch.dict(os.environ, {"DEMO_B": "env", "DEMO_C": "env"}, clear=False):
            settings = collect_settings(path, "demo", env_mapping, {"c": "kwarg", "a": None})

        assert settings == {"a": "yaml", "b": "env", "c": "kwarg"}

    def test_auto_discovery_from_cwd(self, tmp_path, monkeypatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("demo:\n  a: found\n")
        monkeypatch.chdir(tmp_path)

        assert collect_settings(None, "demo", {"a": "DEMO_A"}, {}) == {"a": "found"}


class TestParseBool:
    """Tests for parse_bool()."""

    def test_values(self) -> None:
        assert parse_bool(True) is True
        assert parse_bool("Yes") is True
        assert parse_bool("1") is True
        assert parse_bool("off") is False
        assert parse_bool(False) is False

"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from jsprune.config import (
    CleanSettings,
    VariableAction,
    find_config,
    get_exclude_patterns,
    get_implicitly_used,
    load_config,
    load_settings,
    settings_from_config,
)
from jsprune.errors import ConfigError


class TestDefaults:
    """Tests for default settings."""

    def test_defaults(self) -> None:
        settings = CleanSettings()

        assert settings.auto_remove_unused_imports is False
        assert settings.auto_handle_unused_variables is False
        assert settings.unused_variable_action is VariableAction.COMMENT
        assert settings.remove_trailing_parameters is True
        assert settings.implicitly_used == frozenset({"React"})

    def test_empty_config_gives_defaults(self) -> None:
        assert settings_from_config({}) == CleanSettings()


class TestSettingsFromConfig:
    """Tests for settings_from_config."""

    def test_reads_all_keys(self) -> None:
        settings = settings_from_config(
            {
                "autoRemoveUnusedImports": True,
                "autoHandleUnusedVariables": True,
                "unusedVariableAction": "prefix",
                "removeTrailingParameters": False,
                "implicitlyUsed": ["h", "Fragment"],
                "exclude": ["generated/"],
            }
        )

        assert settings.auto_remove_unused_imports is True
        assert settings.auto_handle_unused_variables is True
        assert settings.unused_variable_action is VariableAction.PREFIX
        assert settings.remove_trailing_parameters is False
        assert settings.implicitly_used == frozenset({"h", "Fragment"})
        assert settings.exclude == ["generated/"]

    def test_invalid_action(self) -> None:
        with pytest.raises(ConfigError, match="unusedVariableAction"):
            settings_from_config({"unusedVariableAction": "delete"})

    def test_invalid_bool(self) -> None:
        with pytest.raises(ConfigError, match="removeTrailingParameters"):
            settings_from_config({"removeTrailingParameters": "yes"})

    def test_invalid_implicitly_used(self) -> None:
        with pytest.raises(ConfigError):
            get_implicitly_used({"implicitlyUsed": "React"})

    def test_string_exclude(self) -> None:
        assert get_exclude_patterns({"exclude": "dist/"}) == ["dist/"]


class TestLoadConfig:
    """Tests for config file sources."""

    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / ".jsprune.json"
        path.write_text(json.dumps({"unusedVariableAction": "ignore"}))

        assert load_config(path) == {"unusedVariableAction": "ignore"}

    def test_load_package_json_key(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"name": "app", "jsprune": {"removeTrailingParameters": False}}))

        assert load_config(path) == {"removeTrailingParameters": False}

    def test_load_pyproject_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool.jsprune]\nunusedVariableAction = "prefix"\n')

        assert load_config(path) == {"unusedVariableAction": "prefix"}

    def test_load_plain_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "jsprune.toml"
        path.write_text("autoRemoveUnusedImports = true\n")

        assert load_config(path) == {"autoRemoveUnusedImports": True}


class TestFindConfig:
    """Tests for find_config precedence."""

    def test_no_config(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None
        assert load_settings(tmp_path) == CleanSettings()

    def test_dedicated_file_wins(self, tmp_path: Path) -> None:
        (tmp_path / ".jsprune.json").write_text("{}")
        (tmp_path / "package.json").write_text(json.dumps({"jsprune": {}}))

        assert find_config(tmp_path) == tmp_path / ".jsprune.json"

    def test_package_json_without_key_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"name": "app"}))

        assert find_config(tmp_path) is None

    def test_pyproject_with_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.jsprune]\nremoveTrailingParameters = false\n")

        assert find_config(tmp_path) == tmp_path / "pyproject.toml"
        assert load_settings(tmp_path).remove_trailing_parameters is False

    def test_explicit_path_overrides(self, tmp_path: Path) -> None:
        (tmp_path / ".jsprune.json").write_text(json.dumps({"unusedVariableAction": "prefix"}))
        explicit = tmp_path / "other.json"
        explicit.write_text(json.dumps({"unusedVariableAction": "ignore"}))

        settings = load_settings(tmp_path, explicit)

        assert settings.unused_variable_action is VariableAction.IGNORE

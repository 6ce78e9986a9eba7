"""Configuration loading for jsprune.

Settings come from the first of: an explicit config file (JSON or TOML),
``.jsprune.json``, the ``"jsprune"`` key of ``package.json``, or the
``[tool.jsprune]`` table of ``pyproject.toml``.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import tomli

from jsprune.errors import ConfigError

CONFIG_FILE = ".jsprune.json"
PACKAGE_JSON = "package.json"
PYPROJECT = "pyproject.toml"
CONFIG_KEY = "jsprune"


class VariableAction(Enum):
    """What to do with unused variables and functions."""

    COMMENT = "comment"  # comment out with a TODO marker
    PREFIX = "prefix"  # rename with a leading underscore
    IGNORE = "ignore"  # leave untouched


@dataclass
class CleanSettings:
    """Resolved behavioral switches for one run."""

    auto_remove_unused_imports: bool = False
    auto_handle_unused_variables: bool = False
    unused_variable_action: VariableAction = VariableAction.COMMENT
    remove_trailing_parameters: bool = True
    implicitly_used: frozenset[str] = frozenset({"React"})
    exclude: list[str] = field(default_factory=list)


def load_config(config_path: Path) -> dict:
    """Load a JSON or TOML configuration file."""
    if config_path.suffix == ".toml":
        with open(config_path, "rb") as f:
            data = tomli.load(f)
        # pyproject.toml keeps settings under [tool.jsprune]
        return data.get("tool", {}).get(CONFIG_KEY, data)

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if config_path.name == PACKAGE_JSON:
        return data.get(CONFIG_KEY, {})
    return data


def find_config(project_root: Path) -> Path | None:
    """Locate the configuration source for a project, if any."""
    candidate = project_root / CONFIG_FILE
    if candidate.exists():
        return candidate

    package_json = project_root / PACKAGE_JSON
    if package_json.exists():
        try:
            with open(package_json, "r", encoding="utf-8") as f:
                if CONFIG_KEY in json.load(f):
                    return package_json
        except json.JSONDecodeError:
            pass

    pyproject = project_root / PYPROJECT
    if pyproject.exists():
        with open(pyproject, "rb") as f:
            if CONFIG_KEY in tomli.load(f).get("tool", {}):
                return pyproject

    return None


def _get_bool(config: dict, key: str, default: bool) -> bool:
    value = config.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def get_unused_variable_action(config: dict) -> VariableAction:
    """Get the unused variable action from config."""
    value = config.get("unusedVariableAction", VariableAction.COMMENT.value)
    try:
        return VariableAction(value)
    except ValueError:
        choices = ", ".join(action.value for action in VariableAction)
        raise ConfigError(f"unusedVariableAction must be one of {choices}, got {value!r}") from None


def get_implicitly_used(config: dict) -> frozenset[str]:
    """Get names that always count as used (default: the JSX factory React)."""
    names = config.get("implicitlyUsed", ["React"])
    if not isinstance(names, list):
        raise ConfigError(f"implicitlyUsed must be a list of names, got {names!r}")
    return frozenset(str(name) for name in names)


def get_exclude_patterns(config: dict) -> list[str]:
    """Get additional file exclusion patterns from config."""
    patterns = config.get("exclude", [])
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


def settings_from_config(config: dict) -> CleanSettings:
    """Resolve a raw config mapping into settings.

    Raises:
        ConfigError: If a value has the wrong type or an unknown choice.
    """
    return CleanSettings(
        auto_remove_unused_imports=_get_bool(config, "autoRemoveUnusedImports", False),
        auto_handle_unused_variables=_get_bool(config, "autoHandleUnusedVariables", False),
        unused_variable_action=get_unused_variable_action(config),
        remove_trailing_parameters=_get_bool(config, "removeTrailingParameters", True),
        implicitly_used=get_implicitly_used(config),
        exclude=get_exclude_patterns(config),
    )


def load_settings(project_root: Path, config_path: Path | None = None) -> CleanSettings:
    """Load settings for a project, falling back to defaults."""
    path = config_path or find_config(project_root)
    if path is None:
        return CleanSettings()
    return settings_from_config(load_config(path))

"""Custom pydantic-settings sources for layerkv configuration.

This module provides:

- LayeredYamlSettingsSource: A pydantic-settings source that loads
  configuration from layered YAML files and deep-merges them.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .layerkv/config.yaml in the project root
3. User config: ~/.config/layerkv/config.yaml (or LAYERKV_CONFIG_DIR)
4. Built-in defaults: bundled config.yaml

Nested mappings merge key by key; any other value from a higher layer
replaces the lower one.

Environment variables:
- LAYERKV_CONFIG_DIR: Override user config directory (default: ~/.config/layerkv)
"""

import copy as _copy
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "LAYERKV_CONFIG_DIR"

PROJECT_CONFIG_DIRNAME = ".layerkv"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def deep_merge(
    base: dict[str, _typing.Any],
    override: dict[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Deep merge two dicts, with override taking priority.

    Args:
        base: The lower-precedence dict.
        override: The dict to merge in (takes priority).

    Returns:
        New merged dict. Neither input is modified.
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = _copy.deepcopy(value)
    return result


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML config file.

    Returns:
        Parsed contents, or None if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or its top level is not a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that merges the built-in, user and project YAML files.

    The merged result is a plain dict handed to pydantic for validation;
    unknown keys are kept so Settings can report them.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Directory holding .layerkv/config.yaml, if any.
            user_config_path: Override path for user config file (for testing).
            builtin_config_path: Override path for builtin defaults (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._builtin_config_path = builtin_config_path
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        """Load and merge config files, lowest precedence first."""
        merged: dict[str, _typing.Any] = {}
        loaded: list[tuple[str, _pathlib.Path]] = []

        # Built-in defaults are REQUIRED: missing or empty is an install bug
        builtin_path = self._get_builtin_config_path()
        if not builtin_path.exists():
            raise ConfigFileError(
                builtin_path,
                "built-in defaults not found (possible installation problem)",
            )
        builtin_content = load_yaml_file(builtin_path)
        if not builtin_content:
            raise ConfigFileError(
                builtin_path,
                "built-in defaults file is empty (possible installation problem)",
            )
        merged = deep_merge(merged, builtin_content)
        loaded.append(("built-in", builtin_path))

        for name, path in (
            ("user", self._get_user_config_path()),
            ("project", self._get_project_config_path()),
        ):
            if path is None or not path.exists():
                continue
            content = load_yaml_file(path)
            if content:
                merged = deep_merge(merged, content)
                loaded.append((name, path))

        # Highest precedence first, matching get_layer_paths()
        loaded.reverse()
        self._loaded_layers = loaded
        return merged

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """(layer_name, path) for each file that contributed, highest first."""
        return list(self._loaded_layers)

    def get_layer_paths(self) -> list[tuple[str, _pathlib.Path, bool]]:
        """(layer_name, path, exists) for every layer, highest first."""
        layers: list[tuple[str, _pathlib.Path, bool]] = []
        project_path = self._get_project_config_path()
        if project_path is not None:
            layers.append(("project", project_path, project_path.exists()))
        user_path = self._get_user_config_path()
        layers.append(("user", user_path, user_path.exists()))
        builtin_path = self._get_builtin_config_path()
        layers.append(("built-in", builtin_path, builtin_path.exists()))
        return layers

    def _get_builtin_config_path(self) -> _pathlib.Path:
        if self._builtin_config_path is not None:
            return self._builtin_config_path
        return get_builtin_defaults_path()

    def _get_user_config_path(self) -> _pathlib.Path:
        if self._user_config_path is not None:
            return self._user_config_path
        return get_user_config_path()

    def _get_project_config_path(self) -> _pathlib.Path | None:
        if self._project_root is None:
            return None
        return get_project_config_path(self._project_root)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """Get the merged value for a top-level field."""
        value = self._merged.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the merged config, unknown keys included."""
        return _copy.deepcopy(self._merged)


def get_builtin_defaults_path() -> _pathlib.Path:
    """Path to the bundled defaults/config.yaml."""
    return _pathlib.Path(__file__).parent / "defaults" / "config.yaml"


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects LAYERKV_CONFIG_DIR if set, otherwise uses the XDG path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "layerkv"


def get_user_config_path() -> _pathlib.Path:
    """Path to config.yaml in the user config directory."""
    return get_user_config_dir() / "config.yaml"


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Path to .layerkv/config.yaml within the project."""
    return project_root / PROJECT_CONFIG_DIRNAME / "config.yaml"

"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with LAYERKV_ prefix
3. .env file (only if LAYERKV_ENV_FILE points at one)
4. Layered YAML config files:
   - Project config: .layerkv/config.yaml in the working directory (highest)
   - User config: ~/.config/layerkv/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  LAYERKV_ENGINE__COMMIT_POLICY=cascade
  LAYERKV_LOGGING__LEVEL=DEBUG
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import layerkv.config.sources as sources
import layerkv.config.types as types


def _get_env_file() -> str | None:
    """Return LAYERKV_ENV_FILE if it names an existing file, else None.

    No .env is loaded implicitly; the environment alone is enough.
    """
    env_file = _os.environ.get("LAYERKV_ENV_FILE")
    if env_file and _pathlib.Path(env_file).exists():
        return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    layerkv configuration settings.

    All settings can be overridden via environment variables with LAYERKV_ prefix.
    For nested config, use double underscore: LAYERKV_REPL__PROMPT="kv> "

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (LAYERKV_*)
    3. .env file
    4. Project config (.layerkv/config.yaml)
    5. User config (~/.config/layerkv/config.yaml)
    6. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="LAYERKV_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args, highest)
        2. env_settings (LAYERKV_* env vars)
        3. dotenv_settings (.env file)
        4. yaml_settings (layered config.yaml files)
        5. defaults via Field definitions (lowest)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, _pathlib.Path.cwd()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading any .env file.

        Useful for test isolation and for reproducing issues without .env
        interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Config version (for future migrations)
    # =========================================================================

    version: int = _pydantic.Field(default=1, description="Config schema version")

    # =========================================================================
    # Nested config sections
    # =========================================================================

    engine: types.EngineConfig = _pydantic.Field(default_factory=types.EngineConfig)
    """Storage engine settings (commit policy)."""

    repl: types.ReplConfig = _pydantic.Field(default_factory=types.ReplConfig)
    """Statement loop settings (prompt, END behaviour, NULL literal)."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Diagnostic logging and transcript settings."""

    # =========================================================================
    # Property aliases to nested config
    # =========================================================================

    @property
    def commit_policy(self) -> _typing.Literal["root", "cascade"]:
        """Commit policy (alias to engine.commit_policy)."""
        return self.engine.commit_policy

    @property
    def prompt(self) -> str:
        """Prompt (alias to repl.prompt)."""
        return self.repl.prompt

    @property
    def log_level(self) -> str:
        """Log level (alias to logging.level)."""
        return self.logging.level

    @property
    def config_dir(self) -> _pathlib.Path:
        """User config directory."""
        return sources.get_user_config_dir()

    def get_unknown_fields(self) -> dict[str, _typing.Any]:
        """
        Every config key not in the schema, as dotted paths.

        Example: {"engine.comit_policy": "cascade"}
        """
        result: dict[str, _typing.Any] = dict(self.model_extra or {})
        for field_name in ("engine", "repl", "logging"):
            section: types.ConfigBase = getattr(self, field_name)
            result.update(section.collect_all_extra_fields(field_name))
        return result

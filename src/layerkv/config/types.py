"""Configuration type definitions for layerkv settings.

This module defines the Pydantic models nested within the main Settings
class:

- EngineConfig: commit_policy
- ReplConfig: prompt, exit_on_end, null_literal
- LoggingConfig: level, transcript, dir, file

Design decision: All types use `extra="allow"` to preserve unknown fields,
so typos in config files can be reported instead of silently dropped.
"""

import typing as _typing

import pydantic as _pydantic

import layerkv.constants as constants


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are preserved rather than dropped, so they can be
    audited with `collect_all_extra_fields()`.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self, prefix: str = "") -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"engine.comit_policy": "cascade"}
        """
        result: dict[str, _typing.Any] = {}
        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Engine Settings
# =============================================================================


class EngineConfig(ConfigBase):
    """
    Storage engine settings.

    YAML section: engine.*
    """

    commit_policy: _typing.Literal["root", "cascade"] = "root"
    """How COMMIT folds nested transactions.

    root: one COMMIT collapses every open transaction into the root.
    cascade: one COMMIT folds the innermost transaction into its parent.
    """


# =============================================================================
# Statement Loop Settings
# =============================================================================


class ReplConfig(ConfigBase):
    """
    Statement loop settings.

    YAML section: repl.*
    """

    prompt: str = constants.DEFAULT_PROMPT
    """Prompt shown before each statement in interactive mode."""

    exit_on_end: bool = True
    """Stop the loop on END. When false, END only resets the store."""

    null_literal: str = _pydantic.Field(default=constants.DEFAULT_NULL_LITERAL, min_length=1)
    """Printed by GET for a key that does not resolve."""


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    """Level of the diagnostic logger (stderr)."""

    transcript: bool = False
    """Write a JSONL transcript of every executed statement."""

    dir: str | None = None
    """Transcript directory. None means /tmp/layerkv-logs."""

    file: str | None = None
    """Explicit transcript path (overrides dir)."""

    @_pydantic.field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return value.upper()
        return value

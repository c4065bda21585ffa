"""Tests for configuration settings."""

import os as _os
import pathlib as _pathlib
import unittest.mock as _mock

import pydantic as _pydantic
import pytest as _pytest

import layerkv.config as config
import layerkv.config.types as types


def _write_yaml(path: _pathlib.Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class TestSettingsDefaults:
    """Settings defaults come from the built-in config.yaml."""

    def test_default_commit_policy_is_root(self) -> None:
        settings = config.Settings.construct_without_dotenv()
        assert settings.commit_policy == "root"

    def test_default_prompt(self) -> None:
        settings = config.Settings.construct_without_dotenv()
        assert settings.prompt == ">> "

    def test_default_repl_settings(self) -> None:
        settings = config.Settings.construct_without_dotenv()
        assert settings.repl.exit_on_end is True
        assert settings.repl.null_literal == "NULL"

    def test_default_logging(self) -> None:
        settings = config.Settings.construct_without_dotenv()
        assert settings.log_level == "WARNING"
        assert settings.logging.transcript is False
        assert settings.logging.file is None

    def test_no_unknown_fields_by_default(self) -> None:
        settings = config.Settings.construct_without_dotenv()
        assert settings.get_unknown_fields() == {}


class TestSettingsEnvironment:
    """LAYERKV_* environment variables."""

    def test_nested_env_var_sets_commit_policy(self) -> None:
        with _mock.patch.dict(_os.environ, {"LAYERKV_ENGINE__COMMIT_POLICY": "cascade"}):
            settings = config.Settings.construct_without_dotenv()
        assert settings.commit_policy == "cascade"

    def test_env_overrides_project_config(self, isolated_config: _pathlib.Path) -> None:
        _write_yaml(
            isolated_config / ".layerkv" / "config.yaml",
            "repl:\n  prompt: 'project> '\n",
        )
        with _mock.patch.dict(_os.environ, {"LAYERKV_REPL__PROMPT": "env> "}):
            settings = config.Settings.construct_without_dotenv()
        assert settings.prompt == "env> "

    def test_log_level_is_upper_cased(self) -> None:
        with _mock.patch.dict(_os.environ, {"LAYERKV_LOGGING__LEVEL": "debug"}):
            settings = config.Settings.construct_without_dotenv()
        assert settings.log_level == "DEBUG"

    def test_invalid_commit_policy_rejected(self) -> None:
        with _mock.patch.dict(_os.environ, {"LAYERKV_ENGINE__COMMIT_POLICY": "sideways"}):
            with _pytest.raises(_pydantic.ValidationError):
                config.Settings.construct_without_dotenv()


class TestSettingsLayers:
    """User and project YAML layers."""

    def test_user_config_overrides_builtin(self) -> None:
        user_dir = _pathlib.Path(_os.environ["LAYERKV_CONFIG_DIR"])
        _write_yaml(user_dir / "config.yaml", "engine:\n  commit_policy: cascade\n")

        settings = config.Settings.construct_without_dotenv()

        assert settings.commit_policy == "cascade"
        # Sibling keys from the built-in layer survive the merge
        assert settings.prompt == ">> "

    def test_project_config_overrides_user(self, isolated_config: _pathlib.Path) -> None:
        user_dir = _pathlib.Path(_os.environ["LAYERKV_CONFIG_DIR"])
        _write_yaml(user_dir / "config.yaml", "engine:\n  commit_policy: cascade\n")
        _write_yaml(
            isolated_config / ".layerkv" / "config.yaml",
            "engine:\n  commit_policy: root\n",
        )

        settings = config.Settings.construct_without_dotenv()

        assert settings.commit_policy == "root"

    def test_constructor_overrides_everything(self) -> None:
        with _mock.patch.dict(_os.environ, {"LAYERKV_ENGINE__COMMIT_POLICY": "root"}):
            settings = config.Settings.construct_without_dotenv(
                engine=types.EngineConfig(commit_policy="cascade")
            )
        assert settings.commit_policy == "cascade"

    def test_unknown_keys_are_reported(self, isolated_config: _pathlib.Path) -> None:
        _write_yaml(
            isolated_config / ".layerkv" / "config.yaml",
            "engine:\n  comit_policy: cascade\n",
        )

        settings = config.Settings.construct_without_dotenv()

        assert settings.get_unknown_fields() == {"engine.comit_policy": "cascade"}
        assert settings.commit_policy == "root"

    def test_malformed_yaml_raises_config_file_error(
        self,
        isolated_config: _pathlib.Path,
    ) -> None:
        _write_yaml(isolated_config / ".layerkv" / "config.yaml", "engine: [unclosed\n")

        with _pytest.raises(config.ConfigFileError, match="invalid YAML"):
            config.Settings.construct_without_dotenv()

    def test_non_mapping_yaml_raises_config_file_error(
        self,
        isolated_config: _pathlib.Path,
    ) -> None:
        _write_yaml(isolated_config / ".layerkv" / "config.yaml", "- just\n- a list\n")

        with _pytest.raises(config.ConfigFileError, match="YAML mapping"):
            config.Settings.construct_without_dotenv()

"""
Shared pytest fixtures for layerkv tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import layerkv.engine as engine
import layerkv.interpreter as interpreter
import layerkv.logging as kv_logging


@_pytest.fixture(autouse=True)
def isolated_config(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Isolate every test from the developer's layerkv configuration.

    - Removes all LAYERKV_* environment variables
    - Points the user config dir at an empty temp directory
    - Runs the test from a temp working directory (no project config)

    Returns:
        The temp working directory (project root for config lookups).
    """
    for key in list(_os.environ):
        if key.startswith("LAYERKV_"):
            monkeypatch.delenv(key)
    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    monkeypatch.setenv("LAYERKV_CONFIG_DIR", str(user_dir))
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    monkeypatch.chdir(project_dir)
    return project_dir


@_pytest.fixture(autouse=True)
def reset_layerkv_logger() -> _typing.Iterator[None]:
    """Drop handlers installed by configure_logging (e.g. by CLI tests)."""
    yield
    logger = _logging.getLogger(kv_logging.LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(_logging.NOTSET)


@_pytest.fixture
def store() -> engine.Store:
    """Empty store with the default (root) commit policy."""
    return engine.Store()


@_pytest.fixture
def cascade_store() -> engine.Store:
    """Empty store that commits one level at a time."""
    return engine.Store(commit_policy="cascade")


@_pytest.fixture
def interp() -> interpreter.Interpreter:
    """Interpreter over a fresh default store."""
    return interpreter.Interpreter()


@_pytest.fixture
def run_statements(
    interp: interpreter.Interpreter,
) -> _typing.Callable[[list[str]], list[str]]:
    """
    Run statements and return what each one would print ("" for nothing).

    Usage:
        def test_something(run_statements):
            assert run_statements(["SET a foo", "GET a"]) == ["", "foo"]
    """

    def _run(statements: list[str]) -> list[str]:
        outputs: list[str] = []
        for statement in statements:
            result = interp.execute(statement)
            outputs.append("\n".join(result.lines()))
        return outputs

    return _run

"""
Interpreter: runs statements against a Store.

``Interpreter.execute`` never raises for bad input or engine errors. It
returns a StatementResult tagged with the error kind, and the caller decides
how to present it (the CLI prints ``result.lines()``).
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import layerkv.constants as constants
import layerkv.engine as engine
import layerkv.interpreter._commands as _commands
import layerkv.interpreter._statement as _statement

if _typing.TYPE_CHECKING:
    import layerkv.logging as kv_logging

_logger = _logging.getLogger(__name__)

ERROR_MESSAGES: dict[engine.ErrorKind | _statement.StatementErrorKind, str] = {
    _statement.StatementErrorKind.EMPTY_STATEMENT: constants.MESSAGE_EMPTY_STATEMENT,
    _statement.StatementErrorKind.INVALID_COMMAND: constants.MESSAGE_INVALID_COMMAND,
    _statement.StatementErrorKind.INVALID_ARGUMENT_COUNT: constants.MESSAGE_INVALID_ARGUMENT_COUNT,
    engine.ErrorKind.KEY_NOT_FOUND: constants.MESSAGE_KEY_NOT_FOUND,
    engine.ErrorKind.NO_ACTIVE_TRANSACTION: constants.MESSAGE_NO_ACTIVE_TRANSACTION,
}
"""User-facing text for every error kind."""


@_dataclasses.dataclass(frozen=True)
class StatementResult:
    """
    Outcome of one statement.

    Attributes:
        statement: The input line, stripped.
        output: Text produced by the command, or None.
        error: Error kind if the statement failed, else None.
        ended: True when END ran and the loop should stop.
    """

    statement: str
    output: str | None = None
    error: engine.ErrorKind | _statement.StatementErrorKind | None = None
    ended: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def skipped(self) -> bool:
        """Blank lines are skipped without any output."""
        return self.error is _statement.StatementErrorKind.EMPTY_STATEMENT

    @property
    def message(self) -> str | None:
        if self.error is None:
            return None
        return ERROR_MESSAGES[self.error]

    def lines(self) -> list[str]:
        """Lines to print for this result, error first."""
        if self.skipped:
            return []
        lines: list[str] = []
        if self.message:
            lines.append(self.message)
        if self.output:
            lines.append(self.output)
        return lines


class Interpreter:
    """
    Executes statements against a store, one line at a time.

    Args:
        store: The store to run against. A fresh Store is created if omitted.
        null_literal: Text GET prints for a key that does not resolve.
        transcript: Optional SessionLogger that records every executed
            statement.
    """

    def __init__(
        self,
        store: engine.Store | None = None,
        *,
        null_literal: str = constants.DEFAULT_NULL_LITERAL,
        transcript: kv_logging.SessionLogger | None = None,
    ) -> None:
        self._store = store if store is not None else engine.Store()
        self._context = _commands.CommandContext(store=self._store, null_literal=null_literal)
        self._transcript = transcript

    @property
    def store(self) -> engine.Store:
        return self._store

    def execute(self, line: str) -> StatementResult:
        """Parse and run one statement."""
        _logger.debug("processing statement: %r", line)
        try:
            statement = _statement.parse_statement(line)
            command = self._resolve(statement)
        except _statement.StatementError as e:
            if e.kind is not _statement.StatementErrorKind.EMPTY_STATEMENT:
                _logger.info("rejected statement: %s", e)
            result = StatementResult(statement=line.strip(), error=e.kind)
            self._record(result)
            return result

        try:
            output = command.handler(self._context, statement.args)
        except engine.StoreError as e:
            _logger.debug("%s failed: %s", command.name, e)
            result = StatementResult(statement=statement.text, error=e.kind)
        else:
            result = StatementResult(
                statement=statement.text,
                output=output,
                ended=command.ends_session,
            )

        if _logger.isEnabledFor(_logging.DEBUG):
            _logger.debug("store layers: %r", self._store.layers())
        self._record(result)
        return result

    def execute_many(self, lines: _typing.Iterable[str]) -> list[StatementResult]:
        """Run statements in order, stopping after END. Blank lines are dropped."""
        results: list[StatementResult] = []
        for line in lines:
            result = self.execute(line)
            if result.skipped:
                continue
            results.append(result)
            if result.ended:
                break
        return results

    def _resolve(self, statement: _statement.Statement) -> _commands.Command:
        command = _commands.COMMANDS.get(statement.command)
        if command is None:
            raise _statement.StatementError(
                _statement.StatementErrorKind.INVALID_COMMAND,
                statement.text,
                f"unknown command {statement.command!r}",
            )
        if len(statement.args) != command.arity:
            raise _statement.StatementError(
                _statement.StatementErrorKind.INVALID_ARGUMENT_COUNT,
                statement.text,
                f"{command.name} takes {command.arity}, got {len(statement.args)}",
            )
        return command

    def _record(self, result: StatementResult) -> None:
        if self._transcript is None or result.skipped:
            return
        self._transcript.log_statement(result, depth=self._store.depth)

"""
Statement parsing.

A statement is one line of text: a command name followed by arguments,
separated by single spaces. Parsing trims the line, splits on " " (so
doubled spaces yield empty arguments) and upper-cases the command name.
Keys and values keep their case.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum


class StatementErrorKind(_enum.Enum):
    """Ways a statement can be rejected before it reaches the store."""

    EMPTY_STATEMENT = "empty_statement"
    INVALID_COMMAND = "invalid_command"
    INVALID_ARGUMENT_COUNT = "invalid_argument_count"


class StatementError(Exception):
    """A statement was rejected by the parser or the command table."""

    def __init__(self, kind: StatementErrorKind, statement: str, detail: str = "") -> None:
        self.kind = kind
        self.statement = statement
        self.detail = detail
        message = f"{kind.value}: {statement!r}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


@_dataclasses.dataclass(frozen=True)
class Statement:
    """A tokenized statement."""

    command: str
    args: tuple[str, ...] = ()
    text: str = ""


def parse_statement(line: str) -> Statement:
    """
    Split a line into a command name and its arguments.

    Args:
        line: Raw input line (a trailing newline is fine).

    Returns:
        The parsed Statement with an upper-cased command. Whether the
        command exists is checked later, against the command table.

    Raises:
        StatementError: EMPTY_STATEMENT if the line is blank.
    """
    text = line.strip()
    if not text:
        raise StatementError(StatementErrorKind.EMPTY_STATEMENT, line)

    command, *args = text.split(" ")
    return Statement(command=command.upper(), args=tuple(args), text=text)

"""
Statement interpreter for layerkv.

Tokenizes one statement per line, checks it against the command table,
runs it against a Store and returns a tagged StatementResult.
"""

from layerkv.interpreter._commands import COMMANDS, Command, CommandContext
from layerkv.interpreter._interpreter import ERROR_MESSAGES, Interpreter, StatementResult
from layerkv.interpreter._statement import (
    Statement,
    StatementError,
    StatementErrorKind,
    parse_statement,
)

__all__ = [
    "COMMANDS",
    "Command",
    "CommandContext",
    "ERROR_MESSAGES",
    "Interpreter",
    "Statement",
    "StatementError",
    "StatementErrorKind",
    "StatementResult",
    "parse_statement",
]

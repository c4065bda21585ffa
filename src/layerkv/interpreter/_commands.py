"""
Command table: command name -> handler with a fixed argument count.

Handlers receive the CommandContext and the statement's arguments, call the
store, and return the text to print (or None when there is nothing to
print). Engine errors propagate to the interpreter, which renders them.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import layerkv.constants as constants
import layerkv.engine as engine


@_dataclasses.dataclass
class CommandContext:
    """What a handler may touch while running a command."""

    store: engine.Store
    null_literal: str = constants.DEFAULT_NULL_LITERAL


Handler: _typing.TypeAlias = _typing.Callable[[CommandContext, tuple[str, ...]], str | None]


@_dataclasses.dataclass(frozen=True)
class Command:
    """A named command with its handler and required argument count."""

    name: str
    arity: int
    handler: Handler
    ends_session: bool = False
    """True for END: the loop stops after this command succeeds."""


def _handle_set(ctx: CommandContext, args: tuple[str, ...]) -> None:
    key, value = args
    ctx.store.set(key, value)


def _handle_get(ctx: CommandContext, args: tuple[str, ...]) -> str:
    (key,) = args
    try:
        return ctx.store.get(key)
    except engine.KeyNotFoundError:
        return ctx.null_literal


def _handle_delete(ctx: CommandContext, args: tuple[str, ...]) -> None:
    (key,) = args
    ctx.store.delete(key)


def _handle_count(ctx: CommandContext, args: tuple[str, ...]) -> str:
    (value,) = args
    return str(ctx.store.count(value))


def _handle_begin(ctx: CommandContext, args: tuple[str, ...]) -> None:
    ctx.store.begin()


def _handle_rollback(ctx: CommandContext, args: tuple[str, ...]) -> None:
    ctx.store.rollback()


def _handle_commit(ctx: CommandContext, args: tuple[str, ...]) -> None:
    ctx.store.commit()


def _handle_end(ctx: CommandContext, args: tuple[str, ...]) -> None:
    # Whether the process exits is the caller's decision; the data goes either way
    ctx.store.reset()


COMMANDS: dict[str, Command] = {
    command.name: command
    for command in (
        Command("SET", 2, _handle_set),
        Command("GET", 1, _handle_get),
        Command("DELETE", 1, _handle_delete),
        Command("COUNT", 1, _handle_count),
        Command("BEGIN", 0, _handle_begin),
        Command("ROLLBACK", 0, _handle_rollback),
        Command("COMMIT", 0, _handle_commit),
        Command("END", 0, _handle_end, ends_session=True),
    )
}
"""Every supported command, keyed by upper-case name."""

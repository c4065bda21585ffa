"""
Shared constants for layerkv.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Statement loop defaults
DEFAULT_PROMPT = ">> "
"""Prompt printed before each statement in interactive mode."""

DEFAULT_NULL_LITERAL = "NULL"
"""Printed by GET when the key does not resolve."""

# Engine defaults
DEFAULT_COMMIT_POLICY = "root"
"""COMMIT collapses every open transaction into the root."""

# Logging defaults
DEFAULT_LOG_LEVEL = "WARNING"
"""Level for the layerkv logger when nothing else is configured."""

DEFAULT_TRANSCRIPT_DIR = "/tmp/layerkv-logs"
"""Directory for JSONL session transcripts when no path is given."""

# Messages printed for rejected statements and engine errors
MESSAGE_EMPTY_STATEMENT = "EMPTY STATEMENT PROVIDED"
MESSAGE_INVALID_COMMAND = "INVALID COMMAND"
MESSAGE_INVALID_ARGUMENT_COUNT = "INVALID NUMBER OF ARGUMENTS PROVIDED"
MESSAGE_KEY_NOT_FOUND = "KEY NOT FOUND"
MESSAGE_NO_ACTIVE_TRANSACTION = "TRANSACTION NOT FOUND"

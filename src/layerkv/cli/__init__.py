"""
CLI module for layerkv.

Provides the command-line interface using Click.
"""

from layerkv.cli.main import cli, main

__all__ = ["main", "cli"]

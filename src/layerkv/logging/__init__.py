"""
Logging for layerkv.

Provides stderr diagnostics setup and JSONL session transcripts.
"""

from layerkv.logging.session_logger import SessionLogger
from layerkv.logging.setup import LOGGER_NAME, configure_logging

__all__ = ["LOGGER_NAME", "SessionLogger", "configure_logging"]

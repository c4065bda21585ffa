"""
Session transcript logger for layerkv.

Logs every executed statement to a JSONL file for debugging and auditing.
The transcript is write-only: it is never replayed into a store.
"""

from __future__ import annotations

import datetime as _datetime
import json as _json
import pathlib as _pathlib
import typing as _typing

import layerkv.constants as constants

if _typing.TYPE_CHECKING:
    import layerkv.interpreter as interpreter


class SessionLogger:
    """
    Logs session events to a JSONL file.

    Each line in the file is a JSON object representing an event:
    - session_start: Session metadata (commit policy, timestamp)
    - statement: One executed statement with its output and error kind
    - session_end: Session completion with statement totals

    Usage:
        logger = SessionLogger(log_dir="/tmp", commit_policy="root")
        logger.log_statement(result, depth=0)
        logger.close()
    """

    def __init__(
        self,
        *,
        log_dir: _pathlib.Path | str | None = None,
        log_file: _pathlib.Path | str | None = None,
        commit_policy: str = constants.DEFAULT_COMMIT_POLICY,
        enabled: bool = True,
    ) -> None:
        """
        Initialize the session logger.

        Args:
            log_dir: Directory for transcript files (default: /tmp/layerkv-logs).
            log_file: Explicit transcript path (overrides log_dir + auto name).
            commit_policy: Commit policy of the store being logged.
            enabled: Whether logging is enabled.
        """
        self._enabled = enabled
        self._file: _typing.TextIO | None = None
        self._file_path: _pathlib.Path | None = None
        self._session_id = _datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        self._event_count = 0
        self._statement_count = 0
        self._error_count = 0

        if not enabled:
            return

        if log_file:
            self._file_path = _pathlib.Path(log_file)
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
        else:
            base_dir = _pathlib.Path(log_dir) if log_dir else _pathlib.Path(
                constants.DEFAULT_TRANSCRIPT_DIR
            )
            base_dir.mkdir(parents=True, exist_ok=True)
            self._file_path = base_dir / f"layerkv_{self._session_id}.jsonl"

        # Held as instance state, closed in close()
        self._file = open(self._file_path, "w", encoding="utf-8")  # noqa: SIM115

        self._write_event(
            "session_start",
            {
                "session_id": self._session_id,
                "commit_policy": commit_policy,
            },
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def file_path(self) -> _pathlib.Path | None:
        """Path of the transcript file, or None when disabled."""
        return self._file_path

    @property
    def session_id(self) -> str:
        return self._session_id

    def _write_event(
        self,
        event_type: str,
        data: dict[str, _typing.Any],
    ) -> None:
        """Write an event to the transcript."""
        if not self._enabled or not self._file:
            return

        self._event_count += 1
        event = {
            "timestamp": _datetime.datetime.now().isoformat(),
            "event_number": self._event_count,
            "event_type": event_type,
            **data,
        }

        try:
            self._file.write(_json.dumps(event, default=str) + "\n")
            self._file.flush()
        except OSError:
            # A broken transcript must not stop the statement loop
            pass

    def log_statement(self, result: interpreter.StatementResult, *, depth: int) -> None:
        """Log one executed statement and the depth the store is left at."""
        self._statement_count += 1
        if result.error is not None:
            self._error_count += 1
        self._write_event(
            "statement",
            {
                "statement": result.statement,
                "output": result.output,
                "error": result.error.value if result.error is not None else None,
                "depth": depth,
            },
        )

    def close(self) -> None:
        """Write session_end and close the file. Safe to call twice."""
        if self._file is None:
            return
        self._write_event(
            "session_end",
            {
                "statements": self._statement_count,
                "errors": self._error_count,
            },
        )
        self._file.close()
        self._file = None

    def __enter__(self) -> SessionLogger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

"""JSONL logging for raidctl commands."""

import json
import os
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, TextIO


# Log level ordering
LOG_LEVELS = {"debug": 0, "info": 1, "warning": 2, "error": 3}

# Levels that are also shown to the operator
ECHO_LEVELS = {"warning", "error"}

# Entry fields that extra data can't replace
RESERVED_FIELDS = ("timestamp", "level", "command", "message")


def get_default_log_dir() -> Path:
    """Base directory used when no log_dir is configured."""
    home = Path(os.environ.get("HOME", "/tmp"))
    return home / "var" / "log" / "raidctl"


def get_log_path(command: str, base_path: Path | None = None) -> Path:
    """
    Get the log file path for a command.

    Args:
        command: Name of the raidctl command (e.g. reboot)
        base_path: Base directory for logs (default: ~/var/log/raidctl)

    Returns:
        Path to the log file: {base}/{date}/{command}.jsonl
    """
    if base_path is None:
        base_path = get_default_log_dir()

    today = date.today().isoformat()
    return base_path / today / f"{command}.jsonl"


class ScriptLogger:
    """
    JSONL logger for a raidctl command.

    Writes structured log entries to a JSONL file. Warnings and errors are
    echoed to ``echo`` (stderr by default) so the operator sees them too.
    """

    def __init__(
        self,
        command: str,
        log_path: Path | None = None,
        echo: TextIO | None = None,
    ):
        """
        Initialize logger.

        Args:
            command: Name of the command being logged
            log_path: Path to log file (default: auto-generated)
            echo: Stream for warning/error echo (default: sys.stderr)
        """
        self.command = command
        self.log_path = log_path or get_log_path(command)
        self.echo = echo
        self._file = None
        self._disabled = False

    def _ensure_file(self) -> bool:
        """Ensure log file is open. Returns False if logging is unavailable."""
        if self._disabled:
            return False
        if self._file is None:
            try:
                self.log_path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self.log_path, "a")
            except OSError as e:
                self._disabled = True
                print(f"Logging disabled, cannot open {self.log_path}: {e}", file=self._echo_stream())
                return False
        return True

    def _echo_stream(self) -> TextIO:
        return self.echo if self.echo is not None else sys.stderr

    def _log(self, level: str, message: str, /, **extra: Any) -> None:
        """Write a log entry."""
        if level in ECHO_LEVELS:
            print(message, file=self._echo_stream())

        if not self._ensure_file():
            return
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "command": self.command,
            "message": message,
        }
        entry.update((k, v) for k, v in extra.items() if k not in RESERVED_FIELDS)
        self._file.write(json.dumps(entry, default=str) + "\n")
        self._file.flush()

    def debug(self, message: str, /, **extra: Any) -> None:
        """Log debug message."""
        self._log("debug", message, **extra)

    def info(self, message: str, /, **extra: Any) -> None:
        """Log info message."""
        self._log("info", message, **extra)

    def warning(self, message: str, /, **extra: Any) -> None:
        """Log warning message."""
        self._log("warning", message, **extra)

    def error(self, message: str, /, **extra: Any) -> None:
        """Log error message."""
        self._log("error", message, **extra)

    def close(self) -> None:
        """Close the log file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "ScriptLogger":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


def query_logs(
    base_path: Path,
    command: str,
    log_date: date | None = None,
    min_level: str = "debug",
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """
    Query log entries.

    Args:
        base_path: Base directory for logs
        command: Command name to query
        log_date: Date to query (default: today)
        min_level: Minimum log level to include
        limit: Maximum number of entries to return

    Returns:
        List of log entries matching criteria
    """
    if log_date is None:
        log_date = date.today()

    log_file = base_path / log_date.isoformat() / f"{command}.jsonl"

    if not log_file.exists():
        return []

    min_level_num = LOG_LEVELS.get(min_level, 0)
    results = []

    with open(log_file) as f:
        for line in f:
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                continue
            entry_level = LOG_LEVELS.get(entry.get("level", "debug"), 0)
            if entry_level < min_level_num:
                continue
            if limit is not None and len(results) >= limit:
                break
            results.append(entry)

    return results

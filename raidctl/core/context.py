"""Execution context for testability."""

import subprocess
import time
from datetime import datetime
from pathlib import Path


class Context:
    """
    Wraps external calls for testability.

    In production: touches the real kernel files and runs real commands
    In tests: can be replaced with MockContext
    """

    def run(
        self,
        cmd: list[str],
        check: bool = False,
        timeout: int | None = 60,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        """
        Run a command and return result.

        Args:
            cmd: Command and arguments as list
            check: Raise on non-zero exit code
            timeout: Timeout in seconds
            **kwargs: Additional subprocess.run arguments

        Returns:
            CompletedProcess with stdout, stderr, returncode
        """
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=check,
            timeout=timeout,
            **kwargs,
        )

    def read_file(self, path: str) -> str:
        """Read file contents. Undecodable bytes become U+FFFD."""
        return Path(path).read_text(encoding="utf-8", errors="replace")

    def write_file(self, path: str, content: str) -> None:
        """Overwrite file contents."""
        Path(path).write_text(content)

    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        time.sleep(seconds)

    def now(self) -> datetime:
        """Current local time."""
        return datetime.now().astimezone()

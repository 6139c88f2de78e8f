"""Shared test fixtures."""

import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path for package imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FIXED_NOW = datetime(2024, 3, 2, 4, 5, 6, tzinfo=timezone.utc)


class MockContext:
    """Mock Context for testing without touching kernel files.

    file_contents values may be:
      - a string, returned on every read
      - an exception instance, raised on read
      - a list of the above, consumed one per read; the last item repeats
    """

    def __init__(
        self,
        command_outputs: dict[tuple, str | Exception] | None = None,
        file_contents: dict[str, object] | None = None,
        unwritable: list[str] | None = None,
    ):
        self.command_outputs = command_outputs or {}
        self.file_contents = {
            path: list(value) if isinstance(value, list) else value
            for path, value in (file_contents or {}).items()
        }
        self.unwritable = set(unwritable or [])
        self.commands_run: list[list[str]] = []
        self.reads: list[str] = []
        self.writes: list[tuple[str, str]] = []
        self.sleeps: list[float] = []

    def run(
        self,
        cmd: list[str],
        check: bool = False,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        """Return mocked command output."""
        self.commands_run.append(cmd)
        key = tuple(cmd)
        if key not in self.command_outputs:
            raise KeyError(f"No mock output for command: {cmd}")

        output = self.command_outputs[key]
        if isinstance(output, Exception):
            raise output

        if isinstance(output, subprocess.CompletedProcess):
            if check and output.returncode != 0:
                raise subprocess.CalledProcessError(
                    output.returncode, cmd, output.stdout, output.stderr
                )
            return output

        return subprocess.CompletedProcess(
            cmd,
            returncode=0,
            stdout=output,
            stderr="",
        )

    def read_file(self, path: str) -> str:
        """Return mocked file content."""
        self.reads.append(path)
        if path not in self.file_contents:
            raise FileNotFoundError(f"No mock content for: {path}")

        value = self.file_contents[path]
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, Exception):
            raise value
        return value

    def write_file(self, path: str, content: str) -> None:
        """Record a write, or fail for paths marked unwritable."""
        if path in self.unwritable:
            raise PermissionError(13, "Permission denied", path)
        self.writes.append((path, content))
        self.file_contents[path] = content

    def sleep(self, seconds: float) -> None:
        """Record the sleep instead of blocking."""
        self.sleeps.append(seconds)

    def now(self) -> datetime:
        """Fixed timestamp."""
        return FIXED_NOW


@pytest.fixture
def mock_context():
    """Factory fixture for creating MockContext instances."""
    def _create(**kwargs) -> MockContext:
        return MockContext(**kwargs)
    return _create


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config lookups and log files inside the test's tmp dir."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def load_fixture(category: str, name: str) -> str:
    """Load a fixture file by category and name."""
    fixture_path = FIXTURES_DIR / category / name
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture not found: {fixture_path}")
    return fixture_path.read_text()

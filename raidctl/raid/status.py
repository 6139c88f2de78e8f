"""
Parse /proc/mdstat into the facts raidctl acts on.

Only three things are extracted: how many lines mention a check, how far
along the progress bar of the first check/resync line is, and the
``finish=`` estimate. Anything the kernel prints that doesn't match is
reported as missing (None), never as an error.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from raidctl.lib.filesystem import read_file

if TYPE_CHECKING:
    from raidctl.core.context import Context


MDSTAT_PATH = "/proc/mdstat"

CHECK_MARKER = "check"
PROGRESS_MARKERS = ("check", "resync")

# Progress bar: "[=====>..............]". Empty brackets are matched too so
# they can be rejected explicitly instead of falling through to a later line.
PROGRESS_BAR_RE = re.compile(r"\[([=>.]*)\]")
FINISH_RE = re.compile(r"finish=(\S+)")


@dataclass(frozen=True)
class StatusSnapshot:
    """Facts derived from one read of the status file."""

    active_check_count: int = 0
    progress_percent: float | None = None
    time_remaining: str | None = None

    @property
    def checking(self) -> bool:
        """True if any check is active."""
        return self.active_check_count > 0


def count_checks(content: str) -> int:
    """Number of lines containing the substring "check"."""
    return sum(1 for line in content.splitlines() if CHECK_MARKER in line)


def parse_progress(content: str) -> float | None:
    """
    Progress of the first check/resync line that carries a progress bar.

    Returns:
        Percentage (completed units / bar length * 100), or None when no bar
        is found or the bar is empty.
    """
    for line in content.splitlines():
        if not any(marker in line for marker in PROGRESS_MARKERS):
            continue
        match = PROGRESS_BAR_RE.search(line)
        if match is None:
            continue

        bar = match.group(1)
        if not bar:
            return None
        completed = sum(1 for ch in bar if ch in "=>")
        return completed / len(bar) * 100
    return None


def parse_time_remaining(content: str) -> str | None:
    """Token after ``finish=`` on the first line that has one, e.g. "37.2min"."""
    for line in content.splitlines():
        if "finish" not in line:
            continue
        match = FINISH_RE.search(line)
        if match:
            return match.group(1)
    return None


def parse_status(content: str) -> StatusSnapshot:
    """Build a snapshot from status file text."""
    return StatusSnapshot(
        active_check_count=count_checks(content),
        progress_percent=parse_progress(content),
        time_remaining=parse_time_remaining(content),
    )


def read_status(
    path: str = MDSTAT_PATH,
    context: "Context | None" = None,
) -> StatusSnapshot:
    """
    Read and parse the status file.

    Raises:
        FileError: If the file can't be read
    """
    return parse_status(read_file(path, context=context))

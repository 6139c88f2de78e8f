"""Tests for the wait-then-reboot loop."""

import io
import json
import subprocess

import pytest

from raidctl.core.logging import ScriptLogger
from raidctl.lib.filesystem import FileError
from raidctl.lib.process import CommandError
from raidctl.raid.status import MDSTAT_PATH
from raidctl.raid.waiter import (
    CLEAR_SCREEN,
    HISTORY_LIMIT,
    POLL_INTERVAL,
    READ_ERROR_BACKOFF,
    LoopState,
    RebootWaiter,
)

IDLE = "md0 : active raid1 sda1[0] sdb1[1]\n      976630464 blocks [2/2] [UU]\n"
CHECKING = (
    "md0 : active raid1 sda1[0] sdb1[1]\n"
    "      976630464 blocks [2/2] [UU]\n"
    "      [====>...............]  check = 21.0% (1/5) finish=37.2min speed=1000K/sec\n"
)

REBOOT_OK = {("reboot",): ""}


@pytest.fixture
def logger(tmp_path):
    echo = io.StringIO()
    with ScriptLogger("reboot", log_path=tmp_path / "reboot.jsonl", echo=echo) as log:
        yield log


def make_waiter(ctx, logger, clear_screen=False):
    return RebootWaiter(ctx, logger, stream=io.StringIO(), clear_screen=clear_screen)


class TestRebootWaiter:
    """Tests for RebootWaiter."""

    def test_two_active_reads_then_idle(self, mock_context, logger):
        """Active, active, idle: two long sleeps, a confirmatory read, reboot."""
        ctx = mock_context(
            file_contents={MDSTAT_PATH: [CHECKING, CHECKING, IDLE, IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        waiter.run()

        assert ctx.sleeps == [POLL_INTERVAL, POLL_INTERVAL]
        assert ctx.reads == [MDSTAT_PATH] * 4
        assert ctx.commands_run == [["reboot"]]
        assert list(waiter.history) == [
            LoopState.POLLING,
            LoopState.IDLE,
            LoopState.REBOOTING,
        ]

    def test_already_idle_reboots_without_sleeping(self, mock_context, logger):
        ctx = mock_context(file_contents={MDSTAT_PATH: IDLE}, command_outputs=REBOOT_OK)
        waiter = make_waiter(ctx, logger)

        waiter.run()

        assert ctx.sleeps == []
        assert len(ctx.reads) == 2
        assert ctx.commands_run == [["reboot"]]
        assert "Rebooting" in waiter.stream.getvalue()

    def test_read_error_backs_off_and_retries(self, mock_context, logger):
        """Read failures while polling sleep the short backoff and retry."""
        ctx = mock_context(
            file_contents={MDSTAT_PATH: [OSError(5, "Input/output error"), OSError(5, "Input/output error"), IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        waiter.run()

        assert ctx.sleeps == [READ_ERROR_BACKOFF, READ_ERROR_BACKOFF]
        assert READ_ERROR_BACKOFF < POLL_INTERVAL
        assert list(waiter.history)[:4] == [
            LoopState.POLLING,
            LoopState.READ_ERROR,
            LoopState.POLLING,
            LoopState.READ_ERROR,
        ]
        assert ctx.commands_run == [["reboot"]]
        assert "Error checking RAID status" in logger.echo.getvalue()

    def test_undecodable_read_is_retried(self, mock_context, logger):
        """A decode failure while polling is a read error, not a crash."""
        bad = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        ctx = mock_context(
            file_contents={MDSTAT_PATH: [bad, IDLE, IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        waiter.run()

        assert ctx.sleeps == [READ_ERROR_BACKOFF]
        assert ctx.commands_run == [["reboot"]]
        assert "Cannot decode" in logger.echo.getvalue()

    def test_long_check_keeps_history_bounded(self, mock_context, logger):
        """Many polls of one running check record a single transition."""
        ctx = mock_context(
            file_contents={MDSTAT_PATH: [CHECKING] * 500 + [IDLE, IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        waiter.run()

        assert len(ctx.sleeps) == 500
        assert list(waiter.history) == [
            LoopState.POLLING,
            LoopState.IDLE,
            LoopState.REBOOTING,
        ]

    def test_flapping_reads_keep_history_capped(self, mock_context, logger):
        """Alternating failures never grow history past its limit."""
        failures = [OSError(5, "Input/output error")] * (HISTORY_LIMIT * 2)
        ctx = mock_context(
            file_contents={MDSTAT_PATH: failures + [IDLE, IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        waiter.run()

        assert len(ctx.sleeps) == HISTORY_LIMIT * 2
        assert len(waiter.history) == HISTORY_LIMIT
        assert waiter.history[-1] is LoopState.REBOOTING

    def test_confirmatory_read_failure_is_fatal(self, mock_context, logger):
        """A failed re-check aborts instead of rebooting or polling again."""
        ctx = mock_context(
            file_contents={MDSTAT_PATH: [IDLE, PermissionError(13, "Permission denied")]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        with pytest.raises(FileError):
            waiter.run()

        assert ctx.commands_run == []
        assert ctx.sleeps == []
        assert waiter.history[-1] is LoopState.IDLE

    def test_check_restarted_before_reboot(self, mock_context, logger):
        """A check seen by the re-check sends the loop back to polling."""
        ctx = mock_context(
            file_contents={MDSTAT_PATH: [IDLE, CHECKING, IDLE, IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        waiter.run()

        assert list(waiter.history) == [
            LoopState.POLLING,
            LoopState.IDLE,
            LoopState.POLLING,
            LoopState.IDLE,
            LoopState.REBOOTING,
        ]
        assert ctx.commands_run == [["reboot"]]
        assert "started again" in logger.echo.getvalue()

    def test_reboot_failure(self, mock_context, logger):
        failed = subprocess.CompletedProcess(["reboot"], 1, "", "Failed to talk to init daemon.")
        ctx = mock_context(
            file_contents={MDSTAT_PATH: IDLE},
            command_outputs={("reboot",): failed},
        )

        with pytest.raises(CommandError, match="init daemon"):
            make_waiter(ctx, logger).run()

    def test_shows_status_while_waiting(self, mock_context, logger):
        """After each long sleep the screen shows time, estimate and bar."""
        ctx = mock_context(
            file_contents={MDSTAT_PATH: [CHECKING, IDLE, IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger, clear_screen=True)

        waiter.run()

        screen = waiter.stream.getvalue()
        assert screen.startswith(CLEAR_SCREEN)
        assert "Sat Mar 02 04:05:06 UTC 2024" in screen
        assert "Reboot will occur in 37.2min" in screen
        assert "] 25.0%" in screen

    def test_no_estimate_message(self, mock_context, logger):
        ctx = mock_context(
            file_contents={MDSTAT_PATH: ["check pending\n", IDLE, IDLE]},
            command_outputs=REBOOT_OK,
        )
        waiter = make_waiter(ctx, logger)

        waiter.run()

        screen = waiter.stream.getvalue()
        assert CLEAR_SCREEN not in screen
        assert "Reboot will occur when RAID check completes" in screen

    def test_logs_reboot(self, mock_context, logger):
        ctx = mock_context(file_contents={MDSTAT_PATH: IDLE}, command_outputs=REBOOT_OK)

        make_waiter(ctx, logger).run()
        logger.close()

        entries = [json.loads(line) for line in logger.log_path.read_text().splitlines()]
        assert [e["message"] for e in entries] == ["Waiting for raid check to finish", "Rebooting"]

"""Wait for RAID checks to finish, then reboot."""

import sys
from collections import deque
from enum import Enum
from typing import TYPE_CHECKING, TextIO

from raidctl.lib.filesystem import FileError
from raidctl.lib.process import run_command
from raidctl.raid.render import render_progress_bar
from raidctl.raid.status import MDSTAT_PATH, StatusSnapshot, read_status

if TYPE_CHECKING:
    from raidctl.core.context import Context
    from raidctl.core.logging import ScriptLogger


POLL_INTERVAL = 100
READ_ERROR_BACKOFF = 10
REBOOT_COMMAND = ["reboot"]

# State transitions kept for inspection
HISTORY_LIMIT = 64

CLEAR_SCREEN = "\033[2J\033[H"
TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


class LoopState(Enum):
    POLLING = "polling"
    READ_ERROR = "read_error"
    IDLE = "idle"
    REBOOTING = "rebooting"


class RebootWaiter:
    """
    Poll the status file until no check is running, then reboot.

    Read failures while polling are retried forever after a short backoff.
    Once idle is seen, the status is read one more time; if that read fails
    the error propagates instead of rebooting on unknown state.
    """

    def __init__(
        self,
        context: "Context",
        logger: "ScriptLogger",
        stream: TextIO | None = None,
        clear_screen: bool = True,
        status_path: str = MDSTAT_PATH,
        poll_interval: float = POLL_INTERVAL,
        backoff: float = READ_ERROR_BACKOFF,
    ):
        self.context = context
        self.logger = logger
        self.stream = stream if stream is not None else sys.stdout
        self.clear_screen = clear_screen
        self.status_path = status_path
        self.poll_interval = poll_interval
        self.backoff = backoff
        self.history: deque[LoopState] = deque(maxlen=HISTORY_LIMIT)

    def run(self) -> None:
        """
        Block until the host is rebooted.

        Raises:
            FileError: If the confirmatory read fails
            CommandError: If the reboot command fails
        """
        self.logger.info("Waiting for raid check to finish")
        state = LoopState.POLLING

        while True:
            if not self.history or self.history[-1] is not state:
                self.history.append(state)

            if state is LoopState.POLLING:
                state = self._poll()
            elif state is LoopState.READ_ERROR:
                self.context.sleep(self.backoff)
                state = LoopState.POLLING
            elif state is LoopState.IDLE:
                state = self._confirm_idle()
            else:
                self._reboot()
                return

    def _poll(self) -> LoopState:
        try:
            snapshot = read_status(self.status_path, context=self.context)
        except FileError as e:
            self.logger.error(f"Error checking RAID status: {e}", path=e.path)
            return LoopState.READ_ERROR

        if not snapshot.checking:
            return LoopState.IDLE

        self.logger.debug(
            "Raid check active",
            active=snapshot.active_check_count,
            progress=snapshot.progress_percent,
            time_remaining=snapshot.time_remaining,
        )
        self.context.sleep(self.poll_interval)
        self._show(snapshot)
        return LoopState.POLLING

    def _confirm_idle(self) -> LoopState:
        snapshot = read_status(self.status_path, context=self.context)
        if snapshot.checking:
            self.logger.warning("Raid check started again, still waiting")
            return LoopState.POLLING
        return LoopState.REBOOTING

    def _reboot(self) -> None:
        print("RAID check complete. Rebooting...", file=self.stream)
        self.logger.info("Rebooting", command=REBOOT_COMMAND)
        run_command(REBOOT_COMMAND, context=self.context, check=True)

    def _show(self, snapshot: StatusSnapshot) -> None:
        """Redraw the waiting screen from the last snapshot read."""
        out = self.stream
        if self.clear_screen:
            print(CLEAR_SCREEN, end="", file=out)
        print(self.context.now().strftime(TIMESTAMP_FORMAT), file=out)
        if snapshot.time_remaining:
            print(f"Reboot will occur in {snapshot.time_remaining}", file=out)
        else:
            print("Reboot will occur when RAID check completes", file=out)
        if snapshot.progress_percent is not None:
            print(render_progress_bar(snapshot.progress_percent), file=out)
        out.flush()

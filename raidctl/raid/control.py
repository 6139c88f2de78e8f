"""Write RAID speed limits and sync actions to kernel control files."""

from enum import Enum
from typing import TYPE_CHECKING

from raidctl.lib.filesystem import read_file, write_file

if TYPE_CHECKING:
    from raidctl.core.context import Context


SPEED_LIMIT_PATH = "/proc/sys/dev/raid/speed_limit_max"
SYNC_ACTION_PATH = "/sys/block/md0/md/sync_action"


class SpeedLevel(Enum):
    """Check speed limits in kB/s per device."""

    NORMAL = "200000"
    HIGH = "2000000"
    LOW = "3000"

    @property
    def label(self) -> str:
        return self.name.lower()


class SyncAction(Enum):
    """Values accepted by sync_action that raidctl uses."""

    CHECK = "check"
    IDLE = "idle"


def set_speed(level: SpeedLevel, context: "Context | None" = None) -> None:
    """
    Write a speed level to the speed limit file.

    Raises:
        FileError: If the control file isn't writable
    """
    write_file(SPEED_LIMIT_PATH, level.value, context=context)


def get_speed(context: "Context | None" = None) -> str:
    """
    Current speed limit as a level name, or the raw value if it isn't one.

    Raises:
        FileError: If the control file can't be read
    """
    value = read_file(SPEED_LIMIT_PATH, context=context).strip()
    for level in SpeedLevel:
        if level.value == value:
            return level.label
    return value


def set_sync_action(action: SyncAction, context: "Context | None" = None) -> None:
    """
    Start or stop a check.

    Raises:
        FileError: If the control file isn't writable
    """
    write_file(SYNC_ACTION_PATH, action.value, context=context)

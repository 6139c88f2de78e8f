"""RAID status parsing, control files and the reboot wait loop."""

from raidctl.raid.control import SpeedLevel, SyncAction, get_speed, set_speed, set_sync_action
from raidctl.raid.render import render_progress_bar
from raidctl.raid.status import StatusSnapshot, parse_status, read_status
from raidctl.raid.waiter import LoopState, RebootWaiter

__all__ = [
    "LoopState",
    "RebootWaiter",
    "SpeedLevel",
    "StatusSnapshot",
    "SyncAction",
    "get_speed",
    "parse_status",
    "read_status",
    "render_progress_bar",
    "set_speed",
    "set_sync_action",
]

"""Text rendering for status output."""

from raidctl.raid.status import StatusSnapshot

BAR_WIDTH = 40
BOX_WIDTH = 28

FILL_CHAR = "="
TRANSITION_CHAR = ">"
FILLER_CHAR = "."

COMMAND_HELP = [
    ("check", "Returns >0 if the raid is checking"),
    ("progress", "Show check progress and time left"),
    ("status", "Show status only"),
    ("normal", "Set speed normal"),
    ("high", "Set speed high, optionally for N minutes"),
    ("low", "Set speed low"),
    ("reboot", "Reboot the machine once the raid check is done"),
    ("forcereboot", "Stop raid check and reboot"),
    ("stop", "Stop raid check"),
    ("start", "Start raid check"),
    ("logs", "Show today's log entries for a command"),
]


def render_progress_bar(percent: float, width: int = BAR_WIDTH) -> str:
    """
    Render a fixed-width progress bar, e.g. "[=====>....] 55.0%".

    The bar always has exactly ``width`` characters between the brackets.
    The transition character is dropped only when the bar is full.
    """
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    percent = min(max(percent, 0.0), 100.0)

    filled = int(width * percent / 100)
    bar = FILL_CHAR * filled
    if filled < width:
        bar += TRANSITION_CHAR
    bar += FILLER_CHAR * (width - len(bar))
    return f"[{bar}] {percent:.1f}%"


def box_line(text: str = "", width: int = BOX_WIDTH) -> str:
    """One bordered line of the status box."""
    inner = width - 4
    return f"# {text:<{inner}} #"


def box_border(width: int = BOX_WIDTH) -> str:
    return "#" * width


def render_status_lines(snapshot: StatusSnapshot | None, speed: str | None) -> list[str]:
    """
    Lines of the status box.

    Args:
        snapshot: Current status, or None if it couldn't be read
        speed: Speed level name or raw value, or None if unreadable
    """
    lines = [box_border()]
    if snapshot is not None and snapshot.checking:
        lines.append(box_line("Currently Checking Raid"))
        if snapshot.time_remaining:
            lines.append(box_line(f"Time left {snapshot.time_remaining}"))
    if speed is not None:
        lines.append(box_line(f"Speed {speed.capitalize()}"))
    lines.append(box_border())
    return lines


def render_help_lines() -> list[str]:
    lines = ["Available commands:"]
    for name, text in COMMAND_HELP:
        lines.append(f"{name:<11} - {text}")
    return lines


def render_progress(snapshot: StatusSnapshot) -> list[str]:
    """Lines for the progress command."""
    if not snapshot.checking:
        return ["no check in progress"]

    lines = []
    if snapshot.progress_percent is not None:
        lines.append(render_progress_bar(snapshot.progress_percent))
    else:
        lines.append("progress unknown")
    if snapshot.time_remaining:
        lines.append(f"Time left: {snapshot.time_remaining}")
    return lines

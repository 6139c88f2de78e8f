"""Command-line interface for raidctl."""

import argparse
import json
import sys

from raidctl import __version__
from raidctl.core.config import get_clear_screen, get_log_dir
from raidctl.core.context import Context
from raidctl.core.logging import LOG_LEVELS, ScriptLogger, get_default_log_dir, get_log_path, query_logs
from raidctl.core.output import Output
from raidctl.lib.filesystem import FileError
from raidctl.lib.process import CommandError
from raidctl.raid.control import SpeedLevel, SyncAction, get_speed, set_speed, set_sync_action
from raidctl.raid.render import render_help_lines, render_progress, render_status_lines
from raidctl.raid.status import read_status
from raidctl.raid.waiter import RebootWaiter

DEFAULT_COMMAND = "status"


def non_negative_int(value: str, what: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid {what} value: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"{what} must not be negative: {number}")
    return number


def minutes_value(value: str) -> int:
    """argparse type for the high command's revert delay."""
    return non_negative_int(value, "minutes")


def limit_value(value: str) -> int:
    """argparse type for the logs entry limit."""
    return non_negative_int(value, "limit")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="raidctl",
        description="Control Linux software RAID check speed and reboot once checks finish",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"raidctl {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("normal", help="Set RAID check to normal speed")
    high_parser = subparsers.add_parser("high", help="Set RAID check to high speed")
    high_parser.add_argument(
        "minutes",
        nargs="?",
        type=minutes_value,
        help="Revert to normal speed after this many minutes",
    )
    subparsers.add_parser("low", help="Set RAID check to low speed")
    subparsers.add_parser("stop", help="Stop RAID check")
    subparsers.add_parser("start", help="Start RAID check")
    subparsers.add_parser("check", help="Print the number of RAID checks in progress")
    subparsers.add_parser("progress", help="Show check progress and time left")
    subparsers.add_parser("reboot", help="Reboot the machine once the RAID check is done")
    subparsers.add_parser("forcereboot", help="Stop RAID check and reboot")

    status_parser = subparsers.add_parser("status", help="Show status only")
    status_parser.add_argument(
        "--format",
        choices=["plain", "json"],
        default="plain",
        help="Output format (default: plain)",
    )

    logs_parser = subparsers.add_parser("logs", help="Show today's log entries for a command")
    logs_parser.add_argument(
        "log_command",
        nargs="?",
        default="reboot",
        metavar="COMMAND",
        help="Command whose log to show (default: reboot)",
    )
    logs_parser.add_argument(
        "--level",
        choices=list(LOG_LEVELS),
        default="info",
        help="Minimum level to show (default: info)",
    )
    logs_parser.add_argument(
        "--limit",
        type=limit_value,
        help="Show at most this many entries",
    )
    logs_parser.add_argument(
        "--format",
        choices=["plain", "json"],
        default="plain",
        help="Output format (default: plain)",
    )

    return parser


def fail(logger: ScriptLogger, doing: str, error: Exception) -> int:
    """Report a fatal error and return the exit code."""
    logger.error(f"Error {doing}: {error}")
    return 1


def _set_speed(level: SpeedLevel, context: Context, logger: ScriptLogger) -> int:
    print(f"Setting raid check to {level.label} speed")
    try:
        set_speed(level, context=context)
    except FileError as e:
        return fail(logger, f"setting {level.label} speed", e)
    logger.info("Speed set", speed=level.label, value=level.value)
    return 0


def cmd_normal(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Set normal speed."""
    return _set_speed(SpeedLevel.NORMAL, context, logger)


def cmd_low(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Set low speed."""
    return _set_speed(SpeedLevel.LOW, context, logger)


def cmd_high(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Set high speed, optionally reverting to normal after a delay."""
    code = _set_speed(SpeedLevel.HIGH, context, logger)
    if code or args.minutes is None:
        return code

    print(f"for {args.minutes} minutes")
    logger.info("Reverting to normal speed later", minutes=args.minutes)
    context.sleep(args.minutes * 60)

    try:
        set_speed(SpeedLevel.NORMAL, context=context)
    except FileError as e:
        return fail(logger, "resetting to normal speed", e)
    print("Raid check back to normal speed")
    logger.info("Speed set", speed=SpeedLevel.NORMAL.label, value=SpeedLevel.NORMAL.value)
    return 0


def cmd_stop(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Stop the running check."""
    print("Stopping raid check")
    try:
        set_sync_action(SyncAction.IDLE, context=context)
    except FileError as e:
        return fail(logger, "stopping raid check", e)
    logger.info("Sync action set", action=SyncAction.IDLE.value)
    return 0


def cmd_start(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Start a check."""
    print("Starting raid check")
    try:
        set_sync_action(SyncAction.CHECK, context=context)
    except FileError as e:
        return fail(logger, "starting raid check", e)
    logger.info("Sync action set", action=SyncAction.CHECK.value)
    return 0


def cmd_check(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Print how many checks are running."""
    try:
        snapshot = read_status(context=context)
    except FileError as e:
        return fail(logger, "checking RAID status", e)
    print(snapshot.active_check_count)
    return 0


def cmd_progress(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Print the progress bar and time estimate."""
    try:
        snapshot = read_status(context=context)
    except FileError as e:
        return fail(logger, "checking RAID status", e)
    for line in render_progress(snapshot):
        print(line)
    return 0


def _wait_and_reboot(context: Context, logger: ScriptLogger) -> int:
    waiter = RebootWaiter(context, logger, clear_screen=get_clear_screen())
    try:
        waiter.run()
    except FileError as e:
        return fail(logger, "reading RAID state before reboot", e)
    except CommandError as e:
        return fail(logger, "executing reboot", e)
    return 0


def cmd_reboot(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Reboot once the check is done."""
    return _wait_and_reboot(context, logger)


def cmd_forcereboot(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Stop the check, then reboot once the array reports idle."""
    print("Stopping raid check")
    try:
        set_sync_action(SyncAction.IDLE, context=context)
    except FileError as e:
        return fail(logger, "stopping raid check", e)
    logger.info("Stopped raid check before reboot")
    return _wait_and_reboot(context, logger)


def _collect_status(context: Context, logger: ScriptLogger, output: Output):
    snapshot = None
    speed = None
    try:
        snapshot = read_status(context=context)
    except FileError as e:
        output.error(str(e))
        logger.error(f"Error checking RAID status: {e}")
    try:
        speed = get_speed(context=context)
    except FileError as e:
        output.error(str(e))
        logger.error(f"Error reading current speed: {e}")
    return snapshot, speed


def cmd_status(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Print status only."""
    output = Output()
    snapshot, speed = _collect_status(context, logger, output)

    if args.format == "json":
        output.emit({
            "active_check_count": snapshot.active_check_count if snapshot else None,
            "progress_percent": snapshot.progress_percent if snapshot else None,
            "time_remaining": snapshot.time_remaining if snapshot else None,
            "speed": speed,
        })
        output.render()
    else:
        for line in render_status_lines(snapshot, speed):
            print(line)

    return 1 if output.errors else 0


def show_overview(context: Context, logger: ScriptLogger) -> int:
    """Status box followed by command help."""
    snapshot, speed = _collect_status(context, logger, Output())
    for line in render_status_lines(snapshot, speed) + render_help_lines():
        print(line)
    return 0


def cmd_logs(args: argparse.Namespace, context: Context, logger: ScriptLogger) -> int:
    """Show today's log entries for a command."""
    base_path = get_log_dir() or get_default_log_dir()
    entries = query_logs(base_path, args.log_command, min_level=args.level, limit=args.limit)

    if not entries:
        print(f"No log entries for {args.log_command} today.")
        return 0

    for entry in entries:
        if args.format == "json":
            print(json.dumps(entry))
        else:
            print(f"{entry.get('timestamp', '')} {entry.get('level', '').upper():7} {entry.get('message', '')}")
    return 0


COMMANDS = {
    "normal": cmd_normal,
    "high": cmd_high,
    "low": cmd_low,
    "stop": cmd_stop,
    "start": cmd_start,
    "check": cmd_check,
    "progress": cmd_progress,
    "reboot": cmd_reboot,
    "forcereboot": cmd_forcereboot,
    "status": cmd_status,
    "logs": cmd_logs,
}


def main(argv: list[str] | None = None, context: Context | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if context is None:
        context = Context()

    name = args.command or DEFAULT_COMMAND
    log_path = get_log_path(name, get_log_dir())

    with ScriptLogger(name, log_path=log_path) as logger:
        if args.command is None:
            return show_overview(context, logger)
        return COMMANDS[args.command](args, context, logger)


if __name__ == "__main__":
    sys.exit(main())

"""Process utilities."""

import subprocess
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from raidctl.core.context import Context


class CommandError(Exception):
    """Error running a command."""

    pass


def run_command(
    cmd: list[str],
    context: "Context | None" = None,
    check: bool = False,
) -> str:
    """
    Run a command and return its output.

    Args:
        cmd: Command and arguments
        context: Execution context (for testing)
        check: Raise on non-zero exit

    Returns:
        Command stdout

    Raises:
        CommandError: If the command can't be started, times out, or
            check=True and it exits non-zero
    """
    if context is None:
        from raidctl.core.context import Context
        context = Context()

    try:
        result = context.run(cmd, check=check)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise CommandError(f"Command failed: {' '.join(cmd)}: {detail}") from e
    except (OSError, subprocess.SubprocessError) as e:
        raise CommandError(f"Command failed: {' '.join(cmd)}: {e}") from e
    return result.stdout

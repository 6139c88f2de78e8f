"""Filesystem utilities for kernel status and control files."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from raidctl.core.context import Context


class FileError(Exception):
    """Error accessing a file."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


def read_file(
    path: str,
    context: "Context | None" = None,
) -> str:
    """
    Read file contents.

    Args:
        path: Path to file
        context: Execution context (for testing)

    Returns:
        File contents

    Raises:
        FileError: If the file can't be read or decoded
    """
    if context is None:
        from raidctl.core.context import Context
        context = Context()

    try:
        return context.read_file(path)
    except FileNotFoundError as e:
        raise FileError(f"File not found: {path}", path) from e
    except OSError as e:
        raise FileError(f"Cannot read {path}: {e.strerror or e}", path) from e
    except UnicodeDecodeError as e:
        raise FileError(f"Cannot decode {path}: {e}", path) from e


def write_file(
    path: str,
    content: str,
    context: "Context | None" = None,
) -> None:
    """
    Overwrite a file with content.

    Args:
        path: Path to file
        content: Literal value to write
        context: Execution context (for testing)

    Raises:
        FileError: If the file can't be written
    """
    if context is None:
        from raidctl.core.context import Context
        context = Context()

    try:
        context.write_file(path, content)
    except OSError as e:
        raise FileError(f"Cannot write {path}: {e.strerror or e}", path) from e

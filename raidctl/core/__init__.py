"""Core raidctl functionality."""

from raidctl.core.config import get_config_value
from raidctl.core.context import Context
from raidctl.core.logging import ScriptLogger, get_log_path, query_logs
from raidctl.core.output import Output

__all__ = [
    "Context",
    "Output",
    "ScriptLogger",
    "get_config_value",
    "get_log_path",
    "query_logs",
]

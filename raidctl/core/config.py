"""Configuration loading with layered overrides."""

from pathlib import Path
from typing import Any

import yaml


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML config file if it exists."""
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_config_value(key: str, default: Any = None) -> Any:
    """Get config value with project -> user -> default precedence."""
    # Project config
    project_config = Path('.raidctl.yaml')
    data = load_config_file(project_config)
    if key in data:
        return data[key]

    # User config
    user_config = Path.home() / '.config' / 'raidctl' / 'config.yaml'
    data = load_config_file(user_config)
    if key in data:
        return data[key]

    return default


def get_log_dir() -> Path | None:
    """Configured log directory, if any."""
    value = get_config_value('log_dir')
    if not value:
        return None
    return Path(str(value)).expanduser()


def get_clear_screen() -> bool:
    """Whether the reboot wait clears the terminal between updates."""
    value = get_config_value('clear_screen', True)
    return value if isinstance(value, bool) else True

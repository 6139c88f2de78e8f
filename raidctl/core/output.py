"""Structured output helper for commands."""

import json
from typing import Any


class Output:
    """Collects command data and errors for JSON output."""

    def __init__(self):
        self.data: dict[str, Any] = {}
        self.errors: list[str] = []

    def emit(self, data: dict[str, Any]) -> None:
        """Store structured output data."""
        self.data.update(data)

    def error(self, message: str) -> None:
        """Record an error message."""
        self.errors.append(message)

    def to_json(self) -> str:
        """Return data (and any errors) as JSON string."""
        payload = dict(self.data)
        if self.errors:
            payload["errors"] = self.errors
        return json.dumps(payload, indent=2, default=str)

    def render(self) -> None:
        """Print output as JSON."""
        print(self.to_json())

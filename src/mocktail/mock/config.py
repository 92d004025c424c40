"""
Mocktail Mock Server Configuration

Dataclass configuration for the mock server, loadable from a dict or a
YAML file.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict

import yaml

LOG_LEVELS = ('critical', 'error', 'warning', 'info', 'debug')


@dataclass
class MockConfig:
    """Configuration for mock server behavior."""

    # Fallback behavior
    fallback_status: int = 404
    fallback_body: str = '{"error": "No mock matched the request"}'

    # Response behavior
    stream_responses: bool = True  # One frame per body chunk; False sends the drained body

    # Logging
    log_level: str = "info"

    # Admin API
    admin_enabled: bool = True
    admin_prefix: str = "/__admin__"

    def __post_init__(self):
        try:
            status = int(self.fallback_status)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid fallback_status: {self.fallback_status!r}") from None
        if not 100 <= status <= 599:
            raise ValueError(f"Invalid fallback_status: {self.fallback_status}")
        self.fallback_status = status
        if self.log_level.lower() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. Expected one of: {', '.join(LOG_LEVELS)}"
            )
        self.log_level = self.log_level.lower()
        if not self.admin_prefix.startswith('/'):
            raise ValueError(f"admin_prefix must start with '/': {self.admin_prefix}")
        self.admin_prefix = self.admin_prefix.rstrip('/')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MockConfig':
        """
        Create config from a dictionary.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'MockConfig':
        """
        Load config from a YAML file.

        The file may hold the settings at top level or under a 'server' key,
        so a single file can carry both settings and a 'mocks' list.
        """
        with open(yaml_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {yaml_path}, got {type(data).__name__}")

        if 'server' in data:
            return cls.from_dict(data['server'] or {})
        return cls.from_dict({k: v for k, v in data.items() if k != 'mocks'})

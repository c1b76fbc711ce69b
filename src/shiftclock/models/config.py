"""Configuration model for shiftclock."""

import os
from dataclasses import dataclass
from typing import Any, Mapping
from zoneinfo import ZoneInfo

ENV_PREFIX = "SHIFTCLOCK_"


@dataclass
class ShiftclockConfig:
    """Runtime configuration for the clock service and its shells."""

    data_file: str = "clockin-data.json"
    timezone: str = "UTC"
    webhook_url: str | None = None
    history_weeks: int = 8
    host: str = "0.0.0.0"
    port: int = 10000

    @property
    def tz(self) -> ZoneInfo:
        """Timezone used for week and month boundaries."""
        return ZoneInfo(self.timezone)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "data_file": self.data_file,
            "timezone": self.timezone,
            "webhook_url": self.webhook_url,
            "history_weeks": self.history_weeks,
            "host": self.host,
            "port": self.port,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShiftclockConfig":
        """Create a ShiftclockConfig from a dictionary."""
        defaults = cls()
        return cls(
            data_file=data.get("data_file", defaults.data_file),
            timezone=data.get("timezone", defaults.timezone),
            webhook_url=data.get("webhook_url") or None,
            history_weeks=int(data.get("history_weeks", defaults.history_weeks)),
            host=data.get("host", defaults.host),
            port=int(data.get("port", defaults.port)),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ShiftclockConfig":
        """Build config from ``SHIFTCLOCK_*`` environment variables.

        ``PORT`` is honoured as a fallback for hosts that inject it.
        """
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        for name in cls().to_dict():
            value = env.get(ENV_PREFIX + name.upper())
            if value is not None:
                data[name] = value
        if "port" not in data and env.get("PORT"):
            data["port"] = env["PORT"]
        return cls.from_dict(data)

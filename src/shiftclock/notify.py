"""Best-effort delivery of clock events to an external log channel."""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

COLOR_CLOCK_IN = 0x57F287
COLOR_BREAK = 0x5865F2
COLOR_CLOCK_OUT = 0xED4245


@dataclass
class Notification:
    """A log-style record of an accepted transition."""

    title: str
    description: str
    color: int
    actor_id: str
    timestamps: dict[str, int] = field(default_factory=dict)

    def to_embed(self) -> dict[str, Any]:
        """Convert to a chat embed payload."""
        return {
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "color": self.color,
            "actor_id": self.actor_id,
            "timestamps": dict(self.timestamps),
        }


class Notifier(Protocol):
    async def send(self, notification: Notification) -> None:
        raise NotImplementedError


class NullNotifier:
    """Notifier used when no log channel is configured."""

    async def send(self, notification: Notification) -> None:
        logger.debug("No log channel configured, dropping %r", notification.title)


class WebhookNotifier:
    """Posts notifications to a chat webhook using httpx.

    Failures are logged and swallowed; a notification that cannot be
    delivered never affects the transition that produced it.
    """

    def __init__(self, url: str, timeout: float = 10.0):
        """Initialize the notifier.

        Args:
            url: Webhook URL accepting ``{"embeds": [...]}`` payloads
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

    async def send(self, notification: Notification) -> None:
        payload = {"embeds": [notification.to_embed()]}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Failed to deliver %r: %s", notification.title, e)
            return

        if response.status_code >= 400:
            logger.warning(
                "Log webhook rejected %r: %s %s",
                notification.title,
                response.status_code,
                response.text[:200],
            )


def build_notifier(webhook_url: str | None) -> Notifier:
    """Pick the notifier for the configured webhook, if any."""
    if webhook_url:
        return WebhookNotifier(webhook_url)
    return NullNotifier()

"""Tests for the log channel notifier."""

import json
import logging

import httpx
import pytest
import respx

from shiftclock.notify import (
    Notification,
    NullNotifier,
    WebhookNotifier,
    build_notifier,
)

WEBHOOK = "https://chat.example.test/api/webhooks/1/token"


@pytest.fixture
def notification() -> Notification:
    return Notification(
        title="Clock In",
        description="<@u1> clocked in.",
        color=0x57F287,
        actor_id="u1",
        timestamps={"clock_in": 0},
    )


class TestWebhookNotifier:
    @respx.mock
    @pytest.mark.asyncio
    async def test_posts_embed(self, notification):
        route = respx.post(WEBHOOK).mock(return_value=httpx.Response(204))

        await WebhookNotifier(WEBHOOK).send(notification)

        assert route.called
        body = json.loads(route.calls[0].request.content)
        assert body == {
            "embeds": [
                {"title": "Clock In", "description": "<@u1> clocked in.", "color": 0x57F287}
            ]
        }

    @respx.mock
    @pytest.mark.asyncio
    async def test_error_status_is_swallowed(self, notification, caplog):
        respx.post(WEBHOOK).mock(return_value=httpx.Response(500, text="boom"))

        with caplog.at_level(logging.WARNING):
            await WebhookNotifier(WEBHOOK).send(notification)

        assert "rejected" in caplog.text

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_error_is_swallowed(self, notification, caplog):
        respx.post(WEBHOOK).mock(side_effect=httpx.ConnectError("unreachable"))

        with caplog.at_level(logging.WARNING):
            await WebhookNotifier(WEBHOOK).send(notification)

        assert "Failed to deliver" in caplog.text


class TestBuildNotifier:
    def test_without_url(self):
        assert isinstance(build_notifier(None), NullNotifier)

    def test_with_url(self):
        notifier = build_notifier(WEBHOOK)
        assert isinstance(notifier, WebhookNotifier)
        assert notifier.url == WEBHOOK

    @pytest.mark.asyncio
    async def test_null_notifier(self, notification):
        await NullNotifier().send(notification)


def test_notification_to_dict(notification):
    assert notification.to_dict() == {
        "title": "Clock In",
        "description": "<@u1> clocked in.",
        "color": 0x57F287,
        "actor_id": "u1",
        "timestamps": {"clock_in": 0},
    }

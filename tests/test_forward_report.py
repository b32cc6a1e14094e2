"""Tests for report parsing, message shape and webhook delivery."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from src.application.use_cases.forward_report import (
    DEFAULT_MENTION,
    ForwardReportUseCase,
    build_report_message,
    parse_report,
)
from src.domain.exceptions import (
    ReportForwardingError,
    ReportValidationError,
    WebhookDeliveryError,
    WebhookNotConfiguredError,
)
from src.infrastructure.notifications.discord_webhook import DiscordWebhookNotifier

WEBHOOK = "https://discord.test/api/webhooks/1/abc"


def _field_names(message: dict) -> list[str]:
    return [f["name"] for f in message["embeds"][0]["fields"]]


def test_parse_report_fills_placeholders():
    report = parse_report({"clientName": "alice", "reportedPlayerName": "bob", "reason": "   "})
    assert report.reason == "No reason provided"
    assert report.server_id == "Unknown"
    assert report.auto_moderated is False


def test_parse_report_keeps_values():
    report = parse_report(
        {
            "clientName": "alice",
            "reportedPlayerName": "bob",
            "reason": "  spamming  ",
            "serverId": 1234,
            "am": True,
        }
    )
    assert report.reason == "spamming"
    assert report.server_id == "1234"
    assert report.auto_moderated is True


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"clientName": "alice"},
        {"reportedPlayerName": "bob"},
        {"clientName": "", "reportedPlayerName": "bob"},
    ],
)
def test_parse_report_requires_both_names(payload):
    with pytest.raises(ReportValidationError):
        parse_report(payload)


def test_message_shape_without_auto_mod():
    message = build_report_message(parse_report({"clientName": "alice", "reportedPlayerName": "bob"}))
    assert message["content"] == DEFAULT_MENTION
    embed = message["embeds"][0]
    assert embed["title"] == "Player Reported: bob"
    assert embed["color"] == 16529667
    assert _field_names(message) == ["Reason", "Reported By", "Server ID"]
    assert all(f["inline"] is True for f in embed["fields"])


@pytest.mark.parametrize("am, has_other", [(True, True), (False, False), ("true", False), (1, False)])
def test_other_field_only_when_am_is_true(am, has_other):
    report = parse_report({"clientName": "a", "reportedPlayerName": "b", "am": am})
    assert ("Other" in _field_names(build_report_message(report))) is has_other


def test_use_case_without_notifier_is_not_configured():
    use_case = ForwardReportUseCase(None)
    with pytest.raises(WebhookNotConfiguredError):
        asyncio.run(use_case.execute({"clientName": "a", "reportedPlayerName": "b"}))


def test_notifier_posts_json():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    notifier = DiscordWebhookNotifier(WEBHOOK, transport=httpx.MockTransport(handler))
    use_case = ForwardReportUseCase(notifier, mention="hello")
    asyncio.run(use_case.execute({"clientName": "alice", "reportedPlayerName": "bob"}))

    assert len(seen) == 1
    assert str(seen[0].url) == WEBHOOK
    assert seen[0].method == "POST"
    body = json.loads(seen[0].content)
    assert body["content"] == "hello"
    assert body["embeds"][0]["title"] == "Player Reported: bob"


def test_notifier_non_2xx_raises_delivery_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(429, text="rate limited"))
    notifier = DiscordWebhookNotifier(WEBHOOK, transport=transport)
    with pytest.raises(WebhookDeliveryError) as excinfo:
        asyncio.run(notifier.send({"content": "x"}))
    assert excinfo.value.status_code == 429
    assert excinfo.value.extra() == {"status": 429}


def test_notifier_transport_error_raises_forwarding_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    notifier = DiscordWebhookNotifier(WEBHOOK, transport=httpx.MockTransport(handler))
    with pytest.raises(ReportForwardingError):
        asyncio.run(notifier.send({"content": "x"}))

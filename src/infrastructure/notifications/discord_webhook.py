"""
Infrastructure adapter: Discord incoming webhook (via httpx) → IReportNotifier.
All HTTP details are confined here; the message itself is built by the
ForwardReportUseCase.
"""

import logging
from typing import Optional

import httpx

from src.domain.exceptions import ReportForwardingError, WebhookDeliveryError
from src.domain.ports.report_notifier_port import IReportNotifier

logger = logging.getLogger(__name__)


class DiscordWebhookNotifier(IReportNotifier):
    """POSTs a JSON message to a single webhook URL."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            webhook_url: Full webhook endpoint including its token.
            timeout:     Per-request timeout in seconds.
            transport:   Optional httpx transport (tests pass httpx.MockTransport).
        """
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport

    async def send(self, message: dict) -> None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._webhook_url, json=message)
        except httpx.HTTPError as exc:
            logger.error("[REPORT] Webhook request failed: %s", exc)
            raise ReportForwardingError() from exc

        if not response.is_success:
            logger.error(
                "[REPORT] Discord webhook failed: %s %s", response.status_code, response.text
            )
            raise WebhookDeliveryError(response.status_code, response.text)

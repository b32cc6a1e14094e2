"""
Use-case: turn an inbound moderation report into a webhook message and deliver it.
Depends only on Domain ports and entities: no infrastructure imports.

Business decisions owned here:
  - Which fields are required and the placeholders used for optional ones.
  - The fixed shape of the outbound message (title, colour, field labels).
"""

import logging
from typing import Any, Optional

from src.domain.entities.player_report import NO_REASON, UNKNOWN_SERVER, PlayerReport
from src.domain.exceptions import ReportValidationError, WebhookNotConfiguredError
from src.domain.ports.report_notifier_port import IReportNotifier

logger = logging.getLogger(__name__)

DEFAULT_MENTION = "Player Report Received: <@&1429477002435629127>"
EMBED_COLOR = 16529667
AUTO_MOD_NOTICE = "Auto mod can make mistakes."


def parse_report(payload: dict[str, Any]) -> PlayerReport:
    """Validate a raw report payload and fill in placeholders.

    Raises:
        ReportValidationError: if clientName or reportedPlayerName is missing or empty.
    """
    client_name = payload.get("clientName")
    reported = payload.get("reportedPlayerName")
    if not client_name or not reported:
        raise ReportValidationError()

    reason = payload.get("reason")
    server_id = payload.get("serverId")
    return PlayerReport(
        client_name=str(client_name),
        reported_player_name=str(reported),
        reason=(str(reason).strip() if reason else "") or NO_REASON,
        server_id=str(server_id) if server_id else UNKNOWN_SERVER,
        auto_moderated=payload.get("am") is True,
    )


def build_report_message(report: PlayerReport, mention: str = DEFAULT_MENTION) -> dict:
    fields = [
        {"name": "Reason", "value": report.reason, "inline": True},
        {"name": "Reported By", "value": report.client_name, "inline": True},
        {"name": "Server ID", "value": report.server_id, "inline": True},
    ]
    if report.auto_moderated:
        fields.append({"name": "Other", "value": AUTO_MOD_NOTICE, "inline": True})

    return {
        "content": mention,
        "embeds": [
            {
                "title": f"Player Reported: {report.reported_player_name}",
                "color": EMBED_COLOR,
                "fields": fields,
            }
        ],
    }


class ForwardReportUseCase:
    def __init__(
        self,
        notifier: Optional[IReportNotifier],
        mention: str = DEFAULT_MENTION,
    ) -> None:
        """
        Args:
            notifier: IReportNotifier implementation, or None when no webhook is configured.
            mention:  Content line sent with every report.
        """
        self._notifier = notifier
        self._mention = mention

    async def execute(self, payload: dict[str, Any]) -> None:
        """Validate, build and deliver one report.

        Raises:
            WebhookNotConfiguredError: if no notifier was wired in.
            ReportValidationError:     if a required field is missing.
            Any exception propagated from IReportNotifier on delivery failure.
        """
        if self._notifier is None:
            logger.error("[REPORT] No REPORT_WEBHOOK_URL configured")
            raise WebhookNotConfiguredError()

        report = parse_report(payload)
        await self._notifier.send(build_report_message(report, self._mention))
        logger.info(
            "[REPORT] Forwarded report on %r from %r",
            report.reported_player_name,
            report.client_name,
        )

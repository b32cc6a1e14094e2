"""
Port (interface) for moderation report delivery.
Infrastructure adapters (e.g. DiscordWebhookNotifier) must implement this interface.
"""

from abc import ABC, abstractmethod


class IReportNotifier(ABC):
    @abstractmethod
    async def send(self, message: dict) -> None:
        """Deliver a fully built message.

        Raises:
            WebhookDeliveryError: if the endpoint answers with a non-2xx status.
            ReportForwardingError: if the endpoint cannot be reached.
        """
        ...

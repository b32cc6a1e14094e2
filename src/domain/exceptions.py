"""
Service error taxonomy.
Zero external dependencies. The FastAPI entry point maps each class to an HTTP
status code; nothing in the domain or application layers knows about HTTP.
"""

from typing import Any, Optional


class DealerServiceError(Exception):
    """Base class for every error rendered to clients as ``{"error": ...}``."""

    message: str = "Server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message

    def extra(self) -> dict[str, Any]:
        """Additional fields merged into the client-facing error body."""
        return {}


class AuthenticationError(DealerServiceError):
    message = "Bad key"


class InvalidRequestBodyError(DealerServiceError, ValueError):
    message = "Invalid JSON body"


class InvalidStockNameError(DealerServiceError, ValueError):
    message = "Missing stock name"


class InvalidActionError(DealerServiceError, ValueError):
    message = "Bad action"


class InvalidAmountError(DealerServiceError, ValueError):
    message = "Amount out of range"


class ReportValidationError(DealerServiceError, ValueError):
    message = "Missing clientName or reportedPlayerName"


class WebhookNotConfiguredError(DealerServiceError):
    message = "Webhook not configured"


class WebhookDeliveryError(DealerServiceError):
    message = "Discord webhook failed"

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__()
        self.status_code = status_code
        self.body = body

    def extra(self) -> dict[str, Any]:
        return {"status": self.status_code}


class ReportForwardingError(DealerServiceError):
    message = "Server error"


class LedgerPersistenceError(DealerServiceError):
    message = "Failed to persist ledger"

"""
Infrastructure adapter: static shared secret → IKeyValidator.

The comparison uses hmac.compare_digest so timing does not reveal how much of
the key matched. When no secret is configured every request is refused.
"""

import hmac
import logging
from typing import Optional

from src.domain.exceptions import AuthenticationError
from src.domain.ports.key_validator_port import IKeyValidator

logger = logging.getLogger(__name__)


class SharedSecretValidator(IKeyValidator):
    """Accepts exactly one configured dealer key."""

    def __init__(self, secret: Optional[str]) -> None:
        self._secret = secret
        if not secret:
            logger.warning("[AUTH] DEALER_KEY is not set; all trade requests will be refused")

    def validate(self, key: Optional[str]) -> None:
        if not self._secret or key is None:
            raise AuthenticationError()
        if not hmac.compare_digest(key.encode("utf-8"), self._secret.encode("utf-8")):
            raise AuthenticationError()

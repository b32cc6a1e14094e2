"""
Port (interface) for dealer key validators.
Infrastructure adapters (e.g. SharedSecretValidator) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IKeyValidator(ABC):
    @abstractmethod
    def validate(self, key: Optional[str]) -> None:
        """Accept the caller's key or refuse it.

        Raises:
            AuthenticationError: if the key is missing or does not match.
        """
        ...

# oauth2_mongo/oauth/storage_interfaces.py
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from .models import TokenInfo

logger = logging.getLogger(__name__)


class AbstractTokenStore(ABC):
    """
    Token storage capability expected by the OAuth2 server.

    Lookups return None when nothing is stored under the key; that is not an error.
    """

    @abstractmethod
    async def create(self, info: TokenInfo) -> None:
        """Store new token information under its code, access and refresh keys."""
        pass

    @abstractmethod
    async def remove_by_code(self, code: str) -> None:
        """Delete the record stored under an authorization code."""
        pass

    @abstractmethod
    async def remove_by_access(self, access: str) -> None:
        """Delete the record stored under an access token."""
        pass

    @abstractmethod
    async def remove_by_refresh(self, refresh: str) -> None:
        """Delete the record stored under a refresh token."""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[TokenInfo]:
        """Retrieve token information by authorization code."""
        pass

    @abstractmethod
    async def get_by_access(self, access: str) -> Optional[TokenInfo]:
        """Retrieve token information by access token."""
        pass

    @abstractmethod
    async def get_by_refresh(self, refresh: str) -> Optional[TokenInfo]:
        """Retrieve token information by refresh token."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the storage backend."""
        pass

    @abstractmethod
    async def teardown(self) -> None:
        """Clean up storage resources."""
        pass

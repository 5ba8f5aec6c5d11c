from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import AuthTokens


class ITokenStore(ABC):
    """Secure token storage collaborator - application layer"""

    @abstractmethod
    async def save(self, tokens: AuthTokens) -> None:
        """Persist the token pair issued on sign-in"""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Forget any stored tokens"""
        pass

    @abstractmethod
    async def get_access_token(self) -> Optional[str]:
        """Current access token for authenticated requests"""
        pass

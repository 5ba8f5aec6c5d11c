from typing import Optional

from src.app.services.token_store import ITokenStore
from src.domain.entities import AuthTokens


class InMemoryTokenStore(ITokenStore):
    """Process-local token store; platform secure storage plugs in the same way"""

    def __init__(self):
        self._tokens: Optional[AuthTokens] = None

    @property
    def tokens(self) -> Optional[AuthTokens]:
        return self._tokens

    async def save(self, tokens: AuthTokens) -> None:
        self._tokens = tokens

    async def clear(self) -> None:
        self._tokens = None

    async def get_access_token(self) -> Optional[str]:
        return self._tokens.access_token if self._tokens else None

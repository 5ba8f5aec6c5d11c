import logging
from typing import Any, Dict, Optional

import httpx

from src.app.error import ApiError, NetworkError
from src.app.services.token_store import ITokenStore
from src.app.services.transport import IAuthTransport

logger = logging.getLogger(__name__)


class HttpxAuthTransport(IAuthTransport):
    """httpx implementation of IAuthTransport for one backend"""

    def __init__(
        self,
        base_url: str,
        token_store: Optional[ITokenStore] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.token_store = token_store
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def post(
        self, endpoint: str, data: Dict[str, Any], auth: bool = False
    ) -> Dict[str, Any]:
        headers = {}
        if auth:
            token = None
            if self.token_store is not None:
                token = await self.token_store.get_access_token()
            if not token:
                raise ApiError("Authentication token not found")
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"POST {self.base_url}{endpoint}")
        try:
            response = await self.client.post(endpoint, json=data, headers=headers)
        except httpx.TransportError as exc:
            logger.warning(f"POST {endpoint} failed: {type(exc).__name__}")
            raise NetworkError(str(exc) or "Network error occurred") from exc

        body = self._decode(response)
        if response.is_error:
            message = body.get("message") or response.reason_phrase or "Request failed"
            raise ApiError(
                message,
                status_code=response.status_code,
                code=body.get("code") or body.get("errorCode"),
                data=body,
            )
        return body

    async def aclose(self) -> None:
        await self.client.aclose()

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"data": body}

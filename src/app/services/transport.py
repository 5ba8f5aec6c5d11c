from abc import ABC, abstractmethod
from typing import Any, Dict


class IAuthTransport(ABC):
    """HTTP transport bound to one backend base URL - application layer"""

    @abstractmethod
    async def post(
        self, endpoint: str, data: Dict[str, Any], auth: bool = False
    ) -> Dict[str, Any]:
        """
        POST a JSON body and return the decoded JSON response.

        Raises:
            ApiError: backend answered with an error status
            NetworkError: request never completed
        """
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release pooled connections"""
        pass

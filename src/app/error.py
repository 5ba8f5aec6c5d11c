from typing import Any, Optional

from src.domain.errors import IllegalTransitionError


class ApiError(Exception):
    """Backend rejected a request, or answered with success=false"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        data: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.data = data
        super().__init__(message)


class NetworkError(ApiError):
    """Request never reached the backend or timed out"""

    def __init__(self, message: str = "Network error occurred"):
        super().__init__(message)

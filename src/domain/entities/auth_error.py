"""
AuthError Entity

Normalized error surfaced to the presentation layer.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from .enums import AuthErrorKind


class AuthError(BaseModel):
    """
    AuthError - one normalized authentication failure.

    Business Rules:
    - Produced only by ErrorNormalizer (backend errors and local validation)
    - message is safe for direct display
    - raw keeps the original exception for diagnostics, never serialized
    """

    kind: AuthErrorKind
    message: str
    raw: Optional[Any] = Field(default=None, exclude=True, repr=False)

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def requires_resend(self) -> bool:
        """True when the only way forward is requesting a new code"""
        return self.kind == AuthErrorKind.otp_expired

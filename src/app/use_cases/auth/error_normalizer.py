"""
Error Normalizer

Maps whatever an adapter raised onto the closed AuthErrorKind taxonomy.
"""

import logging
from typing import Any, Optional

import httpx

from src.app.error import ApiError, NetworkError
from src.domain.entities import AuthError, AuthErrorKind

logger = logging.getLogger(__name__)


# Structured codes seen on either backend
CODE_KINDS = {
    "INVALID_CREDENTIALS": AuthErrorKind.invalid_credentials,
    "UNAUTHORIZED": AuthErrorKind.invalid_credentials,
    "VALIDATION_ERROR": AuthErrorKind.validation_failed,
    "VALIDATION_FAILED": AuthErrorKind.validation_failed,
    "OTP_EXPIRED": AuthErrorKind.otp_expired,
    "OTP_INCORRECT": AuthErrorKind.otp_incorrect,
    "INVALID_OTP": AuthErrorKind.otp_incorrect,
    "OTP_INVALID_FORMAT": AuthErrorKind.otp_invalid_format,
    "USER_ALREADY_EXISTS": AuthErrorKind.user_already_exists,
    "USER_EXISTS": AuthErrorKind.user_already_exists,
    "ROLE_MISMATCH": AuthErrorKind.role_mismatch,
    "NETWORK_ERROR": AuthErrorKind.network_failure,
}

# Checked in order; first match wins
MESSAGE_KINDS = (
    ("invalid or expired otp", AuthErrorKind.otp_incorrect),
    ("expired", AuthErrorKind.otp_expired),
    ("incorrect otp", AuthErrorKind.otp_incorrect),
    ("valid 6-digit", AuthErrorKind.otp_invalid_format),
    ("already exists", AuthErrorKind.user_already_exists),
    ("already registered", AuthErrorKind.user_already_exists),
)

# Consulted only after the transport check
HINT_KINDS = (
    ("invalid email or password", AuthErrorKind.invalid_credentials),
    ("invalid credentials", AuthErrorKind.invalid_credentials),
    ("incorrect password", AuthErrorKind.invalid_credentials),
    ("role mismatch", AuthErrorKind.role_mismatch),
    ("role not allowed", AuthErrorKind.role_mismatch),
)

DEFAULT_MESSAGES = {
    AuthErrorKind.invalid_credentials: "Invalid email or password",
    AuthErrorKind.validation_failed: "Please check the details you entered",
    AuthErrorKind.otp_expired: "OTP expired. Request a new one",
    AuthErrorKind.otp_incorrect: "Incorrect OTP entered",
    AuthErrorKind.otp_invalid_format: "Please enter a valid 6-digit numeric OTP",
    AuthErrorKind.user_already_exists: "An account with these details already exists",
    AuthErrorKind.role_mismatch: "This account cannot sign in here",
    AuthErrorKind.network_failure: "Network error occurred. Please try again",
    AuthErrorKind.unknown: "Something went wrong. Please try again",
}


class ErrorNormalizer:
    """
    Sole producer of AuthError.

    Precedence:
    1. explicit structured error code from the backend
    2. message substrings (shared across tenants)
    3. transport failure type
    4. credential / role hints in the message
    5. unknown
    """

    def normalize(self, exc: BaseException) -> AuthError:
        message = self._message_of(exc)
        kind = self._classify(exc, message)
        error = AuthError(
            kind=kind, message=message or DEFAULT_MESSAGES[kind], raw=exc
        )
        if isinstance(exc, (ApiError, httpx.TransportError)):
            logger.warning(f"Normalized {type(exc).__name__} to {kind.value}: {error.message}")
        else:
            logger.error(f"Unexpected {type(exc).__name__} normalized to {kind.value}")
        return error

    def local(self, kind: AuthErrorKind, message: Optional[str] = None) -> AuthError:
        """Error detected on the client without a backend round-trip"""
        return AuthError(kind=kind, message=message or DEFAULT_MESSAGES[kind])

    def _classify(self, exc: BaseException, message: str) -> AuthErrorKind:
        code = self._code_of(exc)
        if code:
            kind = CODE_KINDS.get(code.upper())
            if kind is None:
                kind = self._kind_from_value(code)
            if kind is not None:
                return kind

        lowered = message.lower()
        for needle, kind in MESSAGE_KINDS:
            if needle in lowered:
                return kind

        if isinstance(exc, (NetworkError, httpx.TransportError)):
            return AuthErrorKind.network_failure

        for needle, kind in HINT_KINDS:
            if needle in lowered:
                return kind

        return AuthErrorKind.unknown

    @staticmethod
    def _kind_from_value(code: str) -> Optional[AuthErrorKind]:
        try:
            return AuthErrorKind(code.lower())
        except ValueError:
            return None

    @staticmethod
    def _code_of(exc: BaseException) -> Optional[str]:
        code = getattr(exc, "code", None)
        if isinstance(code, str) and code:
            return code
        data = getattr(exc, "data", None)
        if isinstance(data, dict):
            for key in ("code", "errorCode"):
                value = data.get(key)
                if isinstance(value, str) and value:
                    return value
        return None

    @staticmethod
    def _message_of(exc: BaseException) -> str:
        data: Any = getattr(exc, "data", None)
        if isinstance(data, dict):
            message = data.get("message")
            if isinstance(message, str) and message.strip():
                return message.strip()
        if isinstance(exc, ApiError):
            return (exc.message or "").strip()
        return str(exc).strip()

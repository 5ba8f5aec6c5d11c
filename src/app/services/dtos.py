"""
Tenant Adapter DTOs

Normalized payloads every tenant adapter returns, whatever its backend
sends on the wire.
"""

from typing import Optional, Union

from pydantic import BaseModel

from src.domain.entities import (
    AuthTokens,
    AuthUser,
    OtpPurpose,
    PhoneIdentifier,
    SessionIdentifier,
)

LoginIdentifier = Union[str, PhoneIdentifier]


# ============================================================================
# Command DTOs
# ============================================================================


class RegistrationProfile(BaseModel):
    """New account details collected by the sign-up form"""

    first_name: str
    last_name: str
    email: str
    password: str
    country_code: str
    mobile: str

    @property
    def phone(self) -> PhoneIdentifier:
        return PhoneIdentifier(country_code=self.country_code, mobile=self.mobile)


class OtpContext(BaseModel):
    """Which code is being verified and for whom"""

    purpose: OtpPurpose
    identifier: SessionIdentifier
    session_ref: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResult(BaseModel):
    requires_otp: bool = False
    session_ref: Optional[str] = None
    user: Optional[AuthUser] = None
    tokens: Optional[AuthTokens] = None


class RegisterResult(BaseModel):
    user: Optional[AuthUser] = None
    tokens: Optional[AuthTokens] = None
    requires_verification: bool = True


class VerifyOtpResult(BaseModel):
    user: Optional[AuthUser] = None
    tokens: Optional[AuthTokens] = None
    # Carried forward to reset_password (homeowner verificationId)
    reset_ref: Optional[int] = None


class ResendOtpResult(BaseModel):
    sent: bool


class ForgotPasswordResult(BaseModel):
    sent: bool


class VerifyForgotPasswordOtpResult(BaseModel):
    verified: bool
    reset_ref: Optional[int] = None


class ResetPasswordResult(BaseModel):
    success: bool


class ChangePasswordResult(BaseModel):
    success: bool

"""
Identity Value Objects

User-facing identity data exchanged with both tenant backends.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PhoneIdentifier(BaseModel):
    """Mobile number with its dialing prefix, e.g. {"+1", "5551234567"}"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    country_code: str = Field(alias="countryCode")
    mobile: str

    def to_wire(self) -> dict:
        return {"countryCode": self.country_code, "mobile": self.mobile}


class SessionIdentifier(BaseModel):
    """Who a flow is about: email, phone, or both"""

    model_config = ConfigDict(frozen=True)

    email: Optional[str] = None
    phone: Optional[PhoneIdentifier] = None

    @property
    def primary(self):
        """E-mail when known, otherwise the phone pair"""
        return self.email if self.email else self.phone


class VerificationFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_email_verified: bool = True
    is_phone_verified: bool = True

    @property
    def fully_verified(self) -> bool:
        return self.is_email_verified and self.is_phone_verified


class UserName(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    full_name: str = Field(default="", alias="fullName")


class AuthUser(BaseModel):
    """
    User profile returned by either backend.

    Accepts the camelCase wire keys; unknown keys (kyc, lastLogin, ...) are
    ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    email: Optional[str] = None
    name: Optional[UserName] = None
    phone: Optional[PhoneIdentifier] = None
    user_type: List[str] = Field(default_factory=list, alias="userType")
    is_email_verified: bool = Field(default=False, alias="isEmailVerified")
    is_phone_verified: bool = Field(default=False, alias="isPhoneVerified")

    @property
    def verification_flags(self) -> VerificationFlags:
        return VerificationFlags(
            is_email_verified=self.is_email_verified,
            is_phone_verified=self.is_phone_verified,
        )


class AuthTokens(BaseModel):
    """Opaque token pair handed to the token store"""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: Optional[str] = None

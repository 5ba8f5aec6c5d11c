"""
Authentication Flow DTOs (Data Transfer Objects)

Inputs accepted from the presentation layer and the snapshot returned to it.
Inputs validate locally so malformed requests never reach a backend.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from src.app.services.dtos import RegistrationProfile
from src.domain.entities import (
    AuthError,
    AuthUser,
    FlowState,
    FlowType,
    PhoneIdentifier,
    RouteToken,
    Tenant,
)
from .validators import (
    parse_login_identifier,
    validate_email,
    validate_mobile,
    validate_password,
    validate_passwords_match,
)


def _raise_if(error: Optional[str]) -> None:
    if error:
        raise ValueError(error)


def first_error_message(exc: ValidationError) -> str:
    """Human message of the first failed field"""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    cause = first.get("ctx", {}).get("error")
    if cause is not None:
        return str(cause)
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg', 'invalid value')}" if field else first["msg"]


# ============================================================================
# Command DTOs
# ============================================================================


class LoginInput(BaseModel):
    identifier: Union[PhoneIdentifier, str]
    password: str

    @field_validator("identifier", mode="before")
    @classmethod
    def _parse_identifier(cls, value: Any):
        return parse_login_identifier(value)

    @field_validator("password")
    @classmethod
    def _password_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class RegistrationInput(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    country_code: str
    mobile: str
    confirm_password: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _name_present(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        value = value.strip()
        _raise_if(validate_email(value))
        return value

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        _raise_if(validate_password(value))
        return value

    @field_validator("country_code")
    @classmethod
    def _country_code_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Country code is required")
        return value.strip()

    @field_validator("mobile")
    @classmethod
    def _valid_mobile(cls, value: str) -> str:
        _raise_if(validate_mobile(value))
        return value

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.confirm_password is not None:
            _raise_if(validate_passwords_match(self.password, self.confirm_password))
        return self

    def to_profile(self) -> RegistrationProfile:
        return RegistrationProfile(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            password=self.password,
            country_code=self.country_code,
            mobile=self.mobile,
        )


class ForgotPasswordInput(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        value = value.strip()
        _raise_if(validate_email(value))
        return value


class NewPasswordInput(BaseModel):
    password: str
    confirm_password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        _raise_if(validate_password(value))
        return value

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.confirm_password is not None:
            _raise_if(validate_passwords_match(self.password, self.confirm_password))
        return self


class ChangePasswordInput(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("current_password")
    @classmethod
    def _current_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Current password is required")
        return value

    @field_validator("new_password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        _raise_if(validate_password(value))
        return value

    @model_validator(mode="after")
    def _passwords_match(self):
        _raise_if(validate_passwords_match(self.new_password, self.confirm_password))
        return self


FLOW_INPUTS = {
    FlowType.login: LoginInput,
    FlowType.registration: RegistrationInput,
    FlowType.forgot_password: ForgotPasswordInput,
    FlowType.change_password: ChangePasswordInput,
}


class OtpPolicy(BaseModel):
    """OTP clock durations for one flow type"""

    model_config = ConfigDict(frozen=True)

    expiry_seconds: int = Field(ge=0)
    cooldown_seconds: int = Field(ge=0)


# ============================================================================
# Response DTOs
# ============================================================================


class Route(BaseModel):
    """Navigation target with the parameters the next screen needs"""

    model_config = ConfigDict(frozen=True)

    token: RouteToken
    params: Dict[str, Any] = Field(default_factory=dict)


class FlowOutcome(BaseModel):
    """Snapshot of a flow session for rendering"""

    session_id: str
    flow_type: FlowType
    tenant: Tenant
    state: FlowState
    attempts: int = 0
    seconds_remaining: Optional[int] = None
    resend_in: Optional[int] = None
    can_resend: bool = False
    error: Optional[AuthError] = None
    route: Optional[Route] = None
    user: Optional[AuthUser] = None

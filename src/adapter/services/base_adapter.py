from typing import Any, Dict, Optional, Union

from src.app.error import ApiError
from src.app.services.dtos import (
    ChangePasswordResult,
    ForgotPasswordResult,
    LoginIdentifier,
    LoginResult,
    RegisterResult,
    RegistrationProfile,
    VerifyOtpResult,
)
from src.app.services.tenant_adapter import ITenantAdapter
from src.app.services.transport import IAuthTransport
from src.domain.entities import AuthTokens, AuthUser, PhoneIdentifier, SessionIdentifier


class Endpoints:
    SIGNIN = "/auth/signin"
    SIGNUP = "/auth/signup"
    VERIFY_OTP = "/auth/verify-otp"
    VERIFY_LOGIN_OTP = "/auth/verify-login-otp"
    VERIFY_FORGOT_PASSWORD_OTP = "/auth/verify-forgot-password-otp"
    RESEND_OTP = "/auth/resend-otp"
    FORGOT_PASSWORD = "/auth/forgot-password"
    RESET_PASSWORD = "/auth/reset-password"
    CHANGE_PASSWORD = "/profile/change-password"


class BaseTenantAdapter(ITenantAdapter):
    """
    Endpoints both backends implement the same way.

    Both answer {success, message, data}; success=false is raised as an
    ApiError carrying the backend message. Subclasses implement the
    OTP, resend and reset calls whose payloads differ.
    """

    def __init__(self, transport: IAuthTransport):
        self.transport = transport

    async def login(self, identifier: LoginIdentifier, password: str) -> LoginResult:
        body = await self._post(
            Endpoints.SIGNIN,
            {"identifier": self._wire_identifier(identifier), "password": password},
            "Login failed",
        )
        data = self._data(body)
        return LoginResult(
            requires_otp=bool(data.get("requiresOTP", False)),
            session_ref=data.get("sessionId"),
            user=self._user(data),
            tokens=self._tokens(data),
        )

    async def register(self, profile: RegistrationProfile) -> RegisterResult:
        body = await self._post(
            Endpoints.SIGNUP, self._signup_payload(profile), "Registration failed"
        )
        data = self._data(body)
        user = self._user(data)
        return RegisterResult(
            user=user,
            tokens=self._tokens(data),
            requires_verification=user is None
            or not user.verification_flags.fully_verified,
        )

    async def verify_login_otp(
        self, identifier: SessionIdentifier, code: str, session_ref: Optional[str] = None
    ) -> VerifyOtpResult:
        body = await self._post(
            Endpoints.VERIFY_LOGIN_OTP,
            {"identifier": self._wire_identifier(identifier), "otp": code},
            "OTP verification failed",
        )
        data = self._data(body)
        return VerifyOtpResult(user=self._user(data), tokens=self._tokens(data))

    async def forgot_password(self, email: str) -> ForgotPasswordResult:
        await self._post(
            Endpoints.FORGOT_PASSWORD, {"email": email}, "Forgot password request failed"
        )
        return ForgotPasswordResult(sent=True)

    async def change_password(
        self, current: str, new: str, confirm: str
    ) -> ChangePasswordResult:
        await self._post(
            Endpoints.CHANGE_PASSWORD,
            {"currentPassword": current, "newPassword": new, "confirmPassword": confirm},
            "Failed to change password",
            auth=True,
        )
        return ChangePasswordResult(success=True)

    async def aclose(self) -> None:
        await self.transport.aclose()

    def _signup_payload(self, profile: RegistrationProfile) -> Dict[str, Any]:
        return {
            "name": {"firstName": profile.first_name, "lastName": profile.last_name},
            "email": profile.email,
            "password": profile.password,
            "phone": profile.phone.to_wire(),
        }

    async def _post(
        self,
        endpoint: str,
        data: Dict[str, Any],
        failure_message: str,
        auth: bool = False,
    ) -> Dict[str, Any]:
        body = await self.transport.post(endpoint, data, auth=auth)
        if body.get("success") is False:
            raise ApiError(
                body.get("message") or failure_message,
                code=body.get("code") or body.get("errorCode"),
                data=body,
            )
        return body

    @staticmethod
    def _data(body: Dict[str, Any]) -> Dict[str, Any]:
        data = body.get("data")
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _user(data: Dict[str, Any]) -> Optional[AuthUser]:
        user = data.get("user")
        if not isinstance(user, dict):
            return None
        return AuthUser.model_validate(user)

    @staticmethod
    def _tokens(data: Dict[str, Any]) -> Optional[AuthTokens]:
        access_token = data.get("token") or data.get("accessToken")
        if not access_token:
            return None
        return AuthTokens(
            access_token=access_token, refresh_token=data.get("refreshToken")
        )

    @staticmethod
    def _wire_identifier(
        identifier: Union[str, PhoneIdentifier, SessionIdentifier]
    ) -> Union[str, Dict[str, str]]:
        if isinstance(identifier, SessionIdentifier):
            identifier = identifier.primary
        if isinstance(identifier, PhoneIdentifier):
            return identifier.to_wire()
        if identifier is None:
            raise ApiError("An email or mobile number is required")
        return identifier

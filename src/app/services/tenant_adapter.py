from abc import ABC, abstractmethod
from typing import Optional

from src.app.error import ApiError
from src.domain.entities import OtpPurpose, SessionIdentifier, Tenant
from src.app.services.dtos import (
    ChangePasswordResult,
    ForgotPasswordResult,
    LoginIdentifier,
    LoginResult,
    OtpContext,
    RegisterResult,
    RegistrationProfile,
    ResendOtpResult,
    ResetPasswordResult,
    VerifyForgotPasswordOtpResult,
    VerifyOtpResult,
)


class ITenantAdapter(ABC):
    """
    Authentication capabilities of one tenant backend - application layer.

    Implementations translate to their backend's wire shapes and raise raw
    errors; callers normalize them.
    """

    tenant: Tenant

    @abstractmethod
    async def login(self, identifier: LoginIdentifier, password: str) -> LoginResult:
        """Sign in with an e-mail or a phone pair"""
        pass

    @abstractmethod
    async def register(self, profile: RegistrationProfile) -> RegisterResult:
        """Create an account"""
        pass

    @abstractmethod
    async def verify_login_otp(
        self, identifier: SessionIdentifier, code: str, session_ref: Optional[str] = None
    ) -> VerifyOtpResult:
        """Verify the code sent on sign-in"""
        pass

    @abstractmethod
    async def verify_registration_otp(
        self, identifier: SessionIdentifier, code: str
    ) -> VerifyOtpResult:
        """Verify the code sent on sign-up"""
        pass

    @abstractmethod
    async def resend_otp(
        self, identifier: SessionIdentifier, purpose: OtpPurpose
    ) -> ResendOtpResult:
        """Ask the backend to send a fresh code"""
        pass

    @abstractmethod
    async def forgot_password(self, email: str) -> ForgotPasswordResult:
        """Start a password reset"""
        pass

    @abstractmethod
    async def verify_forgot_password_otp(
        self, email: str, code: str
    ) -> VerifyForgotPasswordOtpResult:
        """Verify the password reset code"""
        pass

    @abstractmethod
    async def reset_password(
        self, email: str, code: str, new_password: str, reset_ref: Optional[int] = None
    ) -> ResetPasswordResult:
        """Set a new password with a verified reset code"""
        pass

    @abstractmethod
    async def change_password(
        self, current: str, new: str, confirm: str
    ) -> ChangePasswordResult:
        """Change the password of the signed-in user"""
        pass

    async def verify_otp(self, context: OtpContext, code: str) -> VerifyOtpResult:
        """Verify a code through the endpoint matching its purpose"""
        if context.purpose == OtpPurpose.login:
            return await self.verify_login_otp(
                context.identifier, code, context.session_ref
            )
        if context.purpose == OtpPurpose.signup:
            return await self.verify_registration_otp(context.identifier, code)

        email = context.identifier.email or ""
        verified = await self.verify_forgot_password_otp(email, code)
        if not verified.verified:
            raise ApiError("OTP verification failed")
        return VerifyOtpResult(reset_ref=verified.reset_ref)

    async def aclose(self) -> None:
        """Release the backend connection; adapters without one do nothing"""
        pass

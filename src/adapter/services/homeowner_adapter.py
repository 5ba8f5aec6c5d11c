from typing import Optional

from src.app.error import ApiError
from src.app.services.dtos import (
    ResendOtpResult,
    ResetPasswordResult,
    VerifyForgotPasswordOtpResult,
    VerifyOtpResult,
)
from src.domain.entities import OtpPurpose, SessionIdentifier, Tenant
from .base_adapter import BaseTenantAdapter, Endpoints


class HomeownerAdapter(BaseTenantAdapter):
    """
    Homeowner backend.

    Wire differences:
    - sign-up OTP is verified against the phone number
    - password reset OTP goes through /auth/verify-otp and yields a numeric
      verificationId that reset-password requires
    - resend-otp only takes an e-mail
    """

    tenant = Tenant.homeowner

    async def verify_registration_otp(
        self, identifier: SessionIdentifier, code: str
    ) -> VerifyOtpResult:
        target = identifier.phone if identifier.phone is not None else identifier
        body = await self._post(
            Endpoints.VERIFY_LOGIN_OTP,
            {"identifier": self._wire_identifier(target), "otp": code},
            "Mobile verification failed",
        )
        data = self._data(body)
        return VerifyOtpResult(user=self._user(data), tokens=self._tokens(data))

    async def resend_otp(
        self, identifier: SessionIdentifier, purpose: OtpPurpose
    ) -> ResendOtpResult:
        if not identifier.email:
            raise ApiError(
                "An email address is required to resend the code",
                code="VALIDATION_FAILED",
            )
        await self._post(
            Endpoints.RESEND_OTP, {"email": identifier.email}, "Failed to resend OTP"
        )
        return ResendOtpResult(sent=True)

    async def verify_forgot_password_otp(
        self, email: str, code: str
    ) -> VerifyForgotPasswordOtpResult:
        body = await self._post(
            Endpoints.VERIFY_OTP,
            {"identifier": email, "otp": code},
            "OTP verification failed",
        )
        data = self._data(body)
        return VerifyForgotPasswordOtpResult(
            verified=True, reset_ref=data.get("verificationId")
        )

    async def reset_password(
        self, email: str, code: str, new_password: str, reset_ref: Optional[int] = None
    ) -> ResetPasswordResult:
        payload = {"email": email, "code": code, "newPassword": new_password}
        if reset_ref is not None:
            payload["verificationId"] = int(reset_ref)
        await self._post(Endpoints.RESET_PASSWORD, payload, "Password reset failed")
        return ResetPasswordResult(success=True)

from typing import Any, Dict, Optional

from src.app.services.dtos import (
    RegistrationProfile,
    ResendOtpResult,
    ResetPasswordResult,
    VerifyForgotPasswordOtpResult,
    VerifyOtpResult,
)
from src.domain.entities import OtpPurpose, SessionIdentifier, Tenant
from .base_adapter import BaseTenantAdapter, Endpoints


class RenterInvestorAdapter(BaseTenantAdapter):
    """
    Renter/investor backend.

    Wire differences:
    - sign-up declares the account type
    - sign-up OTP is verified like the login OTP, e-mail first
    - resend-otp takes the purpose as `type`
    - the verified OTP itself is the reset credential for reset-password
    - any plaintext `otp` echoed back by the backend is ignored
    """

    tenant = Tenant.renter_investor

    def _signup_payload(self, profile: RegistrationProfile) -> Dict[str, Any]:
        payload = super()._signup_payload(profile)
        payload["userType"] = ["renter"]
        return payload

    async def verify_registration_otp(
        self, identifier: SessionIdentifier, code: str
    ) -> VerifyOtpResult:
        return await self.verify_login_otp(identifier, code)

    async def resend_otp(
        self, identifier: SessionIdentifier, purpose: OtpPurpose
    ) -> ResendOtpResult:
        await self._post(
            Endpoints.RESEND_OTP,
            {"identifier": self._wire_identifier(identifier), "type": purpose.value},
            "Resend OTP failed",
        )
        return ResendOtpResult(sent=True)

    async def verify_forgot_password_otp(
        self, email: str, code: str
    ) -> VerifyForgotPasswordOtpResult:
        await self._post(
            Endpoints.VERIFY_FORGOT_PASSWORD_OTP,
            {"email": email, "otp": code},
            "OTP verification failed",
        )
        return VerifyForgotPasswordOtpResult(verified=True)

    async def reset_password(
        self, email: str, code: str, new_password: str, reset_ref: Optional[int] = None
    ) -> ResetPasswordResult:
        await self._post(
            Endpoints.RESET_PASSWORD,
            {"email": email, "password": new_password, "otp": code},
            "Password reset failed",
        )
        return ResetPasswordResult(success=True)

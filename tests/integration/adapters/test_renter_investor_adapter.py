import pytest

from src.app.error import ApiError
from src.app.services.dtos import RegistrationProfile
from src.domain.entities import AuthTokens, OtpPurpose, SessionIdentifier


@pytest.mark.asyncio
async def test_signup_marks_renter(renter, renter_backend, test_data):
    renter_backend.reply("/auth/signup", test_data.response("renter_user"))
    profile = RegistrationProfile(**test_data.get_copy("registration_input"))

    result = await renter.register(profile)

    assert renter_backend.last_json["userType"] == ["renter"]
    assert result.requires_verification is False


@pytest.mark.asyncio
async def test_plaintext_otp_in_response_is_dropped(renter, renter_backend, test_data):
    renter_backend.reply("/auth/signin", test_data.get_copy("signin_requires_otp"))

    result = await renter.login("renter@example.com", "Secure#Pass1")

    assert result.requires_otp is True
    assert "654321" not in result.model_dump_json()


@pytest.mark.asyncio
async def test_login_otp_returns_tokens(renter, renter_backend, test_data):
    renter_backend.reply(
        "/auth/verify-login-otp",
        {
            "success": True,
            "data": {
                "token": "jwt-2",
                "refreshToken": "refresh-2",
                "user": test_data.get_copy("renter_user"),
            },
        },
    )

    result = await renter.verify_login_otp(
        SessionIdentifier(email="renter@example.com"), "123456", "sess-123"
    )

    assert renter_backend.last_json == {"identifier": "renter@example.com", "otp": "123456"}
    assert result.tokens == AuthTokens(access_token="jwt-2", refresh_token="refresh-2")
    assert result.user.user_type == ["renter"]


@pytest.mark.asyncio
async def test_resend_includes_purpose(renter, renter_backend):
    renter_backend.reply("/auth/resend-otp", {"success": True})

    await renter.resend_otp(
        SessionIdentifier(email="renter@example.com"), OtpPurpose.password_reset
    )

    assert renter_backend.last_json == {
        "identifier": "renter@example.com",
        "type": "password_reset",
    }


@pytest.mark.asyncio
async def test_password_reset_uses_code(renter, renter_backend):
    renter_backend.reply("/auth/verify-forgot-password-otp", {"success": True})
    renter_backend.reply("/auth/reset-password", {"success": True})

    verified = await renter.verify_forgot_password_otp("renter@example.com", "654321")
    await renter.reset_password("renter@example.com", "654321", "New#Pass123", verified.reset_ref)

    assert verified.verified is True
    assert verified.reset_ref is None
    assert renter_backend.paths == [
        "/api/auth/verify-forgot-password-otp",
        "/api/auth/reset-password",
    ]
    assert renter_backend.last_json == {
        "email": "renter@example.com",
        "password": "New#Pass123",
        "otp": "654321",
    }


@pytest.mark.asyncio
async def test_wrong_reset_code(renter, renter_backend, test_data):
    renter_backend.reply(
        "/auth/verify-forgot-password-otp",
        test_data.get_copy("invalid_or_expired_otp"),
        status_code=400,
    )

    with pytest.raises(ApiError) as exc_info:
        await renter.verify_forgot_password_otp("renter@example.com", "000000")

    assert exc_info.value.message == "Invalid or expired OTP"

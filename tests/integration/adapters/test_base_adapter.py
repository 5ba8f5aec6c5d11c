import pytest

from src.adapter.services.base_adapter import BaseTenantAdapter, Endpoints

TENANTS = [("homeowner", "homeowner_backend"), ("renter", "renter_backend")]


@pytest.mark.asyncio
@pytest.mark.parametrize("adapter_name, backend_name", TENANTS)
@pytest.mark.usefixtures("homeowner", "renter")
async def test_forgot_password_shared_by_both_tenants(request, adapter_name, backend_name):
    """Test both tenants post the same forgot-password body"""
    adapter = request.getfixturevalue(adapter_name)
    backend = request.getfixturevalue(backend_name)
    backend.reply(Endpoints.FORGOT_PASSWORD, {"success": True, "message": "OTP sent"})

    result = await adapter.forgot_password("someone@example.com")

    assert isinstance(adapter, BaseTenantAdapter)
    assert result.sent is True
    assert backend.last_json == {"email": "someone@example.com"}


@pytest.mark.asyncio
@pytest.mark.parametrize("adapter_name, backend_name", TENANTS)
@pytest.mark.usefixtures("homeowner", "renter")
async def test_signin_shared_by_both_tenants(request, adapter_name, backend_name):
    adapter = request.getfixturevalue(adapter_name)
    backend = request.getfixturevalue(backend_name)
    backend.reply(
        Endpoints.SIGNIN, {"success": True, "data": {"requiresOTP": True, "sessionId": "s-9"}}
    )

    result = await adapter.login("someone@example.com", "Secure#Pass1")

    assert backend.last_json == {"identifier": "someone@example.com", "password": "Secure#Pass1"}
    assert result.requires_otp is True
    assert result.session_ref == "s-9"
    assert result.tokens is None

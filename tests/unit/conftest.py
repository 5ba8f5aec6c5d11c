import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.dtos import (
    ChangePasswordResult,
    ForgotPasswordResult,
    LoginResult,
    RegisterResult,
    ResendOtpResult,
    ResetPasswordResult,
    VerifyOtpResult,
)
from src.app.use_cases.auth import OtpPolicy
from src.domain.entities import AuthTokens, AuthUser, FlowType, Tenant


class FakeClock:
    """Manually advanced clock for OTP timers"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def otp_policies():
    return {
        FlowType.login: OtpPolicy(expiry_seconds=60, cooldown_seconds=60),
        FlowType.registration: OtpPolicy(expiry_seconds=120, cooldown_seconds=60),
        FlowType.forgot_password: OtpPolicy(expiry_seconds=60, cooldown_seconds=60),
    }


@pytest.fixture
def verified_user():
    return AuthUser(
        id="u-1",
        email="owner@example.com",
        userType=["homeowner"],
        isEmailVerified=True,
        isPhoneVerified=True,
    )


@pytest.fixture
def tokens():
    return AuthTokens(access_token="access-1", refresh_token="refresh-1")


def _mock_adapter(tenant: Tenant):
    adapter = MagicMock()
    adapter.tenant = tenant
    adapter.login = AsyncMock(return_value=LoginResult(requires_otp=True, session_ref="sess-1"))
    adapter.register = AsyncMock(return_value=RegisterResult())
    adapter.verify_otp = AsyncMock(return_value=VerifyOtpResult())
    adapter.resend_otp = AsyncMock(return_value=ResendOtpResult(sent=True))
    adapter.forgot_password = AsyncMock(return_value=ForgotPasswordResult(sent=True))
    adapter.reset_password = AsyncMock(return_value=ResetPasswordResult(success=True))
    adapter.change_password = AsyncMock(return_value=ChangePasswordResult(success=True))
    adapter.aclose = AsyncMock()
    return adapter


@pytest.fixture
def homeowner_adapter():
    return _mock_adapter(Tenant.homeowner)


@pytest.fixture
def renter_adapter():
    return _mock_adapter(Tenant.renter_investor)


@pytest.fixture
def mock_token_store():
    store = MagicMock()
    store.save = AsyncMock()
    store.clear = AsyncMock()
    store.get_access_token = AsyncMock(return_value=None)
    return store


@pytest.fixture
def orchestrator(homeowner_adapter, renter_adapter, mock_token_store, otp_policies, clock):
    from src.app.use_cases.auth import SessionOrchestrator

    return SessionOrchestrator(
        {Tenant.homeowner: homeowner_adapter, Tenant.renter_investor: renter_adapter},
        mock_token_store,
        otp_policies=otp_policies,
        clock=clock,
    )

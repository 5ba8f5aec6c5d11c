"""
Auth Orchestrator Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class Tenant(str, Enum):
    """User population, each served by its own backend"""

    homeowner = "homeowner"
    renter_investor = "renter_investor"


class FlowType(str, Enum):
    """Authentication use case driven by a flow session"""

    login = "login"
    registration = "registration"
    forgot_password = "forgot_password"
    change_password = "change_password"


class FlowState(str, Enum):
    """State of a flow session"""

    idle = "idle"
    submitting = "submitting"
    awaiting_otp = "awaiting_otp"
    verifying = "verifying"
    awaiting_new_password = "awaiting_new_password"
    authenticated = "authenticated"
    completed = "completed"
    failed = "failed"


class AuthErrorKind(str, Enum):
    """Closed taxonomy of authentication errors"""

    invalid_credentials = "invalid_credentials"
    validation_failed = "validation_failed"
    otp_expired = "otp_expired"
    otp_incorrect = "otp_incorrect"
    otp_invalid_format = "otp_invalid_format"
    user_already_exists = "user_already_exists"
    role_mismatch = "role_mismatch"
    network_failure = "network_failure"
    unknown = "unknown"


class OtpPurpose(str, Enum):
    """What an OTP proves; values are the backend resend `type` values"""

    login = "login"
    signup = "signup"
    password_reset = "password_reset"


class RouteToken(str, Enum):
    """Symbolic navigation target handed to the router"""

    homeowner_home = "homeowner_home"
    renter_home = "renter_home"
    otp_verification = "otp_verification"
    login = "login"
    back = "back"


TERMINAL_STATES = frozenset(
    {FlowState.authenticated, FlowState.completed, FlowState.failed}
)

# States during which an OTP timer is armed
OTP_STATES = frozenset({FlowState.awaiting_otp, FlowState.verifying})

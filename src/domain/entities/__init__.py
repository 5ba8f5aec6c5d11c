"""
Auth Orchestrator Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    OTP_STATES,
    TERMINAL_STATES,
    AuthErrorKind,
    FlowState,
    FlowType,
    OtpPurpose,
    RouteToken,
    Tenant,
)

# Export all entities
from .auth_error import AuthError
from .identity import (
    AuthTokens,
    AuthUser,
    PhoneIdentifier,
    SessionIdentifier,
    UserName,
    VerificationFlags,
)
from .otp_timer import Clock, OtpTimer, OtpTimerState, format_countdown
from .flow_session import FLOW_STATES, FlowSession

__all__ = [
    # Enums
    "AuthErrorKind",
    "FlowState",
    "FlowType",
    "OtpPurpose",
    "RouteToken",
    "Tenant",
    "OTP_STATES",
    "TERMINAL_STATES",
    "FLOW_STATES",
    # Entities
    "AuthError",
    "AuthTokens",
    "AuthUser",
    "PhoneIdentifier",
    "SessionIdentifier",
    "UserName",
    "VerificationFlags",
    "Clock",
    "OtpTimer",
    "OtpTimerState",
    "FlowSession",
    "format_countdown",
]

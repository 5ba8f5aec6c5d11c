"""
Authentication Use Cases

Flow orchestration for both tenants.
"""

from .session_orchestrator import SessionOrchestrator, default_otp_policies
from .flow_state_machine import FlowStateMachine, TRANSITIONS
from .error_normalizer import ErrorNormalizer
from .navigation_resolver import NavigationResolver, resolve_route
from .dtos import (
    ChangePasswordInput,
    FlowOutcome,
    ForgotPasswordInput,
    LoginInput,
    NewPasswordInput,
    OtpPolicy,
    RegistrationInput,
    Route,
)

__all__ = [
    # Use Cases
    "SessionOrchestrator",
    "FlowStateMachine",
    "ErrorNormalizer",
    "NavigationResolver",
    "resolve_route",
    "default_otp_policies",
    "TRANSITIONS",
    # DTOs - Commands
    "LoginInput",
    "RegistrationInput",
    "ForgotPasswordInput",
    "ChangePasswordInput",
    "NewPasswordInput",
    # DTOs - Responses
    "FlowOutcome",
    "Route",
    "OtpPolicy",
]

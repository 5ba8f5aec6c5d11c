"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows (login, registration, forgot/change password)
"""

from .auth import (
    ErrorNormalizer,
    FlowOutcome,
    FlowStateMachine,
    NavigationResolver,
    SessionOrchestrator,
)

__all__ = [
    # Auth
    "SessionOrchestrator",
    "FlowStateMachine",
    "ErrorNormalizer",
    "NavigationResolver",
    "FlowOutcome",
]

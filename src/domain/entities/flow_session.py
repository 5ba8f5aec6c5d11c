"""
FlowSession Entity

Mutable unit of work for one authentication flow.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.base import generate_uuid
from src.domain.errors import IllegalTransitionError

from .auth_error import AuthError
from .enums import OTP_STATES, TERMINAL_STATES, FlowState, FlowType, Tenant
from .identity import AuthUser, SessionIdentifier
from .otp_timer import OtpTimer


# Legal states per flow type
FLOW_STATES = {
    FlowType.login: frozenset(
        {
            FlowState.idle,
            FlowState.submitting,
            FlowState.awaiting_otp,
            FlowState.verifying,
            FlowState.authenticated,
            FlowState.failed,
        }
    ),
    FlowType.registration: frozenset(
        {
            FlowState.idle,
            FlowState.submitting,
            FlowState.awaiting_otp,
            FlowState.verifying,
            FlowState.completed,
            FlowState.failed,
        }
    ),
    FlowType.forgot_password: frozenset(
        {
            FlowState.idle,
            FlowState.submitting,
            FlowState.awaiting_otp,
            FlowState.verifying,
            FlowState.awaiting_new_password,
            FlowState.completed,
            FlowState.failed,
        }
    ),
    FlowType.change_password: frozenset(
        {
            FlowState.idle,
            FlowState.submitting,
            FlowState.completed,
            FlowState.failed,
        }
    ),
}


class FlowSession(BaseModel):
    """
    FlowSession - one running login, registration, forgot-password or
    change-password flow.

    Business Rules:
    - tenant is fixed at creation; every call in the flow uses its adapter
    - state is always legal for flow_type (see FLOW_STATES)
    - otp is set exactly while state is awaiting_otp or verifying
    - only FlowStateMachine mutates a session
    - at most one backend call in flight (in_flight)
    - tokens are never stored here
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    id: str = Field(default_factory=generate_uuid)
    flow_type: FlowType
    tenant: Tenant = Field(frozen=True)
    state: FlowState = FlowState.idle
    identifier: SessionIdentifier = Field(default_factory=SessionIdentifier)
    otp: Optional[OtpTimer] = None
    # Fields collected so far: session_ref, otp, reset_code, reset_ref, ...
    pending_payload: Dict[str, Any] = Field(default_factory=dict)
    last_error: Optional[AuthError] = None
    attempts: int = Field(default=0, ge=0)
    in_flight: bool = False
    user: Optional[AuthUser] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def awaiting_otp(self) -> bool:
        return self.state in OTP_STATES

    def check_invariants(self) -> None:
        if self.state not in FLOW_STATES[self.flow_type]:
            raise IllegalTransitionError(
                f"State {self.state.value} is not legal for {self.flow_type.value}"
            )
        if (self.otp is not None) != (self.state in OTP_STATES):
            raise IllegalTransitionError(
                f"OTP timer presence does not match state {self.state.value}"
            )

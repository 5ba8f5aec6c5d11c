"""
Navigation Resolver

Pure mapping from a finished flow to the next screen.
"""

from typing import Optional

from src.domain.entities import (
    FlowState,
    FlowType,
    RouteToken,
    SessionIdentifier,
    Tenant,
    VerificationFlags,
)
from .dtos import Route


HOME_ROUTES = {
    Tenant.homeowner: RouteToken.homeowner_home,
    Tenant.renter_investor: RouteToken.renter_home,
}


def resolve_route(
    flow_type: FlowType,
    terminal_state: FlowState,
    role: Optional[Tenant] = None,
    verification_flags: Optional[VerificationFlags] = None,
    identifier: Optional[SessionIdentifier] = None,
) -> Optional[Route]:
    """
    Compute where the presentation layer goes next.

    Returns None when the caller should stay on the current screen, which
    is always the case for failed or unfinished flows.
    """
    if terminal_state == FlowState.failed:
        return None

    if flow_type == FlowType.login and terminal_state == FlowState.authenticated:
        if verification_flags is not None and not verification_flags.fully_verified:
            params = {"type": FlowType.login.value}
            if role is not None:
                params["role"] = role.value
            if identifier is not None:
                if identifier.email:
                    params["email"] = identifier.email
                if identifier.phone is not None:
                    params["phone"] = identifier.phone.to_wire()
            return Route(token=RouteToken.otp_verification, params=params)
        return Route(token=HOME_ROUTES.get(role, RouteToken.renter_home))

    if terminal_state == FlowState.completed:
        if flow_type in (FlowType.registration, FlowType.forgot_password):
            return Route(token=RouteToken.login)
        if flow_type == FlowType.change_password:
            return Route(token=RouteToken.back)

    return None


class NavigationResolver:
    """Stateless wrapper so the resolver can be injected and mocked"""

    def resolve(
        self,
        flow_type: FlowType,
        terminal_state: FlowState,
        role: Optional[Tenant] = None,
        verification_flags: Optional[VerificationFlags] = None,
        identifier: Optional[SessionIdentifier] = None,
    ) -> Optional[Route]:
        return resolve_route(
            flow_type, terminal_state, role, verification_flags, identifier
        )

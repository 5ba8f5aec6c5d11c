import pytest
from pydantic import ValidationError

from src.app.error import IllegalTransitionError
from src.app.use_cases.auth import TRANSITIONS, FlowStateMachine, OtpPolicy
from src.domain.entities import FLOW_STATES, FlowSession, FlowState, FlowType, OtpTimer, Tenant


@pytest.mark.parametrize("flow_type", list(FlowType))
def test_transition_graph_stays_within_legal_states(flow_type):
    """Test no transition leads to a state its flow type does not allow"""
    legal = FLOW_STATES[flow_type]
    for source, targets in TRANSITIONS[flow_type].items():
        assert source in legal
        assert targets <= legal


def test_otp_flows_require_policy(homeowner_adapter):
    session = FlowSession(flow_type=FlowType.login, tenant=Tenant.homeowner)

    with pytest.raises(ValueError):
        FlowStateMachine(session, homeowner_adapter)


def test_change_password_needs_no_policy(homeowner_adapter):
    session = FlowSession(flow_type=FlowType.change_password, tenant=Tenant.homeowner)

    machine = FlowStateMachine(session, homeowner_adapter)

    assert machine.session is session


def test_illegal_transition_raises(homeowner_adapter):
    session = FlowSession(flow_type=FlowType.change_password, tenant=Tenant.homeowner)
    machine = FlowStateMachine(session, homeowner_adapter)

    with pytest.raises(IllegalTransitionError):
        machine._transition(FlowState.awaiting_otp)
    assert session.state == FlowState.idle


def test_tenant_is_immutable():
    session = FlowSession(flow_type=FlowType.login, tenant=Tenant.homeowner)

    with pytest.raises(ValidationError):
        session.tenant = Tenant.renter_investor
    assert session.tenant == Tenant.homeowner


@pytest.mark.asyncio
async def test_start_twice_refused(homeowner_adapter, clock):
    session = FlowSession(flow_type=FlowType.login, tenant=Tenant.homeowner)
    machine = FlowStateMachine(
        session,
        homeowner_adapter,
        otp_policy=OtpPolicy(expiry_seconds=60, cooldown_seconds=60),
        clock=clock,
    )
    await machine.start({"identifier": "owner@example.com", "password": "pw"})

    result = await machine.start({"identifier": "owner@example.com", "password": "pw"})

    assert result.is_err()
    assert homeowner_adapter.login.await_count == 1
    assert session.state == FlowState.awaiting_otp
    session.check_invariants()


def test_timer_outside_otp_state_breaks_invariants(clock):
    """Test an armed timer on an idle session is reported as an illegal transition"""
    session = FlowSession(
        flow_type=FlowType.login, tenant=Tenant.homeowner, otp=OtpTimer(clock)
    )

    with pytest.raises(IllegalTransitionError):
        session.check_invariants()


def test_state_foreign_to_flow_breaks_invariants():
    session = FlowSession(
        flow_type=FlowType.change_password,
        tenant=Tenant.homeowner,
        state=FlowState.awaiting_otp,
    )

    with pytest.raises(IllegalTransitionError):
        session.check_invariants()

"""
Session Orchestrator

Single entry point for the presentation layer. Binds each flow to the
adapter of its tenant and hosts one state machine per open flow.
"""

import hashlib
import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel

from config import ApplicationConfig
from src.app.services.tenant_adapter import ITenantAdapter
from src.app.services.token_store import ITokenStore
from src.domain.entities import AuthErrorKind, Clock, FlowSession, FlowType, Tenant
from src.libs.result import Result, Return
from .dtos import FlowOutcome, OtpPolicy
from .error_normalizer import ErrorNormalizer
from .flow_state_machine import FlowStateMachine
from .navigation_resolver import NavigationResolver

logger = logging.getLogger(__name__)


def default_otp_policies(config=ApplicationConfig) -> Dict[FlowType, OtpPolicy]:
    cooldown = config.OTP_RESEND_COOLDOWN_SECONDS
    return {
        FlowType.login: OtpPolicy(
            expiry_seconds=config.LOGIN_OTP_EXPIRY_SECONDS,
            cooldown_seconds=cooldown,
        ),
        FlowType.registration: OtpPolicy(
            expiry_seconds=config.REGISTRATION_OTP_EXPIRY_SECONDS,
            cooldown_seconds=cooldown,
        ),
        FlowType.forgot_password: OtpPolicy(
            expiry_seconds=config.FORGOT_PASSWORD_OTP_EXPIRY_SECONDS,
            cooldown_seconds=cooldown,
        ),
    }


class SessionOrchestrator:
    """
    Facade over all running authentication flows.

    Business Rules:
    - The tenant is a required argument of start(); no default is guessed
    - A session keeps the adapter chosen at start for its whole life
    - A repeated start() with identical arguments while the first is still
      submitting joins the first session instead of calling the backend again
    - Sessions are dropped once they reach a terminal state or are abandoned;
      their ids are refused afterwards
    - Sessions share no mutable state
    - aclose() releases the backend connections of every adapter

    Every method returns Err(AuthError) when the call was refused without
    touching a session, otherwise Ok(FlowOutcome).
    """

    def __init__(
        self,
        adapters: Mapping[Tenant, ITenantAdapter],
        token_store: ITokenStore,
        otp_policies: Optional[Mapping[FlowType, OtpPolicy]] = None,
        resolver: Optional[NavigationResolver] = None,
        normalizer: Optional[ErrorNormalizer] = None,
        clock: Optional[Clock] = None,
    ):
        self._adapters = dict(adapters)
        self._token_store = token_store
        self._otp_policies = dict(default_otp_policies())
        if otp_policies:
            self._otp_policies.update(otp_policies)
        self._resolver = resolver or NavigationResolver()
        self._normalizer = normalizer or ErrorNormalizer()
        self._clock = clock
        self._machines: Dict[str, FlowStateMachine] = {}
        self._pending_starts: Dict[str, str] = {}

    @property
    def active_session_ids(self) -> list:
        return list(self._machines)

    async def start(
        self,
        flow_type: Union[FlowType, str, None],
        tenant: Union[Tenant, str, None],
        initial_input: Any,
    ) -> Result[FlowOutcome]:
        """Create a session and perform its first submit"""
        try:
            flow_type = FlowType(flow_type)
        except ValueError:
            return self._refuse(f"Unknown flow type: {flow_type!r}")
        try:
            tenant = Tenant(tenant)
        except ValueError:
            return self._refuse("Select whether you are a homeowner or a renter/investor")

        adapter = self._adapters.get(tenant)
        if adapter is None:
            return self._refuse(f"No backend configured for {tenant.value}")

        start_key = self._start_key(flow_type, tenant, initial_input)
        pending_id = self._pending_starts.get(start_key)
        if pending_id is not None and pending_id in self._machines:
            logger.info(f"Joining in-flight {flow_type.value} start as session {pending_id}")
            return Return.ok(self._outcome(self._machines[pending_id]))

        session = FlowSession(flow_type=flow_type, tenant=tenant)
        machine = FlowStateMachine(
            session,
            adapter,
            otp_policy=self._otp_policies.get(flow_type),
            token_store=self._token_store,
            normalizer=self._normalizer,
            clock=self._clock,
        )
        self._machines[session.id] = machine
        self._pending_starts[start_key] = session.id
        logger.info(f"Session {session.id}: starting {flow_type.value} for {tenant.value}")
        try:
            result = await machine.start(initial_input)
        finally:
            self._pending_starts.pop(start_key, None)
        return self._finish(machine, result)

    async def submit_otp(self, session_id: str, code: str) -> Result[FlowOutcome]:
        machine = self._machines.get(session_id)
        if machine is None:
            return self._unknown_session(session_id)
        return self._finish(machine, await machine.submit_otp(code))

    async def resend_otp(self, session_id: str) -> Result[FlowOutcome]:
        machine = self._machines.get(session_id)
        if machine is None:
            return self._unknown_session(session_id)
        return self._finish(machine, await machine.resend_otp())

    async def submit_new_password(
        self, session_id: str, password: str, confirm_password: Optional[str] = None
    ) -> Result[FlowOutcome]:
        machine = self._machines.get(session_id)
        if machine is None:
            return self._unknown_session(session_id)
        return self._finish(
            machine, await machine.submit_new_password(password, confirm_password)
        )

    def abandon(self, session_id: str) -> Result[None]:
        """Drop a session immediately; no backend call is made"""
        machine = self._machines.pop(session_id, None)
        if machine is None:
            return self._unknown_session(session_id)
        machine.abandon()
        return Return.ok(None)

    def snapshot(self, session_id: str) -> Result[FlowOutcome]:
        """Read-only poll used to render countdowns"""
        machine = self._machines.get(session_id)
        if machine is None:
            return self._unknown_session(session_id)
        return Return.ok(self._outcome(machine))

    async def logout(self) -> None:
        await self._token_store.clear()
        logger.info("Stored tokens cleared")

    async def aclose(self) -> None:
        """Close every adapter's backend connection"""
        for tenant, adapter in self._adapters.items():
            await adapter.aclose()
            logger.debug(f"Closed {tenant.value} adapter")

    def _finish(self, machine: FlowStateMachine, result: Result[FlowSession]) -> Result[FlowOutcome]:
        if result.is_err():
            return Return.err(result.error)
        if machine.abandoned:
            # Late result of a call that outlived its session
            return self._unknown_session(machine.session.id)
        outcome = self._outcome(machine)
        session = machine.session
        if session.is_terminal:
            self._machines.pop(session.id, None)
            logger.info(f"Session {session.id}: finished as {session.state.value}")
        return Return.ok(outcome)

    def _outcome(self, machine: FlowStateMachine) -> FlowOutcome:
        session = machine.session
        timer = session.otp
        route = None
        if session.is_terminal:
            route = self._resolver.resolve(
                session.flow_type,
                session.state,
                role=session.tenant,
                verification_flags=(
                    session.user.verification_flags if session.user else None
                ),
                identifier=session.identifier,
            )
        return FlowOutcome(
            session_id=session.id,
            flow_type=session.flow_type,
            tenant=session.tenant,
            state=session.state,
            attempts=session.attempts,
            seconds_remaining=timer.seconds_remaining() if timer else None,
            resend_in=timer.resend_in() if timer else None,
            can_resend=timer.can_resend() if timer else False,
            error=session.last_error,
            route=route,
            user=session.user,
        )

    def _unknown_session(self, session_id: str) -> Result[Any]:
        return self._refuse(f"Unknown or abandoned session: {session_id}")

    def _refuse(self, message: str) -> Result[Any]:
        logger.info(f"Refused: {message}")
        return Return.err(
            self._normalizer.local(AuthErrorKind.validation_failed, message)
        )

    @staticmethod
    def _start_key(flow_type: FlowType, tenant: Tenant, initial_input: Any) -> str:
        if isinstance(initial_input, BaseModel):
            initial_input = initial_input.model_dump(mode="json")
        body = json.dumps(
            [flow_type.value, tenant.value, initial_input], sort_keys=True, default=str
        )
        # Hashed so no password is kept in the key
        return hashlib.sha256(body.encode()).hexdigest()

"""
Flow State Machine

Drives one FlowSession through the state graph of its flow type, calling
the tenant adapter bound to the session and normalizing every failure.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from src.app.error import IllegalTransitionError
from src.app.services.dtos import LoginResult, OtpContext
from src.app.services.tenant_adapter import ITenantAdapter
from src.app.services.token_store import ITokenStore
from src.domain.entities import (
    OTP_STATES,
    AuthError,
    AuthErrorKind,
    AuthTokens,
    AuthUser,
    Clock,
    FlowSession,
    FlowState,
    FlowType,
    OtpPurpose,
    OtpTimer,
    SessionIdentifier,
)
from src.libs.result import Result, Return
from .dtos import (
    FLOW_INPUTS,
    ChangePasswordInput,
    ForgotPasswordInput,
    LoginInput,
    NewPasswordInput,
    OtpPolicy,
    RegistrationInput,
    first_error_message,
)
from .error_normalizer import ErrorNormalizer
from .validators import validate_otp

logger = logging.getLogger(__name__)

T = TypeVar("T")

S = FlowState

TRANSITIONS = {
    FlowType.login: {
        S.idle: {S.submitting, S.failed},
        S.submitting: {S.authenticated, S.awaiting_otp, S.failed},
        S.awaiting_otp: {S.awaiting_otp, S.verifying},
        S.verifying: {S.authenticated, S.awaiting_otp, S.failed},
    },
    FlowType.registration: {
        S.idle: {S.submitting, S.failed},
        S.submitting: {S.awaiting_otp, S.completed, S.failed},
        S.awaiting_otp: {S.awaiting_otp, S.verifying},
        S.verifying: {S.completed, S.awaiting_otp, S.failed},
    },
    FlowType.forgot_password: {
        S.idle: {S.submitting, S.failed},
        S.submitting: {S.awaiting_otp, S.completed, S.failed},
        S.awaiting_otp: {S.awaiting_otp, S.verifying},
        S.verifying: {S.awaiting_new_password, S.awaiting_otp, S.failed},
        S.awaiting_new_password: {S.submitting},
    },
    FlowType.change_password: {
        S.idle: {S.submitting, S.failed},
        S.submitting: {S.completed, S.failed},
    },
}

OTP_PURPOSES = {
    FlowType.login: OtpPurpose.login,
    FlowType.registration: OtpPurpose.signup,
    FlowType.forgot_password: OtpPurpose.password_reset,
}


class FlowStateMachine:
    """
    State machine for a single flow session.

    Business Rules:
    - Entering awaiting_otp from submitting, or a successful resend, arms a
      fresh OTP timer and resets attempts to 0
    - Malformed or locally expired codes are rejected without a backend call
      and without counting an attempt
    - A backend verify rejection counts an attempt and returns to awaiting_otp;
      a network failure returns without counting. No client-side lockout
    - Resend is refused while the cooldown runs and clears the entered code
    - One backend call at a time; calls made meanwhile are ignored
    - Raw adapter errors never leave the machine, only AuthError does

    Every entry point returns Ok(session) when the call was processed (the
    outcome, including failures, is on the session), or Err(AuthError) when
    it was refused and the session is untouched.
    """

    def __init__(
        self,
        session: FlowSession,
        adapter: ITenantAdapter,
        otp_policy: Optional[OtpPolicy] = None,
        token_store: Optional[ITokenStore] = None,
        normalizer: Optional[ErrorNormalizer] = None,
        clock: Optional[Clock] = None,
    ):
        if session.flow_type != FlowType.change_password and otp_policy is None:
            raise ValueError(f"{session.flow_type.value} flow requires an OTP policy")
        self._session = session
        self._adapter = adapter
        self._otp_policy = otp_policy
        self._token_store = token_store
        self._normalizer = normalizer or ErrorNormalizer()
        self._clock = clock
        self._abandoned = False

    @property
    def session(self) -> FlowSession:
        return self._session

    @property
    def abandoned(self) -> bool:
        return self._abandoned

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def start(self, initial_input: Any) -> Result[FlowSession]:
        """Validate the form input and perform the first backend call"""
        refused = self._refuse_unless(S.idle, "This flow has already started")
        if refused is not None:
            return refused
        if self._session.in_flight:
            return Return.ok(self._session)

        input_model = FLOW_INPUTS[self._session.flow_type]
        try:
            flow_input = (
                initial_input
                if isinstance(initial_input, input_model)
                else input_model.model_validate(
                    initial_input.model_dump()
                    if isinstance(initial_input, BaseModel)
                    else initial_input
                )
            )
        except ValidationError as exc:
            self._fail(
                self._normalizer.local(
                    AuthErrorKind.validation_failed, first_error_message(exc)
                )
            )
            return Return.ok(self._session)

        self._session.identifier = self._identifier_of(flow_input)
        self._session.last_error = None
        self._transition(S.submitting)

        if isinstance(flow_input, LoginInput):
            await self._submit_login(flow_input)
        elif isinstance(flow_input, RegistrationInput):
            await self._submit_registration(flow_input)
        elif isinstance(flow_input, ForgotPasswordInput):
            await self._submit_forgot_password(flow_input)
        elif isinstance(flow_input, ChangePasswordInput):
            await self._submit_change_password(flow_input)
        return Return.ok(self._session)

    async def submit_otp(self, code: str) -> Result[FlowSession]:
        """Verify the code the user typed"""
        refused = self._refuse_unless(S.awaiting_otp, "No code is expected at this step")
        if refused is not None:
            return refused
        if self._session.in_flight:
            return Return.ok(self._session)

        shape_error = validate_otp(code)
        if shape_error:
            self._reject_locally(AuthErrorKind.otp_invalid_format, shape_error)
            return Return.ok(self._session)
        if self._session.otp.is_expired():
            self._reject_locally(AuthErrorKind.otp_expired)
            return Return.ok(self._session)

        self._session.pending_payload["otp"] = code
        self._session.last_error = None
        self._transition(S.verifying)

        context = OtpContext(
            purpose=OTP_PURPOSES[self._session.flow_type],
            identifier=self._session.identifier,
            session_ref=self._session.pending_payload.get("session_ref"),
        )
        result = await self._call(lambda: self._adapter.verify_otp(context, code))
        if result.is_err():
            if result.error.kind != AuthErrorKind.network_failure:
                self._session.attempts += 1
            self._session.last_error = result.error
            self._transition(S.awaiting_otp)
            return Return.ok(self._session)

        verified = result.value
        flow_type = self._session.flow_type
        if flow_type == FlowType.login:
            await self._authenticate(verified.user, verified.tokens)
        elif flow_type == FlowType.registration:
            if verified.user is not None:
                self._session.user = verified.user
            # Never signs in after registration; issued tokens are dropped
            self._transition(S.completed)
        else:
            self._session.pending_payload["reset_code"] = code
            self._session.pending_payload["reset_ref"] = verified.reset_ref
            self._transition(S.awaiting_new_password)
        return Return.ok(self._session)

    async def resend_otp(self) -> Result[FlowSession]:
        """Request a new code once the cooldown is over"""
        refused = self._refuse_unless(S.awaiting_otp, "No code can be resent at this step")
        if refused is not None:
            return refused
        if self._session.in_flight:
            return Return.ok(self._session)

        timer = self._session.otp
        if not timer.can_resend():
            wait = timer.resend_in()
            logger.info(
                f"Session {self._session.id}: resend refused, {wait}s of cooldown left"
            )
            return Return.err(
                self._normalizer.local(
                    AuthErrorKind.validation_failed,
                    f"Please wait {wait} seconds before requesting a new code",
                )
            )

        purpose = OTP_PURPOSES[self._session.flow_type]
        identifier = self._resend_identifier()
        result = await self._call(
            lambda: self._adapter.resend_otp(identifier, purpose)
        )
        if result.is_err():
            self._session.last_error = result.error
            return Return.ok(self._session)
        if not result.value.sent:
            self._session.last_error = self._normalizer.local(
                AuthErrorKind.unknown, "Could not send a new code. Please try again"
            )
            return Return.ok(self._session)

        self._session.pending_payload.pop("otp", None)
        self._session.last_error = None
        self._arm_otp(timer)
        self._transition(S.awaiting_otp)
        return Return.ok(self._session)

    async def submit_new_password(
        self, password: str, confirm_password: Optional[str] = None
    ) -> Result[FlowSession]:
        """Final forgot-password step: set the new password"""
        refused = self._refuse_unless(
            S.awaiting_new_password, "A new password is not expected at this step"
        )
        if refused is not None:
            return refused
        if self._session.in_flight:
            return Return.ok(self._session)

        try:
            new_password = NewPasswordInput(
                password=password, confirm_password=confirm_password
            )
        except ValidationError as exc:
            self._reject_locally(
                AuthErrorKind.validation_failed, first_error_message(exc)
            )
            return Return.ok(self._session)

        payload = self._session.pending_payload
        email = self._session.identifier.email or ""
        code = payload["reset_code"]
        reset_ref = payload.get("reset_ref")

        self._session.last_error = None
        self._transition(S.submitting)
        result = await self._call(
            lambda: self._adapter.reset_password(
                email, code, new_password.password, reset_ref
            )
        )
        payload.pop("reset_code", None)
        payload.pop("reset_ref", None)
        payload.pop("otp", None)
        if result.is_err():
            self._fail(result.error)
        elif not result.value.success:
            self._fail(
                self._normalizer.local(
                    AuthErrorKind.unknown, "Password reset failed. Please try again"
                )
            )
        else:
            self._transition(S.completed)
        return Return.ok(self._session)

    def abandon(self) -> None:
        """Invalidate the machine; later calls are refused"""
        self._abandoned = True
        self._session.pending_payload.clear()
        logger.info(f"Session {self._session.id}: abandoned in {self._session.state.value}")

    # ------------------------------------------------------------------
    # First submit per flow
    # ------------------------------------------------------------------

    async def _submit_login(self, flow_input: LoginInput) -> None:
        result = await self._call(
            lambda: self._adapter.login(flow_input.identifier, flow_input.password)
        )
        if result.is_err():
            self._fail(result.error)
            return
        login: LoginResult = result.value
        if login.user is not None:
            self._session.user = login.user
        if login.requires_otp:
            if login.session_ref:
                self._session.pending_payload["session_ref"] = login.session_ref
            self._arm_otp()
            self._transition(S.awaiting_otp)
            return
        await self._authenticate(login.user, login.tokens)

    async def _submit_registration(self, flow_input: RegistrationInput) -> None:
        result = await self._call(lambda: self._adapter.register(flow_input.to_profile()))
        if result.is_err():
            self._fail(result.error)
            return
        registered = result.value
        if registered.user is not None:
            self._session.user = registered.user
        if registered.requires_verification:
            self._arm_otp()
            self._transition(S.awaiting_otp)
        else:
            self._transition(S.completed)

    async def _submit_forgot_password(self, flow_input: ForgotPasswordInput) -> None:
        result = await self._call(lambda: self._adapter.forgot_password(flow_input.email))
        if result.is_err():
            self._fail(result.error)
            return
        if not result.value.sent:
            self._fail(
                self._normalizer.local(
                    AuthErrorKind.unknown, "Could not send a reset code. Please try again"
                )
            )
            return
        self._arm_otp()
        self._transition(S.awaiting_otp)

    async def _submit_change_password(self, flow_input: ChangePasswordInput) -> None:
        result = await self._call(
            lambda: self._adapter.change_password(
                flow_input.current_password,
                flow_input.new_password,
                flow_input.confirm_password,
            )
        )
        if result.is_err():
            self._fail(result.error)
        elif not result.value.success:
            self._fail(
                self._normalizer.local(
                    AuthErrorKind.unknown, "Failed to change password"
                )
            )
        else:
            self._transition(S.completed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _authenticate(
        self, user: Optional[AuthUser], tokens: Optional[AuthTokens]
    ) -> None:
        if user is not None:
            self._session.user = user
        if tokens is not None and self._token_store is not None and not self._abandoned:
            saved = await self._call(lambda: self._token_store.save(tokens))
            if saved.is_err():
                self._fail(saved.error)
                return
        self._transition(S.authenticated)

    async def _call(self, operation: Callable[[], Awaitable[T]]) -> Result[T]:
        self._session.in_flight = True
        try:
            return Return.ok(await operation())
        except Exception as exc:
            return Return.err(self._normalizer.normalize(exc))
        finally:
            self._session.in_flight = False

    def _arm_otp(self, timer: Optional[OtpTimer] = None) -> None:
        timer = timer or OtpTimer(self._clock)
        timer.start(self._otp_policy.expiry_seconds, self._otp_policy.cooldown_seconds)
        self._session.otp = timer
        self._session.attempts = 0

    def _transition(self, target: FlowState) -> None:
        session = self._session
        allowed = TRANSITIONS[session.flow_type].get(session.state, set())
        if target not in allowed:
            raise IllegalTransitionError(
                f"{session.flow_type.value}: {session.state.value} -> {target.value}"
            )
        if target not in OTP_STATES:
            session.otp = None
        logger.info(
            f"Session {session.id} ({session.flow_type.value}/{session.tenant.value}): "
            f"{session.state.value} -> {target.value}"
        )
        session.state = target
        session.check_invariants()

    def _fail(self, error: AuthError) -> None:
        self._session.last_error = error
        self._transition(S.failed)

    def _reject_locally(
        self, kind: AuthErrorKind, message: Optional[str] = None
    ) -> None:
        error = self._normalizer.local(kind, message)
        logger.info(f"Session {self._session.id}: rejected locally ({kind.value})")
        self._session.last_error = error

    def _refuse_unless(
        self, expected: FlowState, message: str
    ) -> Optional[Result[FlowSession]]:
        if self._abandoned:
            return Return.err(
                self._normalizer.local(
                    AuthErrorKind.validation_failed, "This flow was abandoned"
                )
            )
        if self._session.in_flight or self._session.state == expected:
            return None
        return Return.err(
            self._normalizer.local(AuthErrorKind.validation_failed, message)
        )

    def _resend_identifier(self) -> SessionIdentifier:
        """Session identifier, completed with the e-mail the backend returned"""
        identifier = self._session.identifier
        user = self._session.user
        if identifier.email or user is None or not user.email:
            return identifier
        return SessionIdentifier(email=user.email, phone=identifier.phone)

    @staticmethod
    def _identifier_of(flow_input: BaseModel) -> SessionIdentifier:
        if isinstance(flow_input, LoginInput):
            if isinstance(flow_input.identifier, str):
                return SessionIdentifier(email=flow_input.identifier)
            return SessionIdentifier(phone=flow_input.identifier)
        if isinstance(flow_input, RegistrationInput):
            return SessionIdentifier(
                email=flow_input.email, phone=flow_input.to_profile().phone
            )
        if isinstance(flow_input, ForgotPasswordInput):
            return SessionIdentifier(email=flow_input.email)
        return SessionIdentifier()

"""
OtpTimer Entity

Countdown for OTP expiry and resend cooldown, driven by an external poll.
"""

import math
import time
from typing import Callable, Optional

from pydantic import BaseModel

Clock = Callable[[], float]


def _remaining(deadline: float, now: float) -> int:
    return max(0, math.ceil(deadline - now))


class OtpTimerState(BaseModel):
    """
    Immutable view of the two OTP clocks.

    expires_at and resend_eligible_at are absolute readings of the timer's
    clock; they are independent of each other.
    """

    expires_at: float
    resend_eligible_at: float

    def seconds_remaining(self, now: float) -> int:
        return _remaining(self.expires_at, now)

    def resend_in(self, now: float) -> int:
        return _remaining(self.resend_eligible_at, now)


class OtpTimer:
    """
    Pure time tracking, no I/O and no background thread.

    The presentation layer pulls tick() about once a second. Readings
    never increase between two re-arms, even if the clock steps back.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or time.monotonic
        self._state: Optional[OtpTimerState] = None
        self._last_remaining = 0
        self._last_resend_in = 0

    @property
    def state(self) -> Optional[OtpTimerState]:
        return self._state

    @property
    def armed(self) -> bool:
        return self._state is not None

    def start(self, expiry_seconds: int, cooldown_seconds: int) -> OtpTimerState:
        if expiry_seconds < 0 or cooldown_seconds < 0:
            raise ValueError("OTP durations must be non-negative")
        now = self._clock()
        self._state = OtpTimerState(
            expires_at=now + expiry_seconds,
            resend_eligible_at=now + cooldown_seconds,
        )
        self._last_remaining = self._state.seconds_remaining(now)
        self._last_resend_in = self._state.resend_in(now)
        return self._state

    def reset(self, expiry_seconds: int, cooldown_seconds: int) -> OtpTimerState:
        """Re-arm both clocks after a successful resend"""
        return self.start(expiry_seconds, cooldown_seconds)

    def tick(self) -> int:
        if self._state is None:
            return 0
        now = self._clock()
        self._last_remaining = min(
            self._last_remaining, self._state.seconds_remaining(now)
        )
        self._last_resend_in = min(self._last_resend_in, self._state.resend_in(now))
        return self._last_remaining

    def seconds_remaining(self) -> int:
        return self.tick()

    def resend_in(self) -> int:
        self.tick()
        return self._last_resend_in

    def is_expired(self) -> bool:
        return self.seconds_remaining() == 0

    def can_resend(self) -> bool:
        return self.resend_in() == 0


def format_countdown(seconds: int) -> str:
    """Render remaining seconds as m:ss"""
    seconds = max(0, int(seconds))
    minutes, rest = divmod(seconds, 60)
    return f"{minutes}:{rest:02d}"

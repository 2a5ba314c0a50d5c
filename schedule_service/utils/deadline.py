"""Explicit deadlines passed across call boundaries."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

Clock = Callable[[], float]


@dataclass(frozen=True)
class Deadline:
    """
    An absolute point in time after which an operation must be abandoned.

    Deadlines are measured on a monotonic clock. A child deadline is always
    the tighter of its parent and its own bound, so an inner call can never
    outlive the outer one.
    """

    expires_at: float
    clock: Clock = time.monotonic

    @classmethod
    def after(cls, seconds: float, clock: Optional[Clock] = None) -> 'Deadline':
        """Create a deadline ``seconds`` from now."""
        clock = clock or time.monotonic
        return cls(expires_at=clock() + seconds, clock=clock)

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - self.clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def child(self, seconds: float) -> 'Deadline':
        """Return a deadline ``seconds`` from now, capped by this one."""
        return Deadline(
            expires_at=min(self.expires_at, self.clock() + seconds),
            clock=self.clock,
        )

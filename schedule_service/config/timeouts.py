"""Deadline settings for requests and storage calls."""

import os
from dataclasses import dataclass
from typing import Optional


def _seconds_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass
class TimeoutConfig:
    """
    Timeouts applied by the gateway and the event service.

    Fields left unset are read from the environment:
        REQUEST_TIMEOUT_SECONDS: bound on a whole request (default 15)
        STORE_TIMEOUT_SECONDS: bound on a single database call (default 5)
        PING_TIMEOUT_SECONDS: bound on the startup connectivity check (default 5)
    """

    request_timeout: Optional[float] = None
    store_timeout: Optional[float] = None
    ping_timeout: Optional[float] = None

    def __post_init__(self):
        """Load unset values from the environment."""
        if self.request_timeout is None:
            self.request_timeout = _seconds_from_env('REQUEST_TIMEOUT_SECONDS', 15.0)
        if self.store_timeout is None:
            self.store_timeout = _seconds_from_env('STORE_TIMEOUT_SECONDS', 5.0)
        if self.ping_timeout is None:
            self.ping_timeout = _seconds_from_env('PING_TIMEOUT_SECONDS', 5.0)

        # A storage call can never outlive the request that issued it
        self.store_timeout = min(self.store_timeout, self.request_timeout)

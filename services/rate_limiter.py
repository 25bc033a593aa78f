"""
Pacing between successive boats.

The pricing API is protected by a fixed pause after each boat; there is no
per-slot delay. The sleep function is injectable so tests never wait.
"""

import time
from typing import Callable, Protocol

import structlog

logger = structlog.get_logger(__name__)


class RateLimiter(Protocol):
    """Anything that can block until the next unit of work may start."""

    def wait(self) -> None:
        ...


class FixedDelayRateLimiter:
    """Sleeps a fixed delay on every wait() call."""

    def __init__(self, delay_seconds: float, sleep: Callable[[float], None] = time.sleep):
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def wait(self) -> None:
        if self.delay_seconds == 0:
            return
        logger.debug("rate_limit_wait", delay_seconds=self.delay_seconds)
        self._sleep(self.delay_seconds)

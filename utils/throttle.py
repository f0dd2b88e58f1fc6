"""
Fixed-delay throttle used between page requests.

No adaptive backoff: every call waits until `delay_seconds` have passed
since the previous one.
"""

import time
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class FixedDelayThrottle:
    """
    Enforce a minimum gap between consecutive operations.

    The first call never waits.

    Usage:
        throttle = FixedDelayThrottle(1.5)
        for url in urls:
            throttle.wait()
            fetch(url)
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        self.delay_seconds = max(0.0, delay_seconds)
        self._sleep = sleep
        self._clock = clock
        self._last_call: Optional[float] = None

    def wait(self) -> float:
        """
        Sleep for whatever is left of the delay.

        Returns:
            Seconds actually slept
        """
        slept = 0.0
        if self._last_call is not None and self.delay_seconds > 0:
            remaining = self.delay_seconds - (self._clock() - self._last_call)
            if remaining > 0:
                logger.debug("throttle_sleep", seconds=round(remaining, 3))
                self._sleep(remaining)
                slept = remaining
        self._last_call = self._clock()
        return slept

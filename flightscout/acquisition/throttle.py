"""
Adaptive Throttle

Single-threaded, self-tuning pause between provider calls. The delay doubles
on every rate-limit signal, keeps growing while calls happen within the
cooldown window after the last 429, and otherwise decays back towards the
floor. One instance is shared by all acquisition calls of a run, since the
provider's rate limit applies to the whole process.
"""

import logging
import time
from typing import Callable, Optional

from flightscout.utils import current_time_ms

from .constants import (
    THROTTLE_CAP_MS,
    THROTTLE_COOLDOWN_MS,
    THROTTLE_DECAY,
    THROTTLE_FLOOR_MS,
    THROTTLE_GROWTH,
)

logger = logging.getLogger(__name__)


class AdaptiveThrottle:
    """
    Rate state: current delay and time of the last rate limit.

    Not a concurrent rate limiter; callers use it from one flow of control.
    """

    def __init__(
        self,
        floor_ms: float = THROTTLE_FLOOR_MS,
        cap_ms: float = THROTTLE_CAP_MS,
        cooldown_ms: float = THROTTLE_COOLDOWN_MS,
        growth: float = THROTTLE_GROWTH,
        decay: float = THROTTLE_DECAY,
        clock: Callable[[], int] = current_time_ms,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize throttle.

        Args:
            floor_ms: Minimum delay between calls
            cap_ms: Maximum delay between calls
            cooldown_ms: Period after a 429 during which delays keep growing
            growth: Factor applied per call inside the cooldown
            decay: Factor applied per call outside the cooldown
            clock: Millisecond clock
            sleep: Sleep function taking seconds
        """
        if not 0 <= floor_ms <= cap_ms:
            raise ValueError("Throttle requires 0 <= floor_ms <= cap_ms")

        self.floor_ms = floor_ms
        self.cap_ms = cap_ms
        self.cooldown_ms = cooldown_ms
        self.growth = growth
        self.decay = decay
        self.clock = clock
        self.sleep = sleep

        self.current_delay_ms: float = floor_ms
        self.last_rate_limit_ms: Optional[int] = None
        self.rate_limit_count = 0

    @classmethod
    def from_config(cls, config, **kwargs) -> "AdaptiveThrottle":
        settings = config.throttle_settings
        settings.update(kwargs)
        return cls(**settings)

    def record_rate_limit(self) -> None:
        """Double the delay (capped) after a 429."""
        self.current_delay_ms = min(self.current_delay_ms * 2, self.cap_ms)
        self.last_rate_limit_ms = self.clock()
        self.rate_limit_count += 1
        logger.debug(f"Throttle raised to {self.current_delay_ms:.0f}ms")

    def in_cooldown(self) -> bool:
        if self.last_rate_limit_ms is None:
            return False
        return self.clock() - self.last_rate_limit_ms < self.cooldown_ms

    def next_delay_ms(self) -> float:
        """
        Compute and store the delay before the next call.

        Returns:
            Delay in milliseconds, always within [floor_ms, cap_ms]
        """
        if self.in_cooldown():
            delay = min(self.current_delay_ms * self.growth, self.cap_ms)
        else:
            delay = max(self.current_delay_ms * self.decay, self.floor_ms)

        self.current_delay_ms = delay
        return delay

    def wait(self) -> float:
        """Sleep for the next delay and return it in milliseconds."""
        delay = self.next_delay_ms()
        self.sleep(delay / 1000)
        return delay

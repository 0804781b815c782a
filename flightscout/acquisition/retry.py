"""
Retry with Exponential Backoff

Wraps provider calls so that rate limiting (HTTP 429) is retried with an
exponentially growing pause and every other failure degrades to an empty
result instead of aborting the batch.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .constants import (
    BACKOFF_BASE_MS,
    BACKOFF_MULTIPLIER,
    MAX_RETRY_ATTEMPTS,
    RATE_LIMIT_STATUS,
)
from .throttle import AdaptiveThrottle

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Bounded retry budget for a single provider call."""

    max_attempts: int = MAX_RETRY_ATTEMPTS
    base_delay_ms: float = BACKOFF_BASE_MS
    multiplier: float = BACKOFF_MULTIPLIER

    def delay_ms(self, attempt: int) -> float:
        """Backoff before retrying after the given (1-based) failed attempt."""
        return backoff_delay_ms(attempt, self.base_delay_ms, self.multiplier)

    @classmethod
    def from_config(cls, config) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_retry_attempts,
            base_delay_ms=config.backoff_base_ms,
            multiplier=config.backoff_multiplier,
        )


def backoff_delay_ms(attempt: int, base_delay_ms: float, multiplier: float) -> float:
    """
    Exponential backoff: base * multiplier ** (attempt - 1).

    Example:
        >>> [backoff_delay_ms(n, 1500, 2) for n in (1, 2, 3)]
        [1500, 3000, 6000]
    """
    return base_delay_ms * multiplier ** (attempt - 1)


def is_rate_limited(error: BaseException) -> bool:
    """Check whether an error signals provider rate limiting."""
    if getattr(error, "status_code", None) == RATE_LIMIT_STATUS:
        return True
    return str(RATE_LIMIT_STATUS) in str(error)


def fetch_with_retry(
    fn: Callable[[], T],
    policy: Optional[RetryPolicy] = None,
    label: str = "request",
    default: Optional[Callable[[], Any]] = list,
    throttle: Optional[AdaptiveThrottle] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call fn, retrying on rate limiting.

    Rate-limited attempts are retried after an exponential backoff (or, when
    an adaptive throttle is given, after the throttle's raised delay) until
    the policy's attempts are used up. Any other exception is not retried.
    In both failure cases the error is logged and default() is returned.

    Args:
        fn: Zero-argument callable performing the provider call
        policy: Retry budget (default: RetryPolicy())
        label: Description used in log messages (e.g. 'arrivals for HAM')
        default: Factory for the degraded result (default: empty list)
        throttle: Shared adaptive throttle notified of every 429
        sleep: Sleep function taking seconds

    Returns:
        fn's result, or default() after a non-retryable error or exhaustion
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return fn()
        except Exception as e:
            if not is_rate_limited(e):
                logger.error(f"Failed to fetch {label}: {e}")
                break

            if throttle is not None:
                throttle.record_rate_limit()

            if attempt >= policy.max_attempts:
                logger.error(
                    f"Giving up on {label} after {attempt} rate-limited attempts"
                )
                break

            if throttle is not None:
                delay_ms = throttle.current_delay_ms
            else:
                delay_ms = policy.delay_ms(attempt)

            logger.warning(
                f"Rate limit hit for {label} (429 Too Many Requests). "
                f"Retrying in {delay_ms:.0f}ms... "
                f"(Attempt {attempt}/{policy.max_attempts})"
            )
            sleep(delay_ms / 1000)

    return default() if default is not None else None

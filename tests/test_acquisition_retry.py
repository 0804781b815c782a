"""
Tests for retry with exponential backoff.
"""

from unittest.mock import Mock

import pytest

from flightscout.acquisition.client import ProviderError
from flightscout.acquisition.retry import (
    RetryPolicy,
    backoff_delay_ms,
    fetch_with_retry,
    is_rate_limited,
)
from flightscout.acquisition.throttle import AdaptiveThrottle
from flightscout.config import Config


def rate_limited():
    return ProviderError("HTTP 429 from https://api.example: Too Many Requests", 429)


class TestBackoff:
    """Tests for the backoff formula."""

    def test_exponential(self):
        assert [backoff_delay_ms(n, 1500, 2) for n in (1, 2, 3, 4)] == [1500, 3000, 6000, 12000]

    def test_policy_delay(self):
        policy = RetryPolicy(max_attempts=3, base_delay_ms=100, multiplier=3)
        assert policy.delay_ms(1) == 100
        assert policy.delay_ms(3) == 900

    def test_policy_from_config(self):
        config = Config()
        config.set("acquisition.max_retry_attempts", 2)
        policy = RetryPolicy.from_config(config)
        assert policy.max_attempts == 2
        assert policy.base_delay_ms == 1500


class TestIsRateLimited:
    """Tests for rate-limit detection."""

    def test_status_code(self):
        assert is_rate_limited(ProviderError("Too Many Requests", 429))

    def test_message(self):
        assert is_rate_limited(RuntimeError("Received status 429"))

    def test_other_errors(self):
        assert not is_rate_limited(ProviderError("HTTP 500 from x", 500))
        assert not is_rate_limited(ValueError("bad payload"))


class TestFetchWithRetry:
    """Tests for fetch_with_retry."""

    def test_success_first_try(self):
        fn = Mock(return_value=[1, 2])
        sleep = Mock()

        assert fetch_with_retry(fn, sleep=sleep) == [1, 2]
        assert fn.call_count == 1
        sleep.assert_not_called()

    def test_two_rate_limits_then_success(self):
        """Two 429s then a success: three calls, exponential pauses."""
        fn = Mock(side_effect=[rate_limited(), rate_limited(), ["ok"]])
        sleep = Mock()

        result = fetch_with_retry(fn, policy=RetryPolicy(5, 1500, 2), sleep=sleep)

        assert result == ["ok"]
        assert fn.call_count == 3
        delays = [call.args[0] for call in sleep.call_args_list]
        assert delays == [1.5, 3.0]
        assert delays[0] < delays[1]

    def test_non_retryable_error(self):
        fn = Mock(side_effect=ProviderError("HTTP 404 from x", 404))
        sleep = Mock()

        assert fetch_with_retry(fn, sleep=sleep) == []
        assert fn.call_count == 1
        sleep.assert_not_called()

    def test_exhausted_attempts(self):
        fn = Mock(side_effect=rate_limited())
        sleep = Mock()

        result = fetch_with_retry(fn, policy=RetryPolicy(3, 100, 2), sleep=sleep)

        assert result == []
        assert fn.call_count == 3
        # No pause after the final attempt
        assert sleep.call_count == 2

    def test_custom_default(self):
        fn = Mock(side_effect=ProviderError("boom"))
        assert fetch_with_retry(fn, default=dict, sleep=Mock()) == {}
        assert fetch_with_retry(fn, default=None, sleep=Mock()) is None

    def test_default_is_fresh(self):
        fn = Mock(side_effect=ProviderError("boom"))
        first = fetch_with_retry(fn, sleep=Mock())
        first.append("x")
        assert fetch_with_retry(fn, sleep=Mock()) == []

    def test_throttle_notified(self):
        """A shared throttle records every 429 and sets the pause."""
        throttle = AdaptiveThrottle(floor_ms=1000, cap_ms=10000, clock=lambda: 0)
        fn = Mock(side_effect=[rate_limited(), ["ok"]])
        sleep = Mock()

        assert fetch_with_retry(fn, throttle=throttle, sleep=sleep) == ["ok"]
        assert throttle.rate_limit_count == 1
        sleep.assert_called_once_with(2.0)

    def test_logs_failure(self, caplog):
        fn = Mock(side_effect=ProviderError("HTTP 500 from x", 500))
        with caplog.at_level("ERROR"):
            fetch_with_retry(fn, label="arrivals for HAM", sleep=Mock())
        assert "arrivals for HAM" in caplog.text


@pytest.mark.parametrize("attempts", [1, 2, 5])
def test_call_count_matches_budget(attempts):
    fn = Mock(side_effect=rate_limited())
    fetch_with_retry(fn, policy=RetryPolicy(attempts, 1, 2), sleep=Mock())
    assert fn.call_count == attempts

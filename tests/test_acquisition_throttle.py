"""
Tests for the adaptive throttle.
"""

from unittest.mock import Mock

import pytest

from flightscout.acquisition.throttle import AdaptiveThrottle
from flightscout.config import Config


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now_ms=0):
        self.now_ms = now_ms

    def __call__(self):
        return self.now_ms


@pytest.fixture
def clock():
    return FakeClock(1_000_000)


@pytest.fixture
def throttle(clock):
    return AdaptiveThrottle(
        floor_ms=1000,
        cap_ms=8000,
        cooldown_ms=60000,
        growth=1.5,
        decay=0.5,
        clock=clock,
        sleep=Mock(),
    )


class TestAdaptiveThrottle:
    """Tests for AdaptiveThrottle."""

    def test_starts_at_floor(self, throttle):
        assert throttle.current_delay_ms == 1000
        assert throttle.last_rate_limit_ms is None
        assert not throttle.in_cooldown()

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            AdaptiveThrottle(floor_ms=5000, cap_ms=100)
        with pytest.raises(ValueError):
            AdaptiveThrottle(floor_ms=-1, cap_ms=100)

    def test_rate_limit_doubles(self, throttle, clock):
        throttle.record_rate_limit()
        assert throttle.current_delay_ms == 2000
        assert throttle.last_rate_limit_ms == clock.now_ms
        assert throttle.rate_limit_count == 1

    def test_rate_limit_capped(self, throttle):
        for _ in range(10):
            throttle.record_rate_limit()
        assert throttle.current_delay_ms == 8000

    def test_grows_inside_cooldown(self, throttle, clock):
        throttle.record_rate_limit()
        clock.now_ms += 10_000

        assert throttle.next_delay_ms() == 3000
        assert throttle.next_delay_ms() == 4500

    def test_growth_capped(self, throttle):
        throttle.record_rate_limit()
        for _ in range(10):
            delay = throttle.next_delay_ms()
        assert delay == 8000

    def test_decays_after_cooldown(self, throttle, clock):
        throttle.record_rate_limit()
        throttle.record_rate_limit()
        clock.now_ms += 60_000

        assert throttle.next_delay_ms() == 2000
        assert throttle.next_delay_ms() == 1000
        # Never below the floor
        assert throttle.next_delay_ms() == 1000

    def test_delay_stays_in_bounds(self, throttle, clock):
        for step in range(30):
            if step % 7 == 0:
                throttle.record_rate_limit()
            clock.now_ms += 15_000
            delay = throttle.next_delay_ms()
            assert throttle.floor_ms <= delay <= throttle.cap_ms

    def test_wait_sleeps_seconds(self, throttle):
        assert throttle.wait() == 1000
        throttle.sleep.assert_called_once_with(1.0)

    def test_from_config(self, clock):
        config = Config()
        config.set("throttle.floor_ms", 250)
        throttle = AdaptiveThrottle.from_config(config, clock=clock)

        assert throttle.floor_ms == 250
        assert throttle.cap_ms == 30000
        assert throttle.clock is clock

    def test_independent_instances(self, clock):
        """Rate state belongs to one instance only."""
        first = AdaptiveThrottle(clock=clock)
        second = AdaptiveThrottle(clock=clock)
        first.record_rate_limit()
        assert second.current_delay_ms == second.floor_ms
        assert second.rate_limit_count == 0

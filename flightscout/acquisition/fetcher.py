"""
Schedule Fetcher

Pages through airport arrival/departure boards, normalizes the records and
spaces provider calls to stay under the provider's rate limit. Acquisition is
strictly sequential: pages in increasing order, airports one after another.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from flightscout.models import BackwardEntry, ForwardEntry

from .client import Airport, FlightRadarClient
from .constants import (
    DEFAULT_PAGE_SIZE,
    DELAY_BETWEEN_CALLS_MS,
    FIRST_SCHEDULE_PAGE,
    SCHEDULE_DIRECTIONS,
)
from .normalizer import normalize_arrival, normalize_departure
from .retry import RetryPolicy, fetch_with_retry
from .throttle import AdaptiveThrottle

logger = logging.getLogger(__name__)


class ScheduleFetcher:
    """Fetches airport schedules from the provider."""

    def __init__(
        self,
        client: FlightRadarClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        delay_between_calls_ms: float = DELAY_BETWEEN_CALLS_MS,
        retry_policy: Optional[RetryPolicy] = None,
        throttle: Optional[AdaptiveThrottle] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize schedule fetcher.

        Args:
            client: Provider client
            page_size: Schedule rows per page
            delay_between_calls_ms: Fixed pause between pages and airports
            retry_policy: Retry budget per airport
            throttle: Adaptive throttle; replaces the fixed pause when given
            sleep: Sleep function taking seconds
        """
        self.client = client
        self.page_size = page_size
        self.delay_between_calls_ms = delay_between_calls_ms
        self.retry_policy = retry_policy or RetryPolicy()
        self.throttle = throttle
        self.sleep = sleep

    @classmethod
    def from_config(
        cls,
        client: FlightRadarClient,
        config,
        throttle: Optional[AdaptiveThrottle] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "ScheduleFetcher":
        return cls(
            client,
            page_size=config.page_size,
            delay_between_calls_ms=config.delay_between_calls_ms,
            retry_policy=RetryPolicy.from_config(config),
            throttle=throttle,
            sleep=sleep,
        )

    def pause(self) -> None:
        """Wait between two provider calls."""
        if self.throttle is not None:
            self.throttle.wait()
        elif self.delay_between_calls_ms > 0:
            self.sleep(self.delay_between_calls_ms / 1000)

    # --- Raw schedule pages ---

    def _fetch_schedule(self, airport_code: str, direction: str) -> List[Dict[str, Any]]:
        """
        Collect every page of one schedule board.

        Raises:
            ProviderError: Propagated from the client; retry is the caller's job
        """
        if direction not in SCHEDULE_DIRECTIONS:
            raise ValueError(f"Unknown schedule direction: {direction}")

        flights: List[Dict[str, Any]] = []
        page = FIRST_SCHEDULE_PAGE

        while True:
            details = self.client.get_airport_details(airport_code, self.page_size, page)
            board = (
                ((details.get("pluginData") or {}).get("schedule") or {}).get(direction)
                or {}
            )
            total = (board.get("page") or {}).get("total") or 0
            rows = board.get("data") or []

            flights.extend(row["flight"] for row in rows if row.get("flight"))
            logger.debug(
                f"{airport_code} {direction}: page {page}/{total}, {len(rows)} rows"
            )

            page += 1
            if page > total:
                break
            self.pause()

        return flights

    def fetch_departures(self, airport_code: str) -> List[Dict[str, Any]]:
        """Raw departure records of an airport, all pages concatenated."""
        return self._fetch_schedule(airport_code, "departures")

    def fetch_arrivals(self, airport_code: str) -> List[Dict[str, Any]]:
        """Raw arrival records of an airport, all pages concatenated."""
        return self._fetch_schedule(airport_code, "arrivals")

    # --- Normalized entries with retry ---

    def fetch_arrival_entries(self, airport_code: str) -> List[BackwardEntry]:
        """
        Fetch and normalize arrivals for an airport with retry.

        Returns:
            Arrival entries, or an empty list if the airport yielded nothing
        """
        logger.info(f"Fetching arrivals for {airport_code}...")
        records = fetch_with_retry(
            lambda: self.fetch_arrivals(airport_code),
            policy=self.retry_policy,
            label=f"arrivals for {airport_code}",
            throttle=self.throttle,
            sleep=self.sleep,
        )
        return [normalize_arrival(record, airport_code) for record in records]

    def fetch_departure_entries(self, airport_code: str) -> List[ForwardEntry]:
        """
        Fetch and normalize departures for an airport with retry.

        Returns:
            Departure entries, or an empty list if the airport yielded nothing
        """
        logger.info(f"Fetching departures for {airport_code}...")
        records = fetch_with_retry(
            lambda: self.fetch_departures(airport_code),
            policy=self.retry_policy,
            label=f"departures for {airport_code}",
            throttle=self.throttle,
            sleep=self.sleep,
        )
        return [normalize_departure(record) for record in records]

    def fetch_all_arrivals(self, airport_codes: Sequence[str]) -> List[BackwardEntry]:
        """
        Fetch arrivals for several airports, one after another.

        A pause follows every airport, whether it succeeded or not.
        """
        all_flights: List[BackwardEntry] = []

        for airport_code in airport_codes:
            all_flights.extend(self.fetch_arrival_entries(airport_code))
            self.pause()

        logger.info(
            f"Fetched {len(all_flights)} arrivals from {len(airport_codes)} airport(s)"
        )
        return all_flights

    def fetch_airport(self, airport_code: str) -> Optional[Airport]:
        """
        Look up a reference airport with coordinates.

        Returns:
            Airport, or None when unknown or lacking a position
        """
        airport = fetch_with_retry(
            lambda: self.client.get_airport(airport_code),
            policy=self.retry_policy,
            label=f"airport {airport_code}",
            default=None,
            throttle=self.throttle,
            sleep=self.sleep,
        )

        if not airport or not airport.has_coordinates:
            logger.error(f"Failed to get coordinates for airport: {airport_code}")
            return None

        return airport

"""
Flights Between Airport Pairs

Lists departures on a set of routes. Calls are spaced by the shared adaptive
throttle, and each source airport's departures board is fetched once even
when several routes start there.
"""

import logging
from collections import Counter
from dataclasses import fields
from typing import Any, Dict, List, Optional, Sequence

from flightscout.acquisition.fetcher import ScheduleFetcher
from flightscout.acquisition.retry import fetch_with_retry
from flightscout.acquisition.throttle import AdaptiveThrottle
from flightscout.models import AirportPair, ForwardEntry, RouteFlightEntry
from flightscout.utils import current_time_ms

from .grouping import filter_by_destinations, filter_today

logger = logging.getLogger(__name__)


class RouteFinder:
    """Finds flights between airport pairs."""

    def __init__(self, fetcher: ScheduleFetcher, throttle: Optional[AdaptiveThrottle] = None):
        """
        Initialize route finder.

        Args:
            fetcher: Schedule fetcher; its throttle is used when none is given
            throttle: Adaptive throttle shared by all route calls
        """
        self.fetcher = fetcher
        self.throttle = throttle or fetcher.throttle or AdaptiveThrottle(sleep=fetcher.sleep)
        self._departures: Dict[str, List[ForwardEntry]] = {}

    def _departures_of(self, source: str) -> List[ForwardEntry]:
        if source not in self._departures:
            self._departures[source] = self.fetcher.fetch_departure_entries(source)
        return self._departures[source]

    def flights_for_pair(
        self, pair: AirportPair, only_today: bool = True, now_ms: Optional[int] = None
    ) -> List[RouteFlightEntry]:
        """Departures from pair.source bound for pair.destination."""
        flights = filter_by_destinations(self._departures_of(pair.source), [pair.destination])
        if only_today:
            flights = filter_today(flights, now_ms)

        return [
            RouteFlightEntry(
                source_airport=pair.source,
                destination_airport=pair.destination,
                **{field.name: getattr(flight, field.name) for field in fields(flight)},
            )
            for flight in flights
        ]

    def flights_between_pairs(
        self,
        pairs: Sequence[AirportPair],
        only_today: bool = True,
        now_ms: Optional[int] = None,
    ) -> List[RouteFlightEntry]:
        """
        Collect flights on every route, sorted by departure time.

        A failing route is logged and skipped; the throttle pauses between
        consecutive routes.
        """
        all_flights: List[RouteFlightEntry] = []

        for index, pair in enumerate(pairs):
            try:
                flights = self.flights_for_pair(pair, only_today, now_ms)
                all_flights.extend(flights)
                logger.info(
                    f"{pair.route_key}: {len(flights)} flight"
                    f"{'' if len(flights) == 1 else 's'} on this route"
                )
            except Exception as e:
                logger.error(
                    f"Failed to fetch flights from {pair.source} to {pair.destination}: {e}"
                )

            if index < len(pairs) - 1:
                self.throttle.wait()

        all_flights.sort(key=lambda flight: flight.event_time_ms)
        return all_flights

    def search_route(self, pair: AirportPair) -> Dict[str, List[Dict[str, Any]]]:
        """
        Query the provider's search for a route key such as 'HAM-JFK'.

        Returns:
            Search results grouped by type; empty groups on failure
        """
        results = fetch_with_retry(
            lambda: self.fetcher.client.search(pair.route_key),
            policy=self.fetcher.retry_policy,
            label=f"route search {pair.route_key}",
            default=lambda: {"live": [], "schedule": []},
            throttle=self.throttle,
            sleep=self.fetcher.sleep,
        )
        self.throttle.wait()
        return results


def summarize_routes(
    flights: Sequence[RouteFlightEntry],
    pairs: Sequence[AirportPair],
    now_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Summarize route flights for reporting.

    Returns:
        Dictionary with totals, next departure, upcoming flights per route
        (busiest first) and the routes without any flight
    """
    if now_ms is None:
        now_ms = current_time_ms()

    upcoming = sorted(
        (f for f in flights if f.event_time_ms >= now_ms),
        key=lambda f: f.event_time_ms,
    )
    past = [f for f in flights if f.event_time_ms < now_ms]

    per_route = Counter(f.route_key for f in upcoming)
    served = {f.route_key for f in flights}

    return {
        "routes_searched": len(pairs),
        "total_flights": len(flights),
        "upcoming_flights": len(upcoming),
        "past_flights": len(past),
        "next_departure": upcoming[0] if upcoming else None,
        "time_until_next_ms": upcoming[0].event_time_ms - now_ms if upcoming else None,
        "upcoming_by_route": per_route.most_common(),
        "routes_without_flights": [p for p in pairs if p.route_key not in served],
    }

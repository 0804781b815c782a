"""
Main Flight Analyzer
Coordinates acquisition, analysis and reporting for every lookup.
"""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from flightscout.acquisition.client import Airport, FlightRadarClient
from flightscout.acquisition.fetcher import ScheduleFetcher
from flightscout.acquisition.retry import RetryPolicy
from flightscout.acquisition.throttle import AdaptiveThrottle
from flightscout.config import Config
from flightscout.models import AirportPair
from flightscout.utils import current_time_ms

from .aircraft_scanner import AircraftScanner
from .grouping import filter_by_destinations, filter_today, group_by_origin
from .ranking import (
    rank_airports_by_distance,
    rank_airports_by_diversity,
    summarize_departure_diversity,
)
from .reporter import ReportGenerator
from .routes import RouteFinder, summarize_routes
from .window_optimizer import (
    analyze_airport_windows,
    find_optimal_backward_windows,
    find_optimal_forward_windows,
)

logger = logging.getLogger(__name__)


class FlightAnalyzer:
    """
    Main analyzer coordinating all lookups.

    Every operation returns a results dict suitable for
    ReportGenerator.generate_report and prints its console view.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        client: Optional[FlightRadarClient] = None,
        reporter: Optional[ReportGenerator] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize flight analyzer.

        Args:
            config: Runtime configuration (default: Config())
            client: Provider client (default: one built from the config)
            reporter: Console and file reporter
            sleep: Sleep function taking seconds, shared by all waits
        """
        self.config = config or Config()
        self.client = client or FlightRadarClient(
            timeout=self.config.timeout_seconds,
            user_agent=self.config.user_agent,
        )
        self.reporter = reporter or ReportGenerator()
        self.sleep = sleep

        self.fetcher = ScheduleFetcher.from_config(self.client, self.config, sleep=sleep)

    def _only_today(self, only_today: Optional[bool]) -> bool:
        return self.config.only_today if only_today is None else only_today

    def _metadata(self, operation: str, now_ms: int, **params) -> Dict[str, Any]:
        return {
            "operation": operation,
            "analysis_date": datetime.now().isoformat(),
            "now_ms": now_ms,
            **params,
        }

    def _reference_airport(self, code: str) -> Optional[Airport]:
        airport = self.fetcher.fetch_airport(code)
        if airport is None:
            print(f"❌ Airport {code} not found or has no coordinates")
        return airport

    # --- Lookups ---

    def forward_lookup(
        self,
        source: str,
        destinations: Optional[Sequence[str]] = None,
        only_today: Optional[bool] = None,
        now_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Departures from one source airport towards a destination set.

        Args:
            source: Source airport IATA code
            destinations: Destination codes to keep (default: all)
            only_today: Restrict to today's flights (default: from config)
            now_ms: Reference time (default: now)

        Returns:
            Results with the flights, the tied best windows and the
            destination diversity summary
        """
        now_ms = current_time_ms() if now_ms is None else now_ms

        flights = self.fetcher.fetch_departure_entries(source)
        if destinations:
            flights = filter_by_destinations(flights, destinations)
        if self._only_today(only_today):
            flights = filter_today(flights, now_ms)

        windows = find_optimal_forward_windows(flights, now_ms)
        summary = summarize_departure_diversity(flights, source, now_ms)

        print(f"\n🛫 Found {len(flights)} departures from {source}")
        if not flights:
            print("No flights found.")
        else:
            self.reporter.display_departure_schedule(flights)
            self.reporter.display_departure_diversity(summary)
            self.reporter.display_windows(
                windows, f"Best departure windows from {source}"
            )

        return {
            "metadata": self._metadata(
                "forward", now_ms, source=source, destinations=list(destinations or [])
            ),
            "flights": flights,
            "best_windows": windows,
            "diversity": summary,
        }

    def backward_lookup(
        self,
        targets: Sequence[str],
        only_today: Optional[bool] = None,
        now_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Arrivals at the target airports, grouped by origin.

        Returns:
            Results with the flights by origin, the tied best windows keyed
            by origin and the per-origin window analysis
        """
        now_ms = current_time_ms() if now_ms is None else now_ms

        flights = self.fetcher.fetch_all_arrivals(targets)
        if self._only_today(only_today):
            flights = filter_today(flights, now_ms)

        flights_by_origin = group_by_origin(flights)
        windows = find_optimal_backward_windows(flights, now_ms)
        airport_windows = analyze_airport_windows(flights_by_origin, now_ms)

        print(f"\n🛬 Found {len(flights)} arrivals at {', '.join(targets)}")
        if not flights:
            print("No flights found.")
        else:
            self.reporter.display_flights_by_origin(flights_by_origin)
            self.reporter.display_windows(windows, "Best arrival windows by origin")
            self.reporter.display_airport_windows(airport_windows)

        return {
            "metadata": self._metadata("backward", now_ms, targets=list(targets)),
            "flights_by_origin": flights_by_origin,
            "best_windows": windows,
            "airport_windows": airport_windows,
        }

    def airports_by_distance(
        self,
        targets: Sequence[str],
        origin_code: str,
        only_today: Optional[bool] = None,
        now_ms: Optional[int] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Origin airports serving the targets, closest to a reference first.

        Returns:
            Results with the distance ranking, or None when the reference
            airport is unknown or has no coordinates
        """
        now_ms = current_time_ms() if now_ms is None else now_ms

        reference = self._reference_airport(origin_code)
        if reference is None:
            return None

        flights = self.fetcher.fetch_all_arrivals(targets)
        if self._only_today(only_today):
            flights = filter_today(flights, now_ms)

        records = rank_airports_by_distance(flights, reference)
        self.reporter.display_airports_by_distance(records)

        return {
            "metadata": self._metadata(
                "distance", now_ms, targets=list(targets), reference=origin_code
            ),
            "reference": reference,
            "airports": records,
        }

    def airports_by_diversity(
        self,
        targets: Sequence[str],
        only_today: Optional[bool] = None,
        now_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Origin airports serving the most distinct targets first."""
        now_ms = current_time_ms() if now_ms is None else now_ms

        flights = self.fetcher.fetch_all_arrivals(targets)
        if self._only_today(only_today):
            flights = filter_today(flights, now_ms)

        records = rank_airports_by_diversity(flights, now_ms)
        self.reporter.display_airports_by_diversity(records, now_ms)

        return {
            "metadata": self._metadata("diversity", now_ms, targets=list(targets)),
            "airports": records,
        }

    def flights_by_types(
        self,
        reference_codes: Sequence[str],
        aircraft_types: Sequence[str],
        now_ms: Optional[int] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Live flights of the given aircraft types, nearest reference first.

        Returns:
            Results with the aircraft and the missing types, or None when
            any of the reference airports could not be resolved
        """
        now_ms = current_time_ms() if now_ms is None else now_ms

        references: List[Airport] = []
        for code in reference_codes:
            airport = self._reference_airport(code)
            if airport is None:
                logger.error(f"Reference airport {code} unavailable, aborting aircraft scan")
                return None
            references.append(airport)

        if not references:
            logger.error("No reference airport given, aborting aircraft scan")
            return None

        scanner = AircraftScanner(
            self.client,
            references,
            concurrency=self.config.scanner_concurrency,
            retry_policy=RetryPolicy.from_config(self.config),
            sleep=self.sleep,
        )
        result = scanner.scan(aircraft_types, now_ms)

        print(f"\n✈️  Found {len(result.flights)} live flights of {len(aircraft_types)} types")
        self.reporter.display_aircraft_scan(result)

        return {
            "metadata": self._metadata(
                "types",
                now_ms,
                references=[airport.iata for airport in references],
                aircraft_types=list(aircraft_types),
            ),
            "references": references,
            "flights": result.flights,
            "missing_types": result.missing_types,
        }

    def flights_between_pairs(
        self,
        pairs: Sequence[AirportPair],
        only_today: Optional[bool] = None,
        now_ms: Optional[int] = None,
        search: bool = False,
    ) -> Dict[str, Any]:
        """
        Flights on a set of routes, spaced by an adaptive throttle.

        The throttle lives for this call only and is shared by every
        provider request the call makes.

        Args:
            pairs: Routes to look up
            only_today: Restrict to today's flights (default: from config)
            now_ms: Reference time (default: now)
            search: Also query the provider's route search for every pair
        """
        now_ms = current_time_ms() if now_ms is None else now_ms

        throttle = AdaptiveThrottle.from_config(self.config, sleep=self.sleep)
        fetcher = ScheduleFetcher.from_config(
            self.client, self.config, throttle=throttle, sleep=self.sleep
        )
        finder = RouteFinder(fetcher, throttle)

        flights = finder.flights_between_pairs(pairs, self._only_today(only_today), now_ms)
        summary = summarize_routes(flights, pairs, now_ms)

        if not flights:
            print("No flights found on the requested routes.")
        self.reporter.display_route_summary(flights, summary)

        results = {
            "metadata": self._metadata(
                "pairs", now_ms, routes=[pair.route_key for pair in pairs]
            ),
            "flights": flights,
            "summary": summary,
        }

        if search:
            route_search = {pair.route_key: finder.search_route(pair) for pair in pairs}
            self.reporter.display_route_search(route_search)
            results["route_search"] = route_search

        return results

    def close(self):
        """Close provider session."""
        if self.client:
            self.client.close()

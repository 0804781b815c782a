"""
Aircraft Type Scanner

Spots live aircraft of rare types: fetches the live flights of each requested
type code, measures every flight against the reference airports and lists
the matches nearest first, together with the types nobody is flying.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from flightscout.acquisition.client import Airport, FlightRadarClient
from flightscout.acquisition.constants import DEFAULT_SCANNER_CONCURRENCY
from flightscout.acquisition.normalizer import normalize_aircraft
from flightscout.acquisition.retry import RetryPolicy, fetch_with_retry
from flightscout.models import AircraftEntry, AircraftScanResult
from flightscout.utils import current_time_ms

logger = logging.getLogger(__name__)


def find_missing_types(
    requested_types: Sequence[str], flights: Sequence[AircraftEntry]
) -> List[str]:
    """
    Requested type codes not observed among the flights.

    Keeps request order and reports each missing code once.
    """
    seen = {flight.aircraft_code for flight in flights}
    missing: List[str] = []
    for aircraft_type in requested_types:
        if aircraft_type not in seen and aircraft_type not in missing:
            missing.append(aircraft_type)
    return missing


class AircraftScanner:
    """
    Scans live flights for a list of aircraft types.

    Up to ``concurrency`` type requests are in flight at once; a thread pool
    of that size is the only fan-out in the pipeline.
    """

    def __init__(
        self,
        client: FlightRadarClient,
        references: Sequence[Airport],
        concurrency: int = DEFAULT_SCANNER_CONCURRENCY,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize aircraft scanner.

        Args:
            client: Provider client
            references: Airports to measure distances from (at least one
                with coordinates)
            concurrency: Maximum parallel provider requests
            retry_policy: Retry budget per aircraft type
            sleep: Sleep function taking seconds (retry backoff)

        Raises:
            ValueError: Without a usable reference airport or with
                concurrency below 1
        """
        if not any(airport.has_coordinates for airport in references):
            raise ValueError("At least one reference airport with coordinates is required")
        if concurrency < 1:
            raise ValueError("Concurrency must be at least 1")

        self.client = client
        self.references = list(references)
        self.concurrency = concurrency
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep

    def scan_type(self, aircraft_type: str, now_ms: Optional[int] = None) -> List[AircraftEntry]:
        """
        Fetch and measure all live flights of one aircraft type.

        Returns:
            Entries nearest first; empty if the type could not be fetched
        """
        flights = fetch_with_retry(
            lambda: self.client.get_flights(aircraft_type=aircraft_type),
            policy=self.retry_policy,
            label=f"flights of type {aircraft_type}",
            sleep=self.sleep,
        )

        entries = [normalize_aircraft(flight, self.references, now_ms) for flight in flights]
        entries.sort(key=lambda entry: entry.distance_km)

        logger.info(f"{aircraft_type}: {len(entries)} live flight(s)")
        return entries

    def scan(
        self, aircraft_types: Sequence[str], now_ms: Optional[int] = None
    ) -> AircraftScanResult:
        """
        Scan all requested types and merge the results.

        Args:
            aircraft_types: ICAO aircraft type codes
            now_ms: Fallback entry time for flights without a timestamp

        Returns:
            Flights of all types sorted by distance to their nearest
            reference airport, plus the requested types not seen
        """
        if not aircraft_types:
            return AircraftScanResult(flights=[], missing_types=[])

        if now_ms is None:
            now_ms = current_time_ms()

        with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
            per_type = list(
                executor.map(lambda code: self.scan_type(code, now_ms), aircraft_types)
            )

        flights = [entry for entries in per_type for entry in entries]
        flights.sort(key=lambda entry: entry.distance_km)

        return AircraftScanResult(
            flights=flights,
            missing_types=find_missing_types(aircraft_types, flights),
        )

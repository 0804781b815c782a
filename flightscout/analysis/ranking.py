"""
Airport Ranking Engine

Two independent, global (not windowed) rankings of the origin airports seen
in a set of arrivals:

* by great-circle distance from a reference airport, closest first
* by destination diversity: how many distinct observed target airports an
  origin serves, ties broken by the earliest upcoming flight
"""

import math
from typing import Iterable, List, Optional

from flightscout.acquisition.client import Airport
from flightscout.config import Settings
from flightscout.models import (
    AirportDistanceRecord,
    AirportDiversityRecord,
    BackwardEntry,
    DepartureDiversitySummary,
    ForwardEntry,
    first_known,
)
from flightscout.utils import current_time_ms, haversine_distance

from .grouping import group_by_origin


def _next_flight_time(entries: Iterable, now_ms: int) -> float:
    """Earliest entry time at or after now_ms, or infinity."""
    upcoming = [entry.event_time_ms for entry in entries if entry.event_time_ms >= now_ms]
    return min(upcoming) if upcoming else math.inf


def rank_airports_by_distance(
    entries: Iterable[BackwardEntry], reference: Airport
) -> List[AirportDistanceRecord]:
    """
    Rank origin airports by distance from a reference airport.

    Origins without a code or without coordinates on any of their flights
    are left out.

    Args:
        entries: Arrival entries (any targets)
        reference: Airport to measure from; must have coordinates

    Returns:
        One record per origin, ascending by distance

    Raises:
        ValueError: If the reference airport has no coordinates
    """
    if not reference.has_coordinates:
        raise ValueError(f"Reference airport {reference.iata} has no coordinates")

    records: List[AirportDistanceRecord] = []

    for code, flights in group_by_origin(entries).items():
        if code == Settings.UNKNOWN_AIRPORT:
            continue

        coordinates = next(
            (f.origin.coordinates for f in flights if f.origin.coordinates), None
        )
        if coordinates is None:
            continue

        records.append(
            AirportDistanceRecord(
                code=code,
                name=first_known(f.origin.city_name for f in flights),
                country_name=first_known(f.origin.country_name for f in flights),
                distance_km=haversine_distance(
                    reference.latitude, reference.longitude, *coordinates
                ),
                flight_count=len(flights),
                coordinates=coordinates,
            )
        )

    records.sort(key=lambda record: record.distance_km)
    return records


def rank_airports_by_diversity(
    entries: Iterable[BackwardEntry], now_ms: Optional[int] = None
) -> List[AirportDiversityRecord]:
    """
    Rank origin airports by the number of distinct targets they fly to.

    Args:
        entries: Arrival entries observed at one or more target airports
        now_ms: Reference time for the next-flight lookup (default: now)

    Returns:
        Records sorted by distinct destination count (descending), then by
        next flight time (ascending, infinity last)
    """
    if now_ms is None:
        now_ms = current_time_ms()

    records: List[AirportDiversityRecord] = []

    for code, flights in group_by_origin(entries).items():
        if code == Settings.UNKNOWN_AIRPORT:
            continue

        destinations = {f.target_airport_code for f in flights if f.target_airport_code}
        records.append(
            AirportDiversityRecord(
                code=code,
                name=first_known(f.origin.city_name for f in flights),
                country_name=first_known(f.origin.country_name for f in flights),
                distinct_destination_count=len(destinations),
                total_flights=len(flights),
                next_flight_time_ms=_next_flight_time(flights, now_ms),
                destinations=destinations,
            )
        )

    records.sort(
        key=lambda record: (-record.distinct_destination_count, record.next_flight_time_ms)
    )
    return records


def summarize_departure_diversity(
    entries: List[ForwardEntry], source_code: str, now_ms: Optional[int] = None
) -> Optional[DepartureDiversitySummary]:
    """
    Destination diversity of one source airport's departures.

    Returns:
        Summary, or None for no departures
    """
    if not entries:
        return None

    if now_ms is None:
        now_ms = current_time_ms()

    destinations = {e.destination.iata_code for e in entries if e.destination.iata_code}

    return DepartureDiversitySummary(
        source_code=source_code,
        distinct_destination_count=len(destinations),
        total_flights=len(entries),
        next_flight_time_ms=_next_flight_time(entries, now_ms),
        destinations=destinations,
    )

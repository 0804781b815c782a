"""
Record Normalizer
Converts raw provider records into canonical flight entries.

All functions are pure: missing optional fields become None and never raise.
"""

from typing import Any, Dict, Optional, Sequence

from flightscout.models import (
    AircraftEntry,
    AirportInfo,
    BackwardEntry,
    ForwardEntry,
    NearestReference,
    STATUS_ARRIVED,
    STATUS_DEPARTED,
    STATUS_SCHEDULED,
)
from flightscout.utils import current_time_ms, haversine_distance, seconds_to_ms

from .client import Airport, LiveFlight


def _dig(record: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    value = record
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def derive_status(time_block: Optional[Dict[str, Any]]) -> str:
    """
    Derive flight status from the scheduled/estimated/real timestamps.

    'arrived' if a real arrival exists, else 'departed' if a real departure
    exists, else 'scheduled'.
    """
    if _dig(time_block, "real", "arrival") is not None:
        return STATUS_ARRIVED
    if _dig(time_block, "real", "departure") is not None:
        return STATUS_DEPARTED
    return STATUS_SCHEDULED


def event_time_ms(time_block: Optional[Dict[str, Any]]) -> int:
    """
    Canonical entry time in epoch milliseconds.

    Priority: real departure, estimated departure, scheduled departure, 0.
    """
    for kind in ("real", "estimated", "scheduled"):
        seconds = _dig(time_block, kind, "departure")
        if seconds is not None:
            return seconds_to_ms(seconds)
    return 0


def _airport_info(airport: Optional[Dict[str, Any]]) -> AirportInfo:
    latitude = _dig(airport, "position", "latitude")
    longitude = _dig(airport, "position", "longitude")
    coordinates = None
    if latitude is not None and longitude is not None:
        coordinates = (latitude, longitude)

    return AirportInfo(
        country_name=_dig(airport, "position", "country", "name"),
        iata_code=_dig(airport, "code", "iata"),
        city_name=_dig(airport, "position", "region", "city"),
        coordinates=coordinates,
    )


def _base_fields(raw: Dict[str, Any]) -> Dict[str, Any]:
    time_block = _dig(raw, "time")
    return {
        "live": bool(_dig(raw, "status", "live")),
        "status": derive_status(time_block),
        "flight_code": _dig(raw, "identification", "number", "default") or "",
        "event_time_ms": event_time_ms(time_block),
    }


def normalize_arrival(raw: Dict[str, Any], target_airport_code: str) -> BackwardEntry:
    """
    Normalize an arrival record observed at target_airport_code.

    Args:
        raw: Schedule 'flight' payload from the arrivals board
        target_airport_code: IATA code of the airport being observed
    """
    return BackwardEntry(
        target_airport_code=target_airport_code,
        origin=_airport_info(_dig(raw, "airport", "origin")),
        **_base_fields(raw),
    )


def normalize_departure(raw: Dict[str, Any]) -> ForwardEntry:
    """Normalize a departure record."""
    return ForwardEntry(
        destination=_airport_info(_dig(raw, "airport", "destination")),
        **_base_fields(raw),
    )


def nearest_reference(
    latitude: Optional[float],
    longitude: Optional[float],
    references: Sequence[Airport],
) -> Optional[NearestReference]:
    """
    Find the closest reference airport to a position.

    Returns:
        NearestReference, or None if the position or all references lack
        coordinates
    """
    if latitude is None or longitude is None:
        return None

    nearest = None
    for airport in references:
        if not airport.has_coordinates:
            continue
        distance = haversine_distance(
            airport.latitude, airport.longitude, latitude, longitude
        )
        if nearest is None or distance < nearest.distance_km:
            nearest = NearestReference(
                name=airport.name, code=airport.iata, distance_km=distance
            )

    return nearest


def normalize_aircraft(
    flight: LiveFlight,
    references: Sequence[Airport],
    now_ms: Optional[int] = None,
) -> AircraftEntry:
    """
    Normalize a live feed flight against the reference airports.

    Live positions carry no schedule timestamps, so the status is always
    'scheduled'; the entry time is the position timestamp, or now_ms.
    """
    if now_ms is None:
        now_ms = current_time_ms()

    return AircraftEntry(
        live=True,
        status=derive_status(None),
        flight_code=flight.number or flight.callsign or "",
        event_time_ms=seconds_to_ms(flight.timestamp) or now_ms,
        aircraft_code=flight.aircraft_code or "",
        nearest_reference=nearest_reference(
            flight.latitude, flight.longitude, references
        ),
        on_ground=flight.on_ground != 0,
        coordinates=(flight.latitude, flight.longitude),
        registration=flight.registration or "",
        origin_code=flight.origin_airport_iata,
        destination_code=flight.destination_airport_iata,
    )

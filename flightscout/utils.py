"""
flightscout Utility Functions
Common helpers for distance calculations, time handling and formatting.
"""

import time
from datetime import datetime, timedelta
from math import radians, sin, cos, sqrt, atan2
from typing import Optional, Tuple

from .config import Constants


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great circle distance between two points using Haversine formula.

    Uses the same spherical earth radius as the flight data provider's own
    entity distance, so rankings agree numerically with provider figures.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees

    Returns:
        Distance in kilometers

    Example:
        >>> round(haversine_distance(53.6304, 9.9882, 50.0333, 8.5706))
        413
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return Constants.EARTH_RADIUS_KM * c


def current_time_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * Constants.MS_PER_SECOND)


def seconds_to_ms(seconds: Optional[float]) -> Optional[int]:
    """Convert provider epoch seconds to milliseconds, keeping None."""
    if seconds is None:
        return None
    return int(seconds * Constants.MS_PER_SECOND)


def today_bounds(now_ms: Optional[int] = None) -> Tuple[int, int]:
    """
    Get start and end of the local calendar day containing now_ms.

    Args:
        now_ms: Reference time in epoch milliseconds (default: now)

    Returns:
        Tuple of (day_start_ms, day_end_ms), end exclusive
    """
    if now_ms is None:
        now_ms = current_time_ms()

    now = datetime.fromtimestamp(now_ms / Constants.MS_PER_SECOND)
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    day_end = day_start + timedelta(days=1)

    return (
        int(day_start.timestamp() * Constants.MS_PER_SECOND),
        int(day_end.timestamp() * Constants.MS_PER_SECOND),
    )


def format_time(timestamp_ms: int) -> str:
    """
    Format an epoch millisecond timestamp as local 'DD.MM. HH:MM'.

    Example:
        >>> format_time(0)  # depends on local timezone
        '01.01. 01:00'
    """
    return datetime.fromtimestamp(timestamp_ms / Constants.MS_PER_SECOND).strftime(
        "%d.%m. %H:%M"
    )


def format_duration_ms(duration_ms: int) -> str:
    """
    Format a non-negative duration as hours and minutes.

    Example:
        >>> format_duration_ms(5_400_000)
        '1h 30m'
    """
    if duration_ms is None or duration_ms < 0:
        return "N/A"

    total_minutes = int(duration_ms // Constants.MS_PER_MINUTE)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def format_distance(distance_km: float) -> str:
    """Format a distance in whole kilometers."""
    if distance_km is None or distance_km == float("inf"):
        return "N/A"
    return f"{distance_km:.0f}km"


def validate_coordinates(lat: Optional[float], lon: Optional[float]) -> bool:
    """
    Validate latitude and longitude coordinates.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees

    Returns:
        True if both are present and within range

    Example:
        >>> validate_coordinates(53.6304, 9.9882)
        True
        >>> validate_coordinates(100, 200)
        False
    """
    if lat is None or lon is None:
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180

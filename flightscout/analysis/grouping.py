"""
Entry Filters and Grouping
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from flightscout.config import Settings
from flightscout.models import BackwardEntry, FlightEntry, ForwardEntry
from flightscout.utils import today_bounds

E = TypeVar("E", bound=FlightEntry)


def filter_today(entries: Iterable[E], now_ms: Optional[int] = None) -> List[E]:
    """Keep entries whose time falls within the local day containing now_ms."""
    start, end = today_bounds(now_ms)
    return [entry for entry in entries if start <= entry.event_time_ms < end]


def filter_by_destinations(
    entries: Iterable[ForwardEntry], destination_codes: Sequence[str]
) -> List[ForwardEntry]:
    """Keep departures bound for one of the given airports."""
    wanted = set(destination_codes)
    return [
        entry
        for entry in entries
        if entry.destination.iata_code and entry.destination.iata_code in wanted
    ]


def group_by_origin(entries: Iterable[BackwardEntry]) -> Dict[str, List[BackwardEntry]]:
    """
    Group arrivals by origin airport code.

    Entries without an origin code land in the Settings.UNKNOWN_AIRPORT
    bucket. Arrival order is kept within each group.
    """
    grouped: Dict[str, List[BackwardEntry]] = defaultdict(list)

    for entry in entries:
        grouped[entry.origin.iata_code or Settings.UNKNOWN_AIRPORT].append(entry)

    return dict(grouped)


# --- Grouping keys for the window optimizer ---


def destination_key(entry: ForwardEntry) -> Optional[str]:
    return entry.destination.iata_code


def origin_key(entry: BackwardEntry) -> Optional[str]:
    return entry.origin.iata_code


def target_key(entry: BackwardEntry) -> Optional[str]:
    return entry.target_airport_code or None

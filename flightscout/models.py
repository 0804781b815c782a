"""
Flight Entry and Result Models

Canonical shapes produced by the record normalizer and consumed by the
window optimizer, the ranking engine, the aircraft scanner and the reporter.
"""

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Optional, Set, Tuple, TypeVar

from .config import Settings

STATUS_SCHEDULED = "scheduled"
STATUS_DEPARTED = "departed"
STATUS_ARRIVED = "arrived"
FLIGHT_STATUSES = (STATUS_SCHEDULED, STATUS_DEPARTED, STATUS_ARRIVED)

Coordinates = Tuple[float, float]


@dataclass
class AirportInfo:
    """Origin or destination airport as seen on a schedule record."""

    country_name: Optional[str] = None
    iata_code: Optional[str] = None
    city_name: Optional[str] = None
    coordinates: Optional[Coordinates] = None


@dataclass
class FlightEntry:
    """Fields shared by every normalized flight entry."""

    live: bool
    status: str
    flight_code: str
    event_time_ms: int


@dataclass
class ForwardEntry(FlightEntry):
    """Departure from the observed airport towards a destination."""

    destination: AirportInfo = field(default_factory=AirportInfo)


@dataclass
class BackwardEntry(FlightEntry):
    """Arrival at the observed (target) airport from an origin."""

    target_airport_code: str = ""
    origin: AirportInfo = field(default_factory=AirportInfo)


@dataclass
class NearestReference:
    """Closest reference airport to a live aircraft."""

    name: str
    code: str
    distance_km: float


@dataclass
class AircraftEntry(FlightEntry):
    """Live aircraft position with its nearest reference airport."""

    aircraft_code: str = ""
    nearest_reference: Optional[NearestReference] = None
    on_ground: bool = False
    coordinates: Tuple[Optional[float], Optional[float]] = (None, None)
    registration: str = ""
    origin_code: Optional[str] = None
    destination_code: Optional[str] = None

    @property
    def distance_km(self) -> float:
        """Distance to the nearest reference, infinite when unknown."""
        if self.nearest_reference is None:
            return float("inf")
        return self.nearest_reference.distance_km


@dataclass
class RouteFlightEntry(ForwardEntry):
    """Departure tagged with the airport pair it was requested for."""

    source_airport: str = ""
    destination_airport: str = ""

    @property
    def route_key(self) -> str:
        return f"{self.source_airport}-{self.destination_airport}"


@dataclass(frozen=True)
class AirportPair:
    source: str
    destination: str

    @property
    def route_key(self) -> str:
        return f"{self.source}-{self.destination}"


E = TypeVar("E", bound=FlightEntry)
KeyExtractor = Callable[[E], Optional[str]]


class TimeWindow(Generic[E]):
    """
    Fixed 30 minute interval with the entries that fall inside it.

    Members are appended during window assembly; ``members`` always returns
    them ordered by ``event_time_ms``. ``unique_keys`` holds the grouping keys
    (destination or origin codes) seen among the members.
    """

    def __init__(self, start_ms: int) -> None:
        self.start_ms = start_ms
        self.end_ms = start_ms + Settings.WINDOW_SIZE_MS
        self.unique_keys: Set[str] = set()
        self._members: List[E] = []

    def add(self, entry: E, key: Optional[str]) -> None:
        """Append a member; entries without a key do not add diversity."""
        self._members.append(entry)
        if key:
            self.unique_keys.add(key)

    @property
    def members(self) -> List[E]:
        return sorted(self._members, key=lambda entry: entry.event_time_ms)

    @property
    def diversity(self) -> int:
        return len(self.unique_keys)

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        return (
            f"TimeWindow(start_ms={self.start_ms}, end_ms={self.end_ms}, "
            f"unique_keys={sorted(self.unique_keys)}, members={len(self._members)})"
        )


@dataclass
class AirportDistanceRecord:
    """Origin airport ranked by great-circle distance from a reference."""

    code: str
    name: str
    country_name: str
    distance_km: float
    flight_count: int
    coordinates: Optional[Coordinates] = None


@dataclass
class AirportDiversityRecord:
    """Origin airport ranked by how many distinct targets it serves."""

    code: str
    name: str
    country_name: str
    distinct_destination_count: int
    total_flights: int
    next_flight_time_ms: float  # float("inf") when no future flight
    destinations: Set[str] = field(default_factory=set)


@dataclass
class AirportWindowAnalysis:
    """Best 30 minute windows of a single origin airport."""

    airport_code: str
    airport_name: str
    max_diversity: int
    best_windows: List[TimeWindow]


@dataclass
class DepartureDiversitySummary:
    source_code: str
    distinct_destination_count: int
    total_flights: int
    next_flight_time_ms: float
    destinations: Set[str] = field(default_factory=set)


@dataclass
class AircraftScanResult:
    """Merged scanner output: flights nearest-first plus unseen types."""

    flights: List[AircraftEntry]
    missing_types: List[str]


def first_known(values: Iterable[Optional[str]], default: str = "Unknown") -> str:
    """Return the first non-empty value, or the default."""
    for value in values:
        if value:
            return value
    return default

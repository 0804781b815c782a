"""
Flight Data Provider Client

Thin HTTP client for the FlightRadar24 web endpoints used by flightscout:
airport schedules (paginated), airport details, the live flight feed and
the route search. Every failure surfaces as ProviderError; rate limiting is
recognisable by the 429 status in the error text.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .constants import (
    AIRPORT_DETAILS_URL,
    LIVE_FEED_URL,
    SEARCH_URL,
    DEFAULT_API_TIMEOUT,
    DEFAULT_PAGE_SIZE,
    FIRST_SCHEDULE_PAGE,
    LIVE_FEED_PARAMS,
    LIVE_FEED_META_KEYS,
    SEARCH_RESULT_LIMIT,
)


class ProviderError(Exception):
    """Raised when the provider cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class Airport:
    """Airport entity used as a distance reference point."""

    iata: str
    name: str
    latitude: Optional[float]
    longitude: Optional[float]
    country_name: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class LiveFlight:
    """
    Live flight from the provider feed.

    Feed rows are positional lists:
        [0] icao24, [1] latitude, [2] longitude, [3] heading, [4] altitude,
        [5] ground speed, [6] squawk, [7] radar, [8] aircraft code,
        [9] registration, [10] timestamp, [11] origin IATA,
        [12] destination IATA, [13] flight number, [14] on ground (0/1),
        [15] vertical speed, [16] callsign, [17] glider flag, [18] airline ICAO
    """

    flight_id: str
    icao24: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    aircraft_code: Optional[str]
    registration: Optional[str]
    timestamp: Optional[int]
    origin_airport_iata: Optional[str]
    destination_airport_iata: Optional[str]
    number: Optional[str]
    on_ground: int
    callsign: Optional[str]

    @classmethod
    def from_feed(cls, flight_id: str, row: List[Any]) -> "LiveFlight":
        def at(index: int) -> Any:
            value = row[index] if index < len(row) else None
            return value if value not in ("", "N/A") else None

        return cls(
            flight_id=flight_id,
            icao24=at(0),
            latitude=at(1),
            longitude=at(2),
            aircraft_code=at(8),
            registration=at(9),
            timestamp=at(10),
            origin_airport_iata=at(11),
            destination_airport_iata=at(12),
            number=at(13),
            on_ground=at(14) or 0,
            callsign=at(16),
        )


class FlightRadarClient:
    """
    Provider client backed by requests sessions.

    requests does not guarantee that a Session is thread-safe, so every
    thread gets its own session on first use. An injected session is
    shared by all threads instead.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_API_TIMEOUT,
        user_agent: str = "Mozilla/5.0 flightscout",
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize provider client.

        Args:
            timeout: Per-call timeout in seconds
            user_agent: User-Agent header sent with every request
            session: Optional pre-configured session shared by all threads
                (tests, connection reuse)
        """
        self.timeout = timeout
        self.headers = {
            "Accept": "application/json",
            "User-Agent": user_agent,
        }
        self._shared_session = session
        if session is not None:
            session.headers.update(self.headers)

        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """Session for the calling thread."""
        if self._shared_session is not None:
            return self._shared_session

        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def __enter__(self) -> "FlightRadarClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the shared session or every per-thread session."""
        if self._shared_session is not None:
            self._shared_session.close()

        with self._lock:
            for session in self._sessions:
                session.close()
            self._sessions.clear()
        self._local = threading.local()

    def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """
        Perform a GET request and decode the JSON body.

        Raises:
            ProviderError: On HTTP errors, timeouts, transport errors or
                undecodable responses
        """
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ProviderError(f"HTTP {status} from {url}: {e}", status) from e

        except requests.exceptions.Timeout as e:
            raise ProviderError(
                f"Request timeout after {self.timeout}s: {url}"
            ) from e

        except requests.exceptions.RequestException as e:
            raise ProviderError(f"Request to {url} failed: {e}") from e

        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {url}: {e}") from e

    def get_airport_details(
        self,
        code: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        page: int = FIRST_SCHEDULE_PAGE,
    ) -> Dict[str, Any]:
        """
        Fetch one page of an airport's schedule and details.

        Returns:
            Airport payload with ``pluginData.schedule.{arrivals,departures}``,
            each holding ``page`` ({current, total}) and ``data`` ([{flight}])
        """
        params = {
            "code": code,
            "limit": page_size,
            "page": page,
            "plugin[]": ["details", "schedule"],
            "plugin-setting[schedule][mode]": "",
        }
        data = self._get_json(AIRPORT_DETAILS_URL, params)

        try:
            return data["result"]["response"]["airport"]
        except (KeyError, TypeError) as e:
            raise ProviderError(f"Unexpected airport payload for {code}") from e

    def get_airport(self, code: str) -> Optional[Airport]:
        """
        Look up an airport's name and position.

        Returns:
            Airport, or None if the provider does not know the code
        """
        airport = self.get_airport_details(code, page_size=1)
        details = (airport.get("pluginData") or {}).get("details")
        if not details:
            return None

        position = details.get("position") or {}
        country = position.get("country") or {}
        codes = details.get("code") or {}

        return Airport(
            iata=codes.get("iata") or code,
            name=details.get("name") or code,
            latitude=position.get("latitude"),
            longitude=position.get("longitude"),
            country_name=country.get("name"),
        )

    def get_flights(self, aircraft_type: Optional[str] = None) -> List[LiveFlight]:
        """
        Fetch live flights, optionally filtered by ICAO aircraft type code.
        """
        params = dict(LIVE_FEED_PARAMS)
        if aircraft_type:
            params["type"] = aircraft_type

        data = self._get_json(LIVE_FEED_URL, params)
        if not isinstance(data, dict):
            return []

        return [
            LiveFlight.from_feed(flight_id, row)
            for flight_id, row in data.items()
            if flight_id not in LIVE_FEED_META_KEYS and isinstance(row, list)
        ]

    def search(self, query: str) -> Dict[str, List[Dict[str, Any]]]:
        """
        Search the provider (e.g. 'HAM-JFK' for a route).

        Returns:
            Results grouped by type ('live', 'schedule', 'airport', ...)
        """
        data = self._get_json(SEARCH_URL, {"query": query, "limit": SEARCH_RESULT_LIMIT})

        grouped: Dict[str, List[Dict[str, Any]]] = {"live": [], "schedule": []}
        for result in (data or {}).get("results") or []:
            grouped.setdefault(result.get("type", "other"), []).append(result)

        return grouped

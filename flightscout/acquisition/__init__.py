"""
flightscout Acquisition Component

Fetches airport schedules and live flights from the provider and turns them
into canonical flight entries.

Main Classes:
    - FlightRadarClient: HTTP client for the provider endpoints
    - ScheduleFetcher: Paged arrival/departure fetching with pauses and retry
    - AdaptiveThrottle: Self-tuning delay between provider calls
    - RetryPolicy: Exponential backoff budget for rate-limited calls

Example:
    >>> from flightscout.acquisition import FlightRadarClient, ScheduleFetcher
    >>> with FlightRadarClient() as client:
    ...     fetcher = ScheduleFetcher(client)
    ...     arrivals = fetcher.fetch_arrival_entries('HAM')
"""

from .client import Airport, FlightRadarClient, LiveFlight, ProviderError
from .fetcher import ScheduleFetcher
from .normalizer import normalize_aircraft, normalize_arrival, normalize_departure
from .retry import RetryPolicy, fetch_with_retry, is_rate_limited
from .throttle import AdaptiveThrottle

# Utilities
from . import constants

__all__ = [
    # Main classes
    "FlightRadarClient",
    "ScheduleFetcher",
    "AdaptiveThrottle",
    "RetryPolicy",
    "ProviderError",
    "Airport",
    "LiveFlight",
    # Functions
    "fetch_with_retry",
    "is_rate_limited",
    "normalize_arrival",
    "normalize_departure",
    "normalize_aircraft",
    # Modules
    "constants",
]

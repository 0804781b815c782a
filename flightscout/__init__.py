"""
flightscout - Flight Movement Analytics

A batch analytics pipeline over airport schedules and live aircraft positions
fetched from FlightRadar24. Finds the 30 minute windows with the most distinct
destinations or origins, ranks airports by distance and by diversity, and
spots rare aircraft types near reference airports.

Components:
    - acquisition: Provider client, paging, retry and adaptive throttling
    - analysis: Window optimizer, rankings, aircraft scanner and reports
    - visualization: Interactive map export

Example:
    >>> from flightscout import Config
    >>> from flightscout.analysis import FlightAnalyzer
    >>> analyzer = FlightAnalyzer(Config())
    >>> results = analyzer.forward_lookup('HAM', ['JFK', 'EWR'])
    >>> analyzer.close()
"""

# Component imports for easy access
from . import acquisition
from . import analysis
from . import visualization
from . import utils
from . import config
from .config import Config

FLIGHTSCOUT_VERSION = "v1.0.0"

__version__ = FLIGHTSCOUT_VERSION
__author__ = "flightscout Project"
__license__ = "MIT"

__all__ = [
    "acquisition",
    "analysis",
    "visualization",
    "utils",
    "config",
    "Config",
]

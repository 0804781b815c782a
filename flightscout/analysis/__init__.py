"""
flightscout Analysis Component

Window optimization, airport rankings and aircraft scanning over normalized
flight entries.

Main Classes:
    - FlightAnalyzer: Main coordinator for all lookups
    - AircraftScanner: Bounded-concurrency live aircraft scan
    - RouteFinder: Flights between airport pairs
    - ReportGenerator: Console views and JSON/text report export

Example:
    >>> from flightscout.analysis import FlightAnalyzer
    >>> analyzer = FlightAnalyzer()
    >>> results = analyzer.airports_by_diversity(['HAM', 'FRA', 'MUC'])
    >>> analyzer.close()
"""

# Main analysis components
from .analyzer import FlightAnalyzer
from .aircraft_scanner import AircraftScanner, find_missing_types
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
    find_optimal_windows,
)

__all__ = [
    # Main classes
    "FlightAnalyzer",
    "AircraftScanner",
    "RouteFinder",
    "ReportGenerator",
    # Functions
    "find_optimal_windows",
    "find_optimal_forward_windows",
    "find_optimal_backward_windows",
    "analyze_airport_windows",
    "rank_airports_by_distance",
    "rank_airports_by_diversity",
    "summarize_departure_diversity",
    "summarize_routes",
    "find_missing_types",
]

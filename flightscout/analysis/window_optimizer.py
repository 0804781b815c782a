"""
Window Optimizer
Finds the 30 minute windows with the most distinct destinations or origins.

Every entry that is not more than half a window in the past starts a
candidate window. The window collects all following entries up to
start + 30 minutes and counts the distinct grouping keys among them. All
windows reaching the maximum count are returned, ties included, in order of
their start time. A window with no keys never counts as best.

The search is O(n^2) in the worst case (candidate starts times forward
scan), which is fine for daily airport volumes of a few hundred flights.
"""

from typing import Callable, Dict, List, Optional, Sequence

from flightscout.config import Settings
from flightscout.models import (
    AirportWindowAnalysis,
    BackwardEntry,
    E,
    ForwardEntry,
    TimeWindow,
    first_known,
)
from flightscout.utils import current_time_ms

from .grouping import destination_key, origin_key, target_key


def find_optimal_windows(
    entries: Sequence[E],
    key_fn: Callable[[E], Optional[str]],
    now_ms: Optional[int] = None,
) -> List[TimeWindow[E]]:
    """
    Find all 30 minute windows with maximal key diversity.

    Args:
        entries: Flight entries of one variant, in any order
        key_fn: Maps an entry to its grouping key; None keeps the entry in
            the window without adding diversity
        now_ms: Reference time; windows starting more than 15 minutes
            before it are skipped (default: now)

    Returns:
        Tied best windows ordered by start time; empty if nothing qualifies
    """
    if not entries:
        return []

    if now_ms is None:
        now_ms = current_time_ms()

    earliest_start = now_ms - Settings.WINDOW_SIZE_MS // 2
    ordered = sorted(entries, key=lambda entry: entry.event_time_ms)

    max_diversity = 0
    best_windows: List[TimeWindow[E]] = []

    for i, first in enumerate(ordered):
        if first.event_time_ms < earliest_start:
            continue

        window: TimeWindow[E] = TimeWindow(first.event_time_ms)
        for entry in ordered[i:]:
            if entry.event_time_ms > window.end_ms:
                break
            window.add(entry, key_fn(entry))

        if window.diversity > max_diversity:
            max_diversity = window.diversity
            best_windows = [window]
        elif window.diversity == max_diversity and max_diversity > 0:
            best_windows.append(window)

    return best_windows


def find_optimal_forward_windows(
    entries: Sequence[ForwardEntry], now_ms: Optional[int] = None
) -> List[TimeWindow[ForwardEntry]]:
    """Best departure windows, keyed by destination airport."""
    return find_optimal_windows(entries, destination_key, now_ms)


def find_optimal_backward_windows(
    entries: Sequence[BackwardEntry], now_ms: Optional[int] = None
) -> List[TimeWindow[BackwardEntry]]:
    """Best arrival windows, keyed by origin airport."""
    return find_optimal_windows(entries, origin_key, now_ms)


def analyze_airport_windows(
    flights_by_origin: Dict[str, List[BackwardEntry]],
    now_ms: Optional[int] = None,
) -> List[AirportWindowAnalysis]:
    """
    Find the best windows of every origin airport.

    Within an origin group the grouping key is the observed target airport,
    so a window's diversity counts how many of the targets the origin serves
    within 30 minutes.

    Returns:
        One analysis per origin with at least one window, highest diversity
        first
    """
    results: List[AirportWindowAnalysis] = []

    for origin_code, flights in flights_by_origin.items():
        if not flights:
            continue

        best_windows = find_optimal_windows(flights, target_key, now_ms)
        if not best_windows:
            continue

        name = first_known(flight.origin.city_name for flight in flights)
        country = first_known(flight.origin.country_name for flight in flights)
        results.append(
            AirportWindowAnalysis(
                airport_code=origin_code,
                airport_name=f"{name}, {country}",
                max_diversity=max(window.diversity for window in best_windows),
                best_windows=best_windows,
            )
        )

    results.sort(key=lambda analysis: analysis.max_diversity, reverse=True)
    return results

"""
Report Generator
Prints analysis results to the console and exports them to files.
"""

import json
import math
from dataclasses import fields, is_dataclass
from typing import Any, Dict, List, Optional, Sequence

from flightscout.config import Settings
from flightscout.models import (
    AircraftEntry,
    AircraftScanResult,
    AirportDistanceRecord,
    AirportDiversityRecord,
    AirportWindowAnalysis,
    BackwardEntry,
    DepartureDiversitySummary,
    FlightEntry,
    ForwardEntry,
    RouteFlightEntry,
    TimeWindow,
)
from flightscout.utils import current_time_ms, format_distance, format_duration_ms, format_time


def to_serializable(obj: Any) -> Any:
    """
    Convert results into JSON-friendly structures.

    Dataclasses become dicts, sets become sorted lists, windows expose their
    sorted members and infinite times become None.
    """
    if isinstance(obj, TimeWindow):
        return {
            "start_ms": obj.start_ms,
            "end_ms": obj.end_ms,
            "unique_keys": sorted(obj.unique_keys),
            "members": [to_serializable(member) for member in obj.members],
        }
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_serializable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return {str(key): to_serializable(value) for key, value in obj.items()}
    if isinstance(obj, (set, frozenset)):
        return sorted(to_serializable(item) for item in obj)
    if isinstance(obj, (list, tuple)):
        return [to_serializable(item) for item in obj]
    if isinstance(obj, float) and math.isinf(obj):
        return None
    return obj


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class ReportGenerator:
    """
    Generates analysis reports for the console and for files.
    """

    # --- File export ---

    def generate_report(
        self, analysis_results: Dict[str, Any], output_path: str, format: str = "json"
    ):
        """
        Generate analysis report file.

        Args:
            analysis_results: Results returned by a FlightAnalyzer operation
            output_path: Output file path
            format: Report format ('json', 'txt')
        """
        if format == "json":
            self._generate_json_report(analysis_results, output_path)
        elif format == "txt":
            self._generate_text_report(analysis_results, output_path)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _generate_json_report(self, results: Dict[str, Any], output_path: str):
        """Generate JSON report."""
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(to_serializable(results), f, indent=2, default=str)

    def _generate_text_report(self, results: Dict[str, Any], output_path: str):
        """Generate text report with one section per result key."""
        serializable = to_serializable(results)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write("=" * 70 + "\n")
            f.write("FLIGHTSCOUT ANALYSIS REPORT\n")
            f.write("=" * 70 + "\n\n")

            for section, content in serializable.items():
                f.write(f"{section.upper()}\n")
                f.write("-" * 70 + "\n")
                if isinstance(content, list):
                    for item in content:
                        f.write(f"  {json.dumps(item, default=str)}\n")
                else:
                    f.write(f"  {json.dumps(content, default=str)}\n")
                f.write("\n")

    # --- Flight lines ---

    def _flight_line(self, flight: FlightEntry) -> str:
        when = format_time(flight.event_time_ms)
        if isinstance(flight, RouteFlightEntry):
            return f"{when} - {flight.flight_code} {flight.status}"
        if isinstance(flight, ForwardEntry):
            place = flight.destination.city_name or flight.destination.iata_code or "?"
            country = flight.destination.country_name or "?"
            return f"{when} - {flight.flight_code} {place} ({country}) {flight.status}"
        if isinstance(flight, BackwardEntry):
            origin = flight.origin.iata_code or "?"
            return (
                f"{when} - {flight.flight_code} {origin} → {flight.target_airport_code} "
                f"{flight.status}"
            )
        return f"{when} - {flight.flight_code} {flight.status}"

    def display_departure_schedule(self, flights: Sequence[ForwardEntry]):
        """Print departures in time order."""
        for flight in sorted(flights, key=lambda f: f.event_time_ms):
            print(self._flight_line(flight))

    def display_flights_by_origin(self, flights_by_origin: Dict[str, List[BackwardEntry]]):
        """Print arrivals grouped by their origin airport."""
        for origin_code, flights in flights_by_origin.items():
            first = flights[0].origin if flights else None
            print(f"\n{origin_code} ({first.city_name if first else '?'}, "
                  f"{first.country_name if first else '?'})")
            for flight in sorted(flights, key=lambda f: f.event_time_ms):
                print(self._flight_line(flight))

    # --- Windows ---

    def display_window(self, window: TimeWindow, index: int):
        """Print one window with its first members."""
        print(f"   📅 Window {index}: {format_time(window.start_ms)} → {format_time(window.end_ms)}")
        print(f"   🎯 Airports: {', '.join(sorted(window.unique_keys))}")
        print("   ✈️  Flights:")

        members = window.members
        for flight in members[: Settings.FLIGHTS_TO_DISPLAY]:
            print(f"      {self._flight_line(flight)}")

        if len(members) > Settings.FLIGHTS_TO_DISPLAY:
            print(f"      ... and {len(members) - Settings.FLIGHTS_TO_DISPLAY} more flights")
        print()

    def display_windows(self, windows: Sequence[TimeWindow], title: str):
        """Print the tied best windows of one search."""
        print(f"\n🔍 {title}")
        if not windows:
            print("No windows found.")
            return

        print(f"✨ Best 30-minute window: {windows[0].diversity} unique airports")
        print(f"Found {_plural(len(windows), 'optimal window')}:\n")

        for index, window in enumerate(windows[: Settings.WINDOWS_TO_DISPLAY], start=1):
            self.display_window(window, index)

        if len(windows) > Settings.WINDOWS_TO_DISPLAY:
            print(f"   ... and {len(windows) - Settings.WINDOWS_TO_DISPLAY} more optimal windows\n")

    def display_airport_windows(self, analyses: Sequence[AirportWindowAnalysis]):
        """Print per-origin window analysis, most diverse origins first."""
        print("\n🔍 OPTIMAL 30-MINUTE WINDOW ANALYSIS")
        if not analyses:
            print("No airports with flights found.")
            return

        print(f"✨ Best 30-minute window globally: {analyses[0].max_diversity} unique destinations")
        print(f"Analyzed {_plural(len(analyses), 'departure airport')}\n")

        for analysis in analyses[: Settings.AIRPORTS_TO_DISPLAY]:
            print(f"🏆 {analysis.airport_code} ({analysis.airport_name})")
            print(f"   Max destinations: {analysis.max_diversity}")
            print(f"   Found {_plural(len(analysis.best_windows), 'optimal window')}:")
            for index, window in enumerate(
                analysis.best_windows[: Settings.WINDOWS_TO_DISPLAY], start=1
            ):
                self.display_window(window, index)

        if len(analyses) > Settings.AIRPORTS_TO_DISPLAY:
            print(f"... and {len(analyses) - Settings.AIRPORTS_TO_DISPLAY} more airports")

    # --- Rankings ---

    def display_airports_by_distance(self, records: Sequence[AirportDistanceRecord]):
        """Print origin airports closest first, with a range summary."""
        print("\n📍 Airports sorted by distance from origin:\n")
        if not records:
            print("No source airports found with valid coordinates.")
            return

        for rank, record in enumerate(records[: Settings.TOP_AIRPORTS_TO_DISPLAY], start=1):
            print(
                f"{rank:2d}. {record.code} ({record.name}, {record.country_name}) "
                f"{format_distance(record.distance_km)} - "
                f"{_plural(record.flight_count, 'flight')}"
            )

        closest, farthest = records[0], records[-1]
        print(f"\n📏 Distance range: {format_distance(closest.distance_km)} - "
              f"{format_distance(farthest.distance_km)}")
        print(f"🛫 Source airports: {len(records)}")

    def display_airports_by_diversity(
        self, records: Sequence[AirportDiversityRecord], now_ms: Optional[int] = None
    ):
        """Print origin airports with most distinct targets first."""
        if now_ms is None:
            now_ms = current_time_ms()

        print("\n🌐 Airports sorted by destination diversity:\n")
        if not records:
            print("No source airports found.")
            return

        for rank, record in enumerate(records[: Settings.TOP_AIRPORTS_TO_DISPLAY], start=1):
            if math.isinf(record.next_flight_time_ms):
                next_flight = "no upcoming flight"
            else:
                next_flight = (
                    f"next {format_time(int(record.next_flight_time_ms))} "
                    f"(in {format_duration_ms(int(record.next_flight_time_ms) - now_ms)})"
                )
            print(
                f"{rank:2d}. {record.code} ({record.name}, {record.country_name}) "
                f"{record.distinct_destination_count} destinations "
                f"[{', '.join(sorted(record.destinations))}] - "
                f"{_plural(record.total_flights, 'flight')}, {next_flight}"
            )

    def display_departure_diversity(self, summary: Optional[DepartureDiversitySummary]):
        if summary is None:
            print("No departures found.")
            return
        print(
            f"\n🌐 {summary.source_code}: {summary.distinct_destination_count} distinct "
            f"destinations across {_plural(summary.total_flights, 'flight')}"
        )
        if not math.isinf(summary.next_flight_time_ms):
            print(f"   Next departure: {format_time(int(summary.next_flight_time_ms))}")

    # --- Aircraft ---

    def display_aircraft(self, entry: AircraftEntry):
        reference = entry.nearest_reference
        distance = (
            f"{format_distance(reference.distance_km)} ({reference.code})"
            if reference
            else "N/A"
        )
        coords = ", ".join(
            f"{c:.3f}" if c is not None else "?" for c in entry.coordinates
        )
        if entry.on_ground:
            where = "on ground"
        else:
            where = f"{entry.origin_code or '?'} → {entry.destination_code or '?'}"
        print(
            f"{entry.aircraft_code} ({entry.flight_code or entry.registration}): "
            f"{where} {distance} @ [{coords}]"
        )

    def display_aircraft_scan(self, result: AircraftScanResult):
        """Print scanned aircraft nearest first, then the missing types."""
        for entry in result.flights:
            self.display_aircraft(entry)

        if result.missing_types:
            print(f"Missing aircraft types: {', '.join(result.missing_types)}")
        else:
            print("All aircraft types found!")

    # --- Routes ---

    def display_route_summary(self, flights: Sequence[RouteFlightEntry], summary: Dict[str, Any]):
        """Print flights per route and the overall route summary."""
        print("\n📋 FLIGHTS BY ROUTE")
        by_route: Dict[str, List[RouteFlightEntry]] = {}
        for flight in flights:
            by_route.setdefault(flight.route_key, []).append(flight)

        for route_key, route_flights in by_route.items():
            print(f"\n{route_key.replace('-', ' → ')} ({_plural(len(route_flights), 'flight')})")
            for flight in route_flights:
                print(f"  {self._flight_line(flight)}")

        print("\n📈 OVERALL SUMMARY")
        print(f"Routes searched: {summary['routes_searched']}")
        print(f"Total flights: {summary['total_flights']}")

        next_flight = summary["next_departure"]
        if next_flight is not None:
            print(f"Upcoming flights: {summary['upcoming_flights']}")
            print(
                f"Next departure: {format_time(next_flight.event_time_ms)} - "
                f"{next_flight.flight_code} ({next_flight.route_key}) - "
                f"{format_duration_ms(summary['time_until_next_ms'])}"
            )
            print("\nUpcoming flights by route:")
            for route_key, count in summary["upcoming_by_route"]:
                print(f"  {route_key.replace('-', ' → ')}: {_plural(count, 'flight')}")
        else:
            print("No upcoming flights")

        if summary["past_flights"]:
            print(f"Past flights: {summary['past_flights']}")

        if summary["routes_without_flights"]:
            print("\nRoutes with no flights:")
            for pair in summary["routes_without_flights"]:
                print(f"  {pair.source} → {pair.destination}")

    def display_route_search(self, route_search: Dict[str, Dict[str, List[Dict[str, Any]]]]):
        """Print the provider's route search hits per route."""
        print("\n🔎 ROUTE SEARCH")
        for route_key, groups in route_search.items():
            counts = ", ".join(
                f"{len(hits)} {group}" for group, hits in groups.items() if hits
            )
            print(f"{route_key.replace('-', ' → ')}: {counts or 'no results'}")
            for hit in groups.get("live", [])[: Settings.FLIGHTS_TO_DISPLAY]:
                print(f"  live: {hit.get('label') or hit.get('name') or hit.get('id')}")

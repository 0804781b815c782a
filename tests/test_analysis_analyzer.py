"""
Tests for the main flight analyzer.
"""

from datetime import datetime
from unittest.mock import Mock

import pytest

from flightscout.acquisition.client import Airport, LiveFlight, ProviderError
from flightscout.analysis.analyzer import FlightAnalyzer
from flightscout.config import Config
from flightscout.models import AirportPair

MINUTE = 60
NOW_S = int(datetime(2024, 6, 1, 12, 0).timestamp())
NOW_MS = NOW_S * 1000

POSITIONS = {
    "HAM": (53.6304, 9.9882),
    "FRA": (50.0333, 8.5706),
    "MUC": (48.3538, 11.7861),
    "CDG": (49.0097, 2.5479),
    "JFK": (40.6398, -73.7789),
    "EWR": (40.6925, -74.1687),
}


def airport_block(code):
    lat, lon = POSITIONS[code]
    return {
        "code": {"iata": code},
        "position": {
            "latitude": lat,
            "longitude": lon,
            "country": {"name": "Country of " + code},
            "region": {"city": code.title()},
        },
    }


def flight(number, origin, destination, minutes):
    return {
        "identification": {"number": {"default": number}},
        "status": {"live": False},
        "airport": {"origin": airport_block(origin), "destination": airport_block(destination)},
        "time": {"scheduled": {"departure": NOW_S + minutes * MINUTE}},
    }


ARRIVALS = {
    "HAM": [
        flight("LH1", "FRA", "HAM", 0),
        flight("LH2", "MUC", "HAM", 5),
        flight("LH3", "MUC", "HAM", 40),
        flight("AF1", "CDG", "HAM", 10),
    ],
    "MUC": [flight("LH4", "FRA", "MUC", 15), flight("AF2", "CDG", "MUC", 200)],
}

DEPARTURES = {
    "HAM": [
        flight("UA1", "HAM", "EWR", 30),
        flight("LH5", "HAM", "JFK", 20),
        flight("LH6", "HAM", "MUC", 25),
        flight("LH7", "HAM", "JFK", 14 * 60),
    ],
    "FRA": [flight("LH400", "FRA", "JFK", 60)],
}


class FakeClient:
    """Provider client serving fixed boards, one page each."""

    def __init__(self):
        self.get_flights = Mock(side_effect=self._flights)
        self.close = Mock()

    def get_airport_details(self, code, page_size=100, page=1):
        if code == "BAD":
            raise ProviderError("HTTP 500 from x", 500)
        board = lambda rows: {"page": {"current": 1, "total": 1}, "data": [{"flight": r} for r in rows]}
        return {
            "pluginData": {
                "schedule": {
                    "arrivals": board(ARRIVALS.get(code, [])),
                    "departures": board(DEPARTURES.get(code, [])),
                }
            }
        }

    def get_airport(self, code):
        if code not in POSITIONS:
            return None
        return Airport(code, code.title() + " Airport", *POSITIONS[code], "Country")

    def _flights(self, aircraft_type=None):
        if aircraft_type == "A388":
            row = ["x", 53.7, 10.0, 0, 0, 0, "", "", "A388", "A6-EDA", NOW_S, "DXB", "HAM", "EK61", 0, 0, "UAE61"]
            return [LiveFlight.from_feed("1", row)]
        return []

    def search(self, query):
        if query == "HAM-JFK":
            return {"live": [{"id": "2f1a", "label": "LH5"}], "schedule": []}
        return {"live": [], "schedule": []}


@pytest.fixture
def analyzer():
    config = Config()
    config.set("acquisition.delay_between_calls_ms", 0)
    return FlightAnalyzer(config, client=FakeClient(), sleep=Mock())


class TestLookups:
    """Tests for forward and backward lookups."""

    def test_forward_lookup(self, analyzer, capsys):
        results = analyzer.forward_lookup("HAM", ["JFK", "EWR"], now_ms=NOW_MS)

        assert [f.flight_code for f in results["flights"]] == ["UA1", "LH5"]
        assert results["best_windows"][0].unique_keys == {"JFK", "EWR"}
        assert results["diversity"].distinct_destination_count == 2
        assert "Found 2 departures from HAM" in capsys.readouterr().out

    def test_forward_lookup_all_days(self, analyzer):
        results = analyzer.forward_lookup("HAM", ["JFK"], only_today=False, now_ms=NOW_MS)
        assert [f.flight_code for f in results["flights"]] == ["LH5", "LH7"]

    def test_forward_lookup_nothing_found(self, analyzer, capsys):
        results = analyzer.forward_lookup("HAM", ["SYD"], now_ms=NOW_MS)

        assert results["flights"] == []
        assert results["best_windows"] == []
        assert results["diversity"] is None
        assert "No flights found." in capsys.readouterr().out

    def test_backward_lookup(self, analyzer):
        results = analyzer.backward_lookup(["HAM"], now_ms=NOW_MS)

        windows = results["best_windows"]
        assert len(windows) == 1
        assert windows[0].start_ms == NOW_MS
        assert windows[0].unique_keys == {"FRA", "MUC", "CDG"}
        assert set(results["flights_by_origin"]) == {"FRA", "MUC", "CDG"}

    def test_backward_lookup_skips_failing_airport(self, analyzer):
        results = analyzer.backward_lookup(["BAD", "MUC"], now_ms=NOW_MS)

        assert set(results["flights_by_origin"]) == {"FRA", "CDG"}
        codes = [a.airport_code for a in results["airport_windows"]]
        assert codes == ["FRA", "CDG"]


class TestRankings:
    """Tests for the ranking operations."""

    def test_airports_by_distance(self, analyzer):
        results = analyzer.airports_by_distance(["HAM", "MUC"], "HAM", now_ms=NOW_MS)

        assert results["reference"].iata == "HAM"
        assert [r.code for r in results["airports"]] == ["FRA", "MUC", "CDG"]

    def test_missing_reference_aborts(self, analyzer, capsys):
        assert analyzer.airports_by_distance(["HAM"], "XXX", now_ms=NOW_MS) is None
        assert "XXX not found" in capsys.readouterr().out

    def test_airports_by_diversity(self, analyzer):
        results = analyzer.airports_by_diversity(["HAM", "MUC"], now_ms=NOW_MS)

        records = results["airports"]
        assert [r.code for r in records] == ["FRA", "CDG", "MUC"]
        assert records[0].destinations == {"HAM", "MUC"}


class TestAircraftAndRoutes:
    """Tests for the type scan and route operations."""

    def test_flights_by_types(self, analyzer):
        results = analyzer.flights_by_types(["HAM", "FRA"], ["A388", "B748"], now_ms=NOW_MS)

        assert [a.iata for a in results["references"]] == ["HAM", "FRA"]
        assert [f.registration for f in results["flights"]] == ["A6-EDA"]
        assert results["flights"][0].nearest_reference.code == "HAM"
        assert results["missing_types"] == ["B748"]

    def test_flights_by_types_without_reference(self, analyzer):
        assert analyzer.flights_by_types(["XXX"], ["A388"], now_ms=NOW_MS) is None
        analyzer.client.get_flights.assert_not_called()

    def test_any_unresolved_reference_aborts(self, analyzer, capsys):
        assert analyzer.flights_by_types(["HAM", "XXX"], ["A388"], now_ms=NOW_MS) is None
        analyzer.client.get_flights.assert_not_called()
        assert "XXX not found" in capsys.readouterr().out

    def test_flights_between_pairs(self, analyzer):
        pairs = [AirportPair("HAM", "JFK"), AirportPair("FRA", "JFK"), AirportPair("HAM", "SYD")]
        results = analyzer.flights_between_pairs(pairs, now_ms=NOW_MS)

        assert [f.flight_code for f in results["flights"]] == ["LH5", "LH400"]
        assert results["summary"]["routes_without_flights"] == [AirportPair("HAM", "SYD")]
        assert results["metadata"]["routes"] == ["HAM-JFK", "FRA-JFK", "HAM-SYD"]

    def test_pairs_use_adaptive_throttle(self, analyzer):
        pairs = [AirportPair("HAM", "JFK"), AirportPair("FRA", "JFK")]
        analyzer.flights_between_pairs(pairs, now_ms=NOW_MS)

        # Throttle pauses are never zero, unlike the configured fixed delay
        delays = [c.args[0] for c in analyzer.sleep.call_args_list]
        assert delays
        assert all(d >= 1.5 for d in delays)

    def test_flights_between_pairs_with_search(self, analyzer, capsys):
        pairs = [AirportPair("HAM", "JFK"), AirportPair("HAM", "SYD")]
        results = analyzer.flights_between_pairs(pairs, now_ms=NOW_MS, search=True)

        assert results["route_search"]["HAM-JFK"]["live"] == [{"id": "2f1a", "label": "LH5"}]
        assert results["route_search"]["HAM-SYD"] == {"live": [], "schedule": []}
        out = capsys.readouterr().out
        assert "HAM → JFK: 1 live" in out
        assert "HAM → SYD: no results" in out

    def test_pairs_without_search(self, analyzer):
        results = analyzer.flights_between_pairs([AirportPair("HAM", "JFK")], now_ms=NOW_MS)
        assert "route_search" not in results

    def test_pairs_with_partial_throttle_config(self, tmp_path):
        config_path = tmp_path / "partial.yaml"
        config_path.write_text("throttle:\n  floor_ms: 50000\n")
        analyzer = FlightAnalyzer(
            Config(str(config_path)), client=FakeClient(), sleep=Mock()
        )

        results = analyzer.flights_between_pairs([AirportPair("HAM", "JFK")], now_ms=NOW_MS)

        assert [f.flight_code for f in results["flights"]] == ["LH5"]

    def test_close(self, analyzer):
        analyzer.close()
        analyzer.client.close.assert_called_once()

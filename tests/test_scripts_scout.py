"""
Tests for the command line interface.
"""

import argparse
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from scripts.scout import build_parser, parse_pair, resolve_targets, resolve_types, run
from flightscout.config import Config
from flightscout.models import AircraftScanResult, AirportPair


class TestParsing:
    """Tests for argument parsing."""

    def test_parse_pair(self):
        assert parse_pair("ham-jfk") == AirportPair("HAM", "JFK")

    @pytest.mark.parametrize("value", ["HAM", "HAM-", "HAM-JFK-EWR"])
    def test_invalid_pair(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_pair(value)

    def test_forward_command(self):
        args = build_parser().parse_args(["forward", "HAM", "--to", "JFK", "EWR"])
        assert args.command == "forward"
        assert args.to == ["JFK", "EWR"]
        assert args.all_days is False

    def test_global_options(self):
        args = build_parser().parse_args(
            ["--all-days", "--output", "out.json", "pairs", "HAM-JFK", "FRA-JFK"]
        )
        assert args.all_days is True
        assert args.routes == [AirportPair("HAM", "JFK"), AirportPair("FRA", "JFK")]

    def test_resolve_targets_with_region(self):
        config = Config()
        config.set("regions.asia", ["DXB", "SIN"])
        args = build_parser().parse_args(["diversity", "ham", "--region", "asia"])

        assert resolve_targets(args, config) == ["HAM", "DXB", "SIN"]

    def test_resolve_targets_unknown_region(self):
        args = build_parser().parse_args(["diversity", "--region", "atlantis"])
        with pytest.raises(SystemExit):
            resolve_targets(args, Config())

    def test_resolve_targets_empty(self):
        args = build_parser().parse_args(["backward"])
        with pytest.raises(SystemExit):
            resolve_targets(args, Config())


class TestRun:
    """Tests for command dispatch."""

    def test_dispatch_forward(self):
        analyzer = Mock()
        args = build_parser().parse_args(["--all-days", "forward", "ham", "--to", "jfk"])

        run(args, Config(), analyzer)

        analyzer.forward_lookup.assert_called_once_with("HAM", ["JFK"], False)

    def test_dispatch_distance_aborted(self):
        analyzer = Mock()
        analyzer.airports_by_distance.return_value = None
        args = build_parser().parse_args(["distance", "MUC", "--origin", "xxx"])

        assert run(args, Config(), analyzer) is None
        analyzer.airports_by_distance.assert_called_once_with(["MUC"], "XXX", None)

    def test_dispatch_pairs_with_search(self):
        analyzer = Mock()
        args = build_parser().parse_args(["pairs", "HAM-JFK", "--search"])

        run(args, Config(), analyzer)

        analyzer.flights_between_pairs.assert_called_once_with(
            [AirportPair("HAM", "JFK")], None, search=True
        )

    def test_dispatch_types_with_group(self):
        analyzer = Mock()
        config = Config()
        config.set("type_groups.quads", ["A388", "B748"])
        args = build_parser().parse_args(
            ["types", "--reference", "ham", "--types", "a346", "--group", "quads"]
        )

        run(args, config, analyzer)

        analyzer.flights_by_types.assert_called_once_with(["HAM"], ["A346", "A388", "B748"])

    def test_types_map_uses_scan_result(self, tmp_path):
        analyzer = Mock()
        analyzer.flights_by_types.return_value = {
            "references": ["ham"],
            "flights": ["entry"],
            "missing_types": ["B748"],
        }
        args = build_parser().parse_args(
            ["types", "--reference", "HAM", "--types", "A388", "--map", str(tmp_path / "m.html")]
        )

        with patch("scripts.scout.MapGenerator") as generator_cls:
            run(args, Config(), analyzer)

        generator = generator_cls.for_references.return_value
        scan_result = generator.add_scan_result.call_args.args[0]
        assert scan_result == AircraftScanResult(["entry"], ["B748"])
        generator.save.assert_called_once_with(str(tmp_path / "m.html"))


class TestTypeResolution:
    """Tests for aircraft type resolution."""

    def test_unknown_group(self):
        args = build_parser().parse_args(["types", "--reference", "HAM", "--group", "gliders"])
        with pytest.raises(SystemExit):
            resolve_types(args, Config())

    def test_no_types(self):
        args = build_parser().parse_args(["types", "--reference", "HAM"])
        with pytest.raises(SystemExit):
            resolve_types(args, Config())

    def test_builtin_group(self):
        args = build_parser().parse_args(["types", "--reference", "HAM", "--group", "speed"])
        assert "F104" in resolve_types(args, Config())

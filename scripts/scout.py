#!/usr/bin/env python3
"""
flightscout Command Line Interface

Usage:
    python scripts/scout.py [--config CONFIG_FILE] COMMAND [OPTIONS]
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from flightscout.config import Config
from flightscout.logging_config import setup_logging
from flightscout.models import AircraftScanResult, AirportPair
from flightscout.analysis import FlightAnalyzer
from flightscout.visualization import MapGenerator


def parse_pair(value: str) -> AirportPair:
    """Parse a route argument such as 'HAM-JFK'."""
    parts = value.upper().split("-")
    if len(parts) != 2 or not all(parts):
        raise argparse.ArgumentTypeError(f"Invalid route '{value}', expected SRC-DST")
    return AirportPair(parts[0], parts[1])


def resolve_targets(args, config: Config):
    """Target airports from the command line and/or a configured region."""
    targets = [code.upper() for code in (args.targets or [])]
    if args.region:
        try:
            targets.extend(config.region_airports(args.region))
        except KeyError:
            raise SystemExit(f"❌ Unknown region: {args.region}")
    if not targets:
        raise SystemExit("❌ No target airports given (use codes or --region)")
    return targets


def resolve_types(args, config: Config):
    """Aircraft type codes from the command line and/or a configured group."""
    types = [code.upper() for code in (args.types or [])]
    if args.group:
        try:
            types.extend(config.aircraft_type_group(args.group))
        except KeyError:
            raise SystemExit(f"❌ Unknown aircraft type group: {args.group}")
    if not types:
        raise SystemExit("❌ No aircraft types given (use --types or --group)")
    return types


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="flightscout - Flight movement analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Best departure windows from Hamburg to New York:
    python3 scripts/scout.py forward HAM --to JFK EWR LGA

  Origins serving the most Asian hubs:
    python3 scripts/scout.py diversity --region asia

  Origins of German arrivals, closest to Hamburg first:
    python3 scripts/scout.py distance --origin HAM FRA MUC

  Rare aircraft near Hamburg and Frankfurt:
    python3 scripts/scout.py types --reference HAM FRA --types A380 B748 A346 --map rare.html

  Heavyweight aircraft near Hamburg:
    python3 scripts/scout.py types --reference HAM --group heavyweight

  Flights on several routes, with the provider's route search:
    python3 scripts/scout.py pairs HAM-JFK FRA-JFK --search
        """,
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "--all-days",
        action="store_true",
        help="Include flights outside today",
    )
    parser.add_argument(
        "--output", type=str, help="Save results to a report file"
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "txt"],
        default="json",
        help="Report format (default: json)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    forward = subparsers.add_parser("forward", help="Departures from a source airport")
    forward.add_argument("source", type=str, help="Source airport IATA code")
    forward.add_argument("--to", nargs="+", default=[], help="Destination airport codes")

    for name, help_text in (
        ("backward", "Arrivals at target airports, grouped by origin"),
        ("diversity", "Origin airports ranked by destination diversity"),
        ("distance", "Origin airports ranked by distance from a reference"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("targets", nargs="*", help="Target airport IATA codes")
        sub.add_argument("--region", type=str, help="Add the airports of a configured region")
        if name == "distance":
            sub.add_argument("--origin", required=True, help="Reference airport code")
            sub.add_argument("--map", type=str, help="Export ranked airports to an HTML map")

    types = subparsers.add_parser("types", help="Live flights of rare aircraft types")
    types.add_argument("--reference", nargs="+", required=True, help="Reference airport codes")
    types.add_argument("--types", nargs="+", help="ICAO aircraft type codes")
    types.add_argument("--group", type=str, help="Add the types of a configured type group")
    types.add_argument("--map", type=str, help="Export aircraft to an HTML map")

    pairs = subparsers.add_parser("pairs", help="Flights between airport pairs")
    pairs.add_argument("routes", nargs="+", type=parse_pair, help="Routes as SRC-DST")
    pairs.add_argument(
        "--search", action="store_true", help="Also list the provider's route search results"
    )

    return parser


def run(args, config: Config, analyzer: FlightAnalyzer):
    """Run the selected command; returns its results or None on abort."""
    only_today = False if args.all_days else None

    if args.command == "forward":
        return analyzer.forward_lookup(
            args.source.upper(), [code.upper() for code in args.to], only_today
        )

    if args.command == "backward":
        return analyzer.backward_lookup(resolve_targets(args, config), only_today)

    if args.command == "diversity":
        return analyzer.airports_by_diversity(resolve_targets(args, config), only_today)

    if args.command == "distance":
        results = analyzer.airports_by_distance(
            resolve_targets(args, config), args.origin.upper(), only_today
        )
        if results and args.map:
            generator = MapGenerator.for_references([results["reference"]])
            generator.add_distance_ranking(results["airports"])
            generator.save(args.map)
        return results

    if args.command == "types":
        results = analyzer.flights_by_types(
            [code.upper() for code in args.reference],
            resolve_types(args, config),
        )
        if results and args.map:
            generator = MapGenerator.for_references(results["references"])
            generator.add_scan_result(
                AircraftScanResult(results["flights"], results["missing_types"])
            )
            generator.save(args.map)
        return results

    if args.command == "pairs":
        return analyzer.flights_between_pairs(args.routes, only_today, search=args.search)

    raise ValueError(f"Unknown command: {args.command}")


def main():
    """Main entry point for flightscout."""
    parser = build_parser()
    args = parser.parse_args()

    # Load configuration
    try:
        config = Config(args.config)
    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        sys.exit(1)

    setup_logging(config.log_level, config.log_format)

    analyzer = FlightAnalyzer(config)
    try:
        results = run(args, config, analyzer)
        if results is None:
            sys.exit(1)

        if args.output:
            analyzer.reporter.generate_report(results, args.output, args.format)
            print(f"\n💾 Report saved to: {args.output}")
    except KeyboardInterrupt:
        print("\n👋 Stopped by user")
    except Exception as e:
        print(f"❌ Fatal error: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)
    finally:
        analyzer.close()


if __name__ == "__main__":
    main()

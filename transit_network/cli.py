"""Command-line interface for transit-network."""

import argparse
import logging
import re
import sys
from pathlib import Path

from transit_network.api import DEFAULT_REGIONS, build_network, load_network, validate
from transit_network.gtfs.models import BuildConfig, RegionConfig
from transit_network.query.engine import DEFAULT_ROUTE_LIMIT, NetworkQuery
from transit_network.version import VERSION

# Empty or bracketed, e.g. "(NA)"
_TAG_RE = re.compile(r"^(\(.*\))?$")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_region(value: str) -> RegionConfig:
    """
    Parse a ``DIR:CODE[:TAG]`` region option.

    Fields are taken from the right, so DIR may itself contain colons. A
    third field only counts as TAG when it is bracketed, e.g. ``(NA)``.
    """
    parts = value.rsplit(":", 2)
    if len(parts) == 3 and not _TAG_RE.match(parts[2]):
        parts = value.rsplit(":", 1)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise argparse.ArgumentTypeError(f"Expected DIR:CODE[:TAG], got {value!r}")
    tag = parts[2] if len(parts) == 3 and parts[2] else None
    return RegionConfig(path=parts[0], code=parts[1], tag=tag)


def cmd_build(args: argparse.Namespace) -> int:
    """Execute build command."""
    setup_logging(args.verbose)

    root = Path(args.root)
    regions = args.region or list(DEFAULT_REGIONS)
    config = BuildConfig(
        regions=[
            RegionConfig(path=str(root / region.path), code=region.code, tag=region.tag)
            for region in regions
        ],
        public_dir=str(root / args.public_dir),
        output_filename=args.output_filename,
    )

    try:
        summary = build_network(config)
        print(
            f"Done! Wrote {summary.stats['routes']} routes and "
            f"{summary.stats['stops']} stops to {summary.output_path}"
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Build failed")
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute validate command."""
    setup_logging(args.verbose)

    try:
        report = validate(args.input)
        if report.valid:
            print("\nValidation successful!")
            print(f"Stats: {report.stats}")
            if report.warnings:
                print(f"Warnings ({len(report.warnings)}):")
                for warning in report.warnings:
                    print(f"  - {warning}")
            return 0
        else:
            print(f"\nValidation failed with {len(report.errors)} errors:")
            for error in report.errors:
                print(f"  - {error}")
            return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Validation failed")
        return 1


def cmd_search(args: argparse.Namespace) -> int:
    """Execute search command."""
    setup_logging(args.verbose)

    try:
        query = NetworkQuery(load_network(args.input))
        results = query.search(args.text)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Search failed")
        return 1

    if results.is_empty():
        print("No matches")
        return 0

    if results.countries:
        print("Countries")
        for country in results.countries:
            print(f"  {country}")
    if results.cities:
        print("Cities")
        for city in results.cities:
            print(f"  {city}")
            if args.details:
                details = query.city_details(city) or ""
                for line in details.splitlines():
                    print(f"      {line}")
    if results.stations:
        print("Stations")
        for station in results.stations:
            print(f"  {station.name} [{station.id}]")
    return 0


def cmd_routes(args: argparse.Namespace) -> int:
    """Execute routes command."""
    setup_logging(args.verbose)

    try:
        query = NetworkQuery(load_network(args.input))
        listing = query.list_routes(
            station_id=args.station,
            city=args.city,
            country=args.country,
            limit=args.limit,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Route listing failed")
        return 1

    for route in listing.routes:
        details = f"{len(route.stops)} stops"
        if route.long_name is not None:
            details = f"{details} • {route.long_name}"
        print(f"{query.route_label(route)} ({details})")
    if listing.truncated:
        print(f"Showing top {len(listing.routes)} of {listing.total} results")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="transit-network",
        description="Merge regional GTFS feeds into one queryable transit network",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Build command
    build_parser = subparsers.add_parser("build", help="Build the network artifact")
    build_parser.add_argument(
        "--root", default=".", help="Directory regions and output are relative to (default: .)"
    )
    build_parser.add_argument(
        "--region",
        action="append",
        type=parse_region,
        metavar="DIR:CODE[:TAG]",
        help="Region directory, ID scope code and optional bracketed tag; repeatable "
        "(default: gtfs_eu:EU, gtfs_us:US:(NA), gtfs_gb:GB)",
    )
    build_parser.add_argument(
        "--public-dir", default="public", help="Static asset directory (default: public)"
    )
    build_parser.add_argument(
        "--output-filename",
        default="transit_network.json",
        help="Artifact file name (default: transit_network.json)",
    )
    build_parser.set_defaults(func=cmd_build)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a network artifact")
    validate_parser.add_argument("--input", required=True, help="Path to network JSON")
    validate_parser.set_defaults(func=cmd_validate)

    # Search command
    search_parser = subparsers.add_parser("search", help="Search cities, stations and countries")
    search_parser.add_argument("--input", required=True, help="Path to network JSON")
    search_parser.add_argument(
        "--details", action="store_true", help="Show grouped labels and stops per city"
    )
    search_parser.add_argument("text", help="Search text (at least 2 characters)")
    search_parser.set_defaults(func=cmd_search)

    # Routes command
    routes_parser = subparsers.add_parser("routes", help="List routes, optionally filtered")
    routes_parser.add_argument("--input", required=True, help="Path to network JSON")
    routes_parser.add_argument("--station", help="Scoped stop ID")
    routes_parser.add_argument("--city", help="Canonical city label")
    routes_parser.add_argument("--country", help="Country name")
    routes_parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_ROUTE_LIMIT,
        help=f"Maximum routes to list (default: {DEFAULT_ROUTE_LIMIT})",
    )
    routes_parser.set_defaults(func=cmd_routes)

    # Parse and execute
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()

"""Public API for transit-network."""

import hashlib
import logging
from datetime import UTC, datetime
from pathlib import Path

from transit_network.gtfs.models import (
    BuildConfig,
    BuildSummary,
    Network,
    RegionConfig,
    RegionData,
    ValidationReport,
)
from transit_network.gtfs.reader import RegionReader
from transit_network.gtfs.validator import NetworkValidator
from transit_network.output.json import read_network_json, write_network_json
from transit_network.transform.merge import merge_regions
from transit_network.transform.routes import build_routes, materialize_routes
from transit_network.transform.stops import build_stops
from transit_network.version import VERSION

logger = logging.getLogger(__name__)

DEFAULT_REGIONS = (
    RegionConfig(path="gtfs_eu", code="EU"),
    RegionConfig(path="gtfs_us", code="US", tag="(NA)"),
    RegionConfig(path="gtfs_gb", code="GB"),
)


def load_region(region: RegionConfig) -> RegionData:
    """
    Load one region directory into scoped stops and routes.

    A missing directory or required file yields an empty RegionData and a
    warning rather than an error.

    Args:
        region: Region directory, code and optional tag

    Returns:
        RegionData for this region only
    """
    logger.info(f"Processing {region.path}...")

    reader = RegionReader(region.path)
    if not reader.exists():
        logger.warning(f"Skipped {region.path}: directory does not exist.")
        return RegionData()

    missing = reader.missing_files()
    if missing:
        logger.warning(f"Skipped {region.path}: missing required files: {', '.join(missing)}")
        return RegionData()

    reader.read_all()

    stops = build_stops(reader.stops, region.code, region.tag)
    routes = build_routes(reader.routes, region.code)
    materialized = materialize_routes(routes, reader.trips, reader.stop_times, region.code)

    return RegionData(stops=stops, routes=materialized)


def _check_regions(regions: list[RegionConfig]) -> None:
    codes = [region.code for region in regions]
    duplicates = sorted({code for code in codes if codes.count(code) > 1})
    if duplicates:
        raise ValueError(f"Duplicate region codes: {', '.join(duplicates)}")
    for region in regions:
        if not region.code or ":" in region.code:
            raise ValueError(f"Invalid region code: {region.code!r}")


def merge_network(regions: list[RegionConfig]) -> Network:
    """Load every region and merge them, raising EmptyNetworkError if empty."""
    _check_regions(regions)
    return merge_regions([load_region(region) for region in regions])


def build_network(config: BuildConfig) -> BuildSummary:
    """
    Build the merged network artifact.

    Nothing is written when the merged network has no stops or no routes.

    Args:
        config: Regions to load and output location

    Returns:
        BuildSummary with build metadata
    """
    logger.info(f"Starting build of {len(config.regions)} regions")
    start_time = datetime.now(UTC)

    network = merge_network(config.regions)

    output_path = Path(config.public_dir) / config.output_filename
    write_network_json(output_path, network)

    with open(output_path, "rb") as f:
        checksum = hashlib.sha256(f.read()).hexdigest()

    stats = {
        "regions": len(config.regions),
        "stops": len(network.stops),
        "routes": len(network.routes),
        "route_stops": sum(len(route.stops) for route in network.routes),
    }

    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(f"Build completed in {elapsed:.2f}s")

    return BuildSummary(
        tool_version=VERSION,
        created_at_iso=start_time.isoformat(),
        inputs={"regions": [region.path for region in config.regions]},
        output_path=str(output_path),
        checksum=checksum,
        stats=stats,
    )


def load_network(input_path: str) -> Network:
    """Load a network artifact for querying."""
    return read_network_json(Path(input_path))


def validate(input_path: str) -> ValidationReport:
    """
    Validate a network artifact.

    Args:
        input_path: Path to the network JSON file

    Returns:
        ValidationReport with results
    """
    logger.info(f"Validating artifact: {input_path}")

    path = Path(input_path)
    if not path.exists():
        return ValidationReport(valid=False, errors=[f"Artifact not found: {input_path}"])

    try:
        network = read_network_json(path)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        return ValidationReport(valid=False, errors=[f"Artifact could not be parsed: {e}"])

    return NetworkValidator(network).validate()

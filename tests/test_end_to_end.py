"""End-to-end tests."""

import json
import re
from pathlib import Path

import pytest

from transit_network import build_network, load_network, load_region, validate
from transit_network.gtfs.models import BuildConfig, RegionConfig
from transit_network.query.engine import NetworkQuery
from transit_network.transform.merge import EmptyNetworkError


def test_end_to_end_berlin(gtfs_berlin: Path, tmp_output: Path) -> None:
    """Test the single-stop Berlin region."""
    summary = build_network(
        BuildConfig(
            regions=[RegionConfig(path=str(gtfs_berlin), code="EU")],
            public_dir=str(tmp_output),
        )
    )

    assert summary.stats["stops"] == 1
    assert summary.stats["routes"] == 1

    with open(summary.output_path, encoding="utf-8") as f:
        data = json.load(f)

    stop = data["stops"]["EU:A1"]
    assert stop["id"] == "EU:A1"
    assert stop["city"] == "Berlin"
    assert stop["country"] == "Germany"
    assert stop["name"] == "Berlin Hbf"
    assert stop["lat"] == 52.5
    assert stop["lon"] == 13.4

    assert data["routes"] == [
        {"id": "EU:R1", "shortName": "X1", "longName": None, "stops": ["EU:A1"]}
    ]


def test_end_to_end_multi_region(gtfs_eu: Path, gtfs_us: Path, tmp_output: Path) -> None:
    """Test IDs are scoped and unique across regions."""
    summary = build_network(
        BuildConfig(
            regions=[
                RegionConfig(path=str(gtfs_eu), code="EU"),
                RegionConfig(path=str(gtfs_us), code="US", tag="(NA)"),
            ],
            public_dir=str(tmp_output),
            output_filename="network.json",
        )
    )

    assert summary.output_path == str(tmp_output / "network.json")
    assert summary.stats == {"regions": 2, "stops": 13, "routes": 4, "route_stops": 11}
    assert len(summary.checksum) == 64

    network = load_network(summary.output_path)
    assert "EU:A1" in network.stops
    assert "US:A1" in network.stops
    assert all(re.fullmatch(r"(EU|US):.+", stop_id) for stop_id in network.stops)
    assert all(route.stops for route in network.routes)
    assert network.stops["US:A1"].city == "Newark (NA)"
    assert network.stops["US:B4"].country == "Toronto"

    report = validate(summary.output_path)
    assert report.valid
    assert any("EU:A8" in warning for warning in report.warnings)

    query = NetworkQuery(network)
    assert query.canonical_city("Amsterdam") != query.canonical_city("Amsterdam (NA)")


def test_missing_region_is_skipped(
    gtfs_berlin: Path, gtfs_missing_stop_times: Path, tmp_path: Path, tmp_output: Path
) -> None:
    """Test missing directories and files only drop that region."""
    assert load_region(RegionConfig(path=str(gtfs_missing_stop_times), code="GB")).is_empty()
    assert load_region(RegionConfig(path=str(tmp_path / "absent"), code="GB")).is_empty()

    summary = build_network(
        BuildConfig(
            regions=[
                RegionConfig(path=str(gtfs_missing_stop_times), code="GB"),
                RegionConfig(path=str(tmp_path / "absent"), code="US", tag="(NA)"),
                RegionConfig(path=str(gtfs_berlin), code="EU"),
            ],
            public_dir=str(tmp_output),
        )
    )

    assert summary.stats["stops"] == 1
    assert summary.stats["routes"] == 1


def test_empty_network_writes_nothing(
    gtfs_missing_stop_times: Path, tmp_path: Path, tmp_output: Path
) -> None:
    """Test two empty regions fail without writing an artifact."""
    config = BuildConfig(
        regions=[
            RegionConfig(path=str(gtfs_missing_stop_times), code="EU"),
            RegionConfig(path=str(tmp_path / "absent"), code="US"),
        ],
        public_dir=str(tmp_output),
    )

    with pytest.raises(EmptyNetworkError):
        build_network(config)

    assert not (tmp_output / config.output_filename).exists()


def test_duplicate_region_codes_rejected(gtfs_berlin: Path, tmp_output: Path) -> None:
    """Test two regions cannot share a scope code."""
    config = BuildConfig(
        regions=[
            RegionConfig(path=str(gtfs_berlin), code="EU"),
            RegionConfig(path=str(gtfs_berlin), code="EU"),
        ],
        public_dir=str(tmp_output),
    )

    with pytest.raises(ValueError, match="Duplicate region codes"):
        build_network(config)


def test_validate_missing_artifact(tmp_path: Path) -> None:
    """Test validating a missing artifact reports an error."""
    report = validate(str(tmp_path / "missing.json"))

    assert not report.valid

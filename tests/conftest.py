"""Pytest configuration and fixtures."""

import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def gtfs_berlin() -> Path:
    """Path to single-stop Berlin GTFS fixture."""
    return FIXTURES / "gtfs_berlin"


@pytest.fixture
def gtfs_eu() -> Path:
    """Path to European GTFS fixture."""
    return FIXTURES / "gtfs_eu"


@pytest.fixture
def gtfs_us() -> Path:
    """Path to North American GTFS fixture."""
    return FIXTURES / "gtfs_us"


@pytest.fixture
def gtfs_missing_stop_times() -> Path:
    """Path to GTFS fixture without stop_times.txt."""
    return FIXTURES / "gtfs_missing_stop_times"


@pytest.fixture
def tmp_output(tmp_path: Path) -> Path:
    """Temporary public output directory."""
    output_dir = tmp_path / "public"
    output_dir.mkdir()
    yield output_dir
    # Cleanup
    if output_dir.exists():
        shutil.rmtree(output_dir)

"""GTFS region reader."""

import csv
import logging
import math
from collections.abc import Iterator
from pathlib import Path

from transit_network.gtfs.models import GTFSRoute, GTFSStop, StopTime, Trip

logger = logging.getLogger(__name__)

REQUIRED_FILES = ("stops.txt", "routes.txt", "trips.txt", "stop_times.txt")


def _optional(value: str | None) -> str | None:
    """Map missing or blank cells to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_coordinate(value: str | None) -> float:
    """Parse a coordinate, returning nan for missing or invalid values."""
    if value is None:
        return math.nan
    try:
        return float(value)
    except ValueError:
        return math.nan


class RegionReader:
    """Read the four GTFS tables of one region directory."""

    def __init__(self, region_path: str) -> None:
        """Initialize reader with a region directory path."""
        self.region_path = Path(region_path)

        self.stops: list[GTFSStop] = []
        self.routes: list[GTFSRoute] = []
        self.trips: list[Trip] = []
        self.stop_times: list[StopTime] = []

    def exists(self) -> bool:
        """Return True when the region directory exists."""
        return self.region_path.is_dir()

    def missing_files(self) -> list[str]:
        """List required files absent from the region directory."""
        return [name for name in REQUIRED_FILES if not (self.region_path / name).is_file()]

    def read_all(self) -> None:
        """Read all required GTFS files."""
        logger.info(f"Reading GTFS data from {self.region_path}")
        self.read_stops()
        self.read_routes()
        self.read_trips()
        self.read_stop_times()
        logger.info(
            f"Loaded {len(self.stops)} stops, {len(self.routes)} routes, "
            f"{len(self.trips)} trips, {len(self.stop_times)} stop_times"
        )

    def _rows(self, filename: str) -> Iterator[dict[str, str]]:
        file_path = self.region_path / filename
        if not file_path.exists():
            raise FileNotFoundError(f"Required file not found: {file_path}")

        with open(file_path, encoding="utf-8-sig", newline="") as f:
            yield from csv.DictReader(f)

    def read_stops(self) -> None:
        """Read stops.txt, skipping rows without stop_id."""
        for row in self._rows("stops.txt"):
            stop_id = _optional(row.get("stop_id"))
            if stop_id is None:
                continue
            self.stops.append(
                GTFSStop(
                    stop_id=stop_id,
                    name=row.get("stop_name") or "",
                    lat=_parse_coordinate(row.get("stop_lat")),
                    lon=_parse_coordinate(row.get("stop_lon")),
                    timezone=_optional(row.get("stop_timezone")),
                )
            )

    def read_routes(self) -> None:
        """Read routes.txt, skipping rows without route_id."""
        for row in self._rows("routes.txt"):
            route_id = _optional(row.get("route_id"))
            if route_id is None:
                continue
            self.routes.append(
                GTFSRoute(
                    route_id=route_id,
                    short_name=_optional(row.get("route_short_name")),
                    long_name=_optional(row.get("route_long_name")),
                )
            )

    def read_trips(self) -> None:
        """Read trips.txt, skipping rows without trip_id or route_id."""
        for row in self._rows("trips.txt"):
            trip_id = _optional(row.get("trip_id"))
            route_id = _optional(row.get("route_id"))
            if trip_id is None or route_id is None:
                continue
            self.trips.append(Trip(trip_id=trip_id, route_id=route_id))

    def read_stop_times(self) -> None:
        """Read stop_times.txt in source order."""
        for row in self._rows("stop_times.txt"):
            trip_id = _optional(row.get("trip_id"))
            stop_id = _optional(row.get("stop_id"))
            if trip_id is None or stop_id is None:
                continue

            try:
                stop_sequence = int(row.get("stop_sequence") or "")
            except ValueError:
                logger.debug(
                    f"Skipping stop time {trip_id}/{stop_id}: "
                    f"invalid stop_sequence {row.get('stop_sequence')!r}"
                )
                continue

            self.stop_times.append(
                StopTime(trip_id=trip_id, stop_id=stop_id, stop_sequence=stop_sequence)
            )

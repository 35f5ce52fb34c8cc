"""Data models for GTFS records and the merged network."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class Stop:
    """Stop with a region-scoped ID and derived city/country labels."""

    id: str
    name: str
    city: str
    lat: float
    lon: float
    country: str


@dataclass(frozen=True)
class Route:
    """Route with its ordered stop-ID sequence."""

    id: str
    short_name: str | None
    long_name: str | None
    stops: tuple[str, ...] = ()


@dataclass(frozen=True)
class GTFSStop:
    """GTFS stop row as read from stops.txt."""

    stop_id: str
    name: str
    lat: float  # nan when unparsable
    lon: float
    timezone: str | None = None


@dataclass(frozen=True)
class GTFSRoute:
    """GTFS route row as read from routes.txt."""

    route_id: str
    short_name: str | None = None
    long_name: str | None = None


@dataclass(frozen=True)
class Trip:
    """GTFS trip (only the route link is modelled)."""

    trip_id: str
    route_id: str


@dataclass(frozen=True)
class StopTime:
    """GTFS stop time (arrival/departure times are not modelled)."""

    trip_id: str
    stop_id: str
    stop_sequence: int


@dataclass(frozen=True)
class RegionConfig:
    """One region feed: directory, ID scope code and optional label tag."""

    path: str
    code: str
    tag: str | None = None


@dataclass
class RegionData:
    """Stops and routes produced by one region before merging."""

    stops: dict[str, Stop] = field(default_factory=dict)
    routes: list[Route] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True when the region contributed nothing."""
        return not self.stops and not self.routes


@dataclass(frozen=True)
class Network:
    """Merged, read-only network shared by the query layer."""

    stops: Mapping[str, Stop]
    routes: tuple[Route, ...]

    @classmethod
    def create(cls, stops: Mapping[str, Stop], routes: list[Route] | tuple[Route, ...]) -> "Network":
        """Freeze the given stop map and route list into a Network."""
        return cls(stops=MappingProxyType(dict(stops)), routes=tuple(routes))

    def get_stop(self, stop_id: str) -> Stop | None:
        """Resolve a stop ID, returning None for unknown IDs."""
        return self.stops.get(stop_id)


@dataclass
class BuildConfig:
    """Configuration for a network build."""

    regions: list[RegionConfig]
    public_dir: str = "public"
    output_filename: str = "transit_network.json"


@dataclass
class BuildSummary:
    """Build metadata returned after the artifact is written."""

    tool_version: str
    created_at_iso: str
    inputs: dict[str, Any]
    output_path: str
    checksum: str  # sha256 of the artifact
    stats: dict[str, int]


@dataclass
class ValidationReport:
    """Report from validation process."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)

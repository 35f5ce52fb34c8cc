"""Query and filter engine over a merged network."""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from transit_network.gtfs.models import Network, Route, Stop
from transit_network.query.canonical import (
    CityBucket,
    CityCanonicalizer,
    build_city_buckets,
    format_city_details,
)

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
MAX_RESULTS_PER_CATEGORY = 5
DEFAULT_ROUTE_LIMIT = 100

COUNTRY_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "us": "United States",
        "usa": "United States",
    }
)


@dataclass(frozen=True)
class StationMatch:
    """Station search hit."""

    id: str
    name: str


@dataclass
class SearchResults:
    """Search hits per category, each capped and ordered."""

    cities: list[str] = field(default_factory=list)
    countries: list[str] = field(default_factory=list)
    stations: list[StationMatch] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True when no category has hits."""
        return not (self.cities or self.countries or self.stations)


@dataclass
class RouteListing:
    """A page of deduplicated routes with the total before truncation."""

    routes: list[Route]
    total: int

    @property
    def truncated(self) -> bool:
        return self.total > len(self.routes)


@dataclass(frozen=True)
class _Indices:
    network: Network
    canonicalizer: CityCanonicalizer
    buckets: Mapping[str, CityBucket]


def route_signature(route: Route) -> tuple[str, tuple[str, ...]]:
    """Identity used for deduplication: route ID plus ordered stop IDs."""
    return route.id, route.stops


def dedupe_routes(routes: Iterable[Route]) -> list[Route]:
    """Collapse routes with identical signatures, keeping first-seen order."""
    seen: set[tuple[str, tuple[str, ...]]] = set()
    deduped: list[Route] = []
    for route in routes:
        signature = route_signature(route)
        if signature in seen:
            continue
        seen.add(signature)
        deduped.append(route)
    return deduped


def _has_position(stop: Stop) -> bool:
    return math.isfinite(stop.lat) and math.isfinite(stop.lon)


class NetworkQuery:
    """
    Answer city, country, station and route lookups over a network.

    The canonical city map and the city buckets are derived from the loaded
    network and rebuilt together by ``load``; they are never updated in
    place. Route stop IDs missing from the stop map are skipped.
    """

    def __init__(self, network: Network) -> None:
        """Initialize with a network and build its derived indices."""
        self._indices = self._build_indices(network)

    @staticmethod
    def _build_indices(network: Network) -> _Indices:
        canonicalizer = CityCanonicalizer(network)
        buckets = build_city_buckets(network, canonicalizer)
        logger.info(
            f"Indexed {len(network.stops)} stops into {len(buckets)} cities, "
            f"{len(network.routes)} routes"
        )
        return _Indices(network=network, canonicalizer=canonicalizer, buckets=buckets)

    def load(self, network: Network) -> None:
        """Replace the network, rebuilding all derived indices."""
        if network is self._indices.network:
            return
        self._indices = self._build_indices(network)

    @property
    def network(self) -> Network:
        return self._indices.network

    @property
    def canonical_cities(self) -> Mapping[str, str]:
        """Raw city label to canonical label."""
        return self._indices.canonicalizer.by_raw

    @property
    def city_buckets(self) -> Mapping[str, CityBucket]:
        return self._indices.buckets

    def canonical_city(self, city: str) -> str:
        """Return the canonical form of a city label."""
        return self._indices.canonicalizer.canonicalize(city)

    def city_details(self, city: str) -> str | None:
        """Return hover text for a canonical city, or None if unknown."""
        bucket = self._indices.buckets.get(city)
        if bucket is None:
            return None
        return format_city_details(city, bucket)

    def resolve_stops(self, route: Route) -> list[Stop]:
        """Resolve a route's stop IDs, skipping unknown ones."""
        stops = self._indices.network.stops
        return [stops[stop_id] for stop_id in route.stops if stop_id in stops]

    def search(self, text: str) -> SearchResults:
        """
        Find cities, stations and countries matching a search string.

        Matching is a case-insensitive substring test. Cities are grouped to
        their canonical label; stations whose name equals a matched city are
        left out.

        Args:
            text: Search string, at least two characters

        Returns:
            SearchResults with at most five entries per category
        """
        if len(text) < MIN_SEARCH_LENGTH:
            return SearchResults()

        needle = text.lower()
        alias = COUNTRY_ALIASES.get(needle)

        cities: dict[str, None] = {}
        countries: set[str] = set()
        stations: list[StationMatch] = []

        for stop in self._indices.network.stops.values():
            if needle in stop.city.lower():
                cities[self.canonical_city(stop.city)] = None
            if needle in stop.name.lower():
                stations.append(StationMatch(id=stop.id, name=stop.name))
            if needle in stop.country.lower() or stop.country == alias:
                countries.add(stop.country)

        stations = [station for station in stations if station.name not in cities]

        return SearchResults(
            cities=sorted(cities, key=len)[:MAX_RESULTS_PER_CATEGORY],
            countries=sorted(countries)[:MAX_RESULTS_PER_CATEGORY],
            stations=sorted(stations, key=lambda s: len(s.name))[:MAX_RESULTS_PER_CATEGORY],
        )

    def filter_routes(
        self,
        station_id: str | None = None,
        city: str | None = None,
        country: str | None = None,
    ) -> list[Route]:
        """
        Return deduplicated routes matching one filter.

        Only the highest-priority filter given is applied, in the order
        station, city, country. With no filter every route is returned.
        """
        routes: Iterable[Route] = self._indices.network.routes

        if station_id is not None:
            routes = [route for route in routes if station_id in route.stops]
        elif city is not None:
            routes = [
                route
                for route in routes
                if any(self.canonical_city(stop.city) == city for stop in self.resolve_stops(route))
            ]
        elif country is not None:
            routes = [
                route
                for route in routes
                if any(stop.country == country for stop in self.resolve_stops(route))
            ]

        return dedupe_routes(routes)

    def list_routes(
        self,
        station_id: str | None = None,
        city: str | None = None,
        country: str | None = None,
        limit: int = DEFAULT_ROUTE_LIMIT,
    ) -> RouteListing:
        """Filter routes and truncate the listing to ``limit`` entries."""
        routes = self.filter_routes(station_id=station_id, city=city, country=country)
        return RouteListing(routes=routes[:limit], total=len(routes))

    def city_stops(self, city: str) -> list[Stop]:
        """Return stops whose canonical city is ``city``, in network order."""
        return [
            stop
            for stop in self._indices.network.stops.values()
            if self.canonical_city(stop.city) == city
        ]

    def route_positions(self, route: Route) -> list[tuple[float, float]]:
        """Ordered (lat, lon) of the route's known stops with valid coordinates."""
        return [(stop.lat, stop.lon) for stop in self.resolve_stops(route) if _has_position(stop)]

    def route_bounds(
        self, route: Route
    ) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """Return ((min_lat, min_lon), (max_lat, max_lon)), or None without positions."""
        positions = self.route_positions(route)
        if not positions:
            return None
        lats = [lat for lat, _ in positions]
        lons = [lon for _, lon in positions]
        return (min(lats), min(lons)), (max(lats), max(lons))

    def route_label(self, route: Route) -> str:
        """Format a route as ``"<short name>: <first stop> → <last stop>"``."""
        stops = self._indices.network.stops
        first = stops.get(route.stops[0]) if route.stops else None
        last = stops.get(route.stops[-1]) if route.stops else None
        first_name = first.name if first is not None else "?"
        last_name = last.name if last is not None else "?"

        prefix = f"{route.short_name}: " if route.short_name is not None else ""
        return f"{prefix}{first_name} → {last_name}"

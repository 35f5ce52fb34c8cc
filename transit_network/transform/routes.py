"""Route materialization from a representative trip per route."""

import logging

from transit_network.gtfs.models import GTFSRoute, Route, StopTime, Trip
from transit_network.transform.ids import scoped_id

logger = logging.getLogger(__name__)


def build_routes(gtfs_routes: list[GTFSRoute], region_code: str) -> dict[str, Route]:
    """Build scoped routes with empty stop sequences, keyed by scoped ID."""
    routes: dict[str, Route] = {}
    for gtfs_route in gtfs_routes:
        route_id = scoped_id(region_code, gtfs_route.route_id)
        routes[route_id] = Route(
            id=route_id,
            short_name=gtfs_route.short_name,
            long_name=gtfs_route.long_name,
        )
    return routes


def select_representative_trips(trips: list[Trip], region_code: str) -> dict[str, str]:
    """Map each scoped route ID to its first trip in source order."""
    route_to_trip: dict[str, str] = {}
    for trip in trips:
        route_id = scoped_id(region_code, trip.route_id)
        if route_id not in route_to_trip:
            route_to_trip[route_id] = trip.trip_id
    return route_to_trip


def group_stop_times(stop_times: list[StopTime], region_code: str) -> dict[str, list[tuple[str, int]]]:
    """Group (scoped stop ID, sequence) pairs by trip, keeping input order."""
    trip_stops: dict[str, list[tuple[str, int]]] = {}
    for st in stop_times:
        if st.trip_id not in trip_stops:
            trip_stops[st.trip_id] = []
        trip_stops[st.trip_id].append((scoped_id(region_code, st.stop_id), st.stop_sequence))
    return trip_stops


def materialize_routes(
    routes: dict[str, Route],
    trips: list[Trip],
    stop_times: list[StopTime],
    region_code: str,
) -> list[Route]:
    """
    Assign each route the ordered stops of its representative trip.

    Stop times are sorted by sequence with a stable sort, so rows sharing a
    sequence number keep their input order. Routes left without stops are
    dropped.

    Args:
        routes: Scoped routes keyed by ID, in source order
        trips: Region trips in source order
        stop_times: Region stop times in source order
        region_code: Region code used for ID scoping

    Returns:
        Routes with non-empty stop sequences, in source order
    """
    logger.info(f"Materializing routes for region {region_code}")

    route_to_trip = select_representative_trips(trips, region_code)
    trip_stops = group_stop_times(stop_times, region_code)

    materialized: list[Route] = []
    for route_id, route in routes.items():
        trip_id = route_to_trip.get(route_id)
        if trip_id is None:
            logger.debug(f"Route {route_id} has no trips, skipping")
            continue

        ordered = sorted(trip_stops.get(trip_id, []), key=lambda pair: pair[1])
        if not ordered:
            logger.debug(f"Route {route_id} trip {trip_id} has no stop times, skipping")
            continue

        materialized.append(
            Route(
                id=route.id,
                short_name=route.short_name,
                long_name=route.long_name,
                stops=tuple(stop_id for stop_id, _ in ordered),
            )
        )

    unknown_routes = set(route_to_trip) - set(routes)
    if unknown_routes:
        logger.debug(f"Ignoring trips for {len(unknown_routes)} routes missing from routes.txt")

    logger.info(f"Built {len(materialized)} routes ({len(routes) - len(materialized)} without stops)")
    return materialized

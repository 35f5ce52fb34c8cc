"""Merging of per-region results into one network."""

import logging

from transit_network.gtfs.models import Network, RegionData, Route, Stop

logger = logging.getLogger(__name__)


class EmptyNetworkError(ValueError):
    """Raised when the merged network has no stops or no routes."""


def merge_regions(regions: list[RegionData]) -> Network:
    """Union region stop maps and concatenate route lists."""
    logger.info(f"Merging {len(regions)} regions")

    stops: dict[str, Stop] = {}
    routes: list[Route] = []

    for region in regions:
        for stop_id, stop in region.stops.items():
            if stop_id in stops:
                logger.warning(f"Duplicate stop ID {stop_id} across regions, keeping first")
                continue
            stops[stop_id] = stop
        routes.extend(region.routes)

    if not stops or not routes:
        raise EmptyNetworkError(
            f"No GTFS data was processed ({len(stops)} stops, {len(routes)} routes). "
            "Each region directory needs stops.txt, routes.txt, trips.txt and stop_times.txt."
        )

    logger.info(f"Merged network has {len(stops)} stops and {len(routes)} routes")
    return Network.create(stops, routes)

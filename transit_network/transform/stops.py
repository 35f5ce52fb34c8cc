"""Stop record construction for one region."""

import logging

from transit_network.gtfs.models import GTFSStop, Stop
from transit_network.transform.city import city_label
from transit_network.transform.country import resolve_country
from transit_network.transform.ids import scoped_id

logger = logging.getLogger(__name__)


def _with_tag(label: str, region_tag: str | None) -> str:
    if not region_tag:
        return label
    return f"{label} {region_tag}"


def build_stops(
    gtfs_stops: list[GTFSStop], region_code: str, region_tag: str | None = None
) -> dict[str, Stop]:
    """Build region-scoped Stop records keyed by scoped ID."""
    logger.info(f"Building stops for region {region_code}")

    stops: dict[str, Stop] = {}
    for gtfs_stop in gtfs_stops:
        stop_id = scoped_id(region_code, gtfs_stop.stop_id)
        stops[stop_id] = Stop(
            id=stop_id,
            name=_with_tag(gtfs_stop.name, region_tag),
            city=_with_tag(city_label(gtfs_stop.name), region_tag),
            lat=gtfs_stop.lat,
            lon=gtfs_stop.lon,
            country=resolve_country(gtfs_stop.timezone, region_tag),
        )

    logger.info(f"Built {len(stops)} stops")
    return stops

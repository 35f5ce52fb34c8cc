"""JSON network artifact output."""

import json
import logging
import math
from pathlib import Path
from typing import Any

from transit_network.gtfs.models import Network, Route, Stop

logger = logging.getLogger(__name__)


def _coordinate_out(value: float) -> float | None:
    # Non-finite coordinates are written as null to keep the artifact strict JSON
    return value if math.isfinite(value) else None


def _coordinate_in(value: Any) -> float:
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def network_to_dict(network: Network) -> dict[str, Any]:
    """Convert a network to the artifact's JSON structure."""
    stops_data = {
        stop_id: {
            "id": stop.id,
            "name": stop.name,
            "city": stop.city,
            "lat": _coordinate_out(stop.lat),
            "lon": _coordinate_out(stop.lon),
            "country": stop.country,
        }
        for stop_id, stop in network.stops.items()
    }

    routes_data = [
        {
            "id": route.id,
            "shortName": route.short_name,
            "longName": route.long_name,
            "stops": list(route.stops),
        }
        for route in network.routes
    ]

    return {"stops": stops_data, "routes": routes_data}


def network_from_dict(data: dict[str, Any]) -> Network:
    """Parse the artifact's JSON structure into a network."""
    if not isinstance(data, dict) or "stops" not in data or "routes" not in data:
        raise ValueError("Network artifact must contain 'stops' and 'routes'")

    stops: dict[str, Stop] = {}
    for stop_id, raw in data["stops"].items():
        stops[stop_id] = Stop(
            id=raw.get("id", stop_id),
            name=raw.get("name") or "",
            city=raw.get("city") or "",
            lat=_coordinate_in(raw.get("lat")),
            lon=_coordinate_in(raw.get("lon")),
            country=raw.get("country") or "Unknown",
        )

    routes = [
        Route(
            id=raw["id"],
            short_name=raw.get("shortName"),
            long_name=raw.get("longName"),
            stops=tuple(raw.get("stops") or ()),
        )
        for raw in data["routes"]
    ]

    return Network.create(stops, routes)


def write_network_json(output_path: Path, network: Network) -> Path:
    """Write the network artifact, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(
            network_to_dict(network),
            f,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )

    logger.info(f"Wrote {output_path}")
    return output_path


def read_network_json(input_path: Path) -> Network:
    """Read a network artifact written by write_network_json."""
    logger.info(f"Reading network from {input_path}")
    with open(input_path, encoding="utf-8") as f:
        data = json.load(f)
    return network_from_dict(data)

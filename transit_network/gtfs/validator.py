"""Network integrity validator."""

import logging
import math

from transit_network.gtfs.models import Network, ValidationReport
from transit_network.transform.ids import split_scoped_id

logger = logging.getLogger(__name__)


class NetworkValidator:
    """Validate a merged network for consistency."""

    def __init__(self, network: Network) -> None:
        """Initialize validator with a network."""
        self.network = network
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def validate(self) -> ValidationReport:
        """Run all validation checks."""
        logger.info("Validating network")

        self._validate_stops()
        self._validate_routes()

        valid = len(self.errors) == 0

        stats = {
            "stops": len(self.network.stops),
            "routes": len(self.network.routes),
            "route_stops": sum(len(route.stops) for route in self.network.routes),
            "regions": len(
                {stop_id.partition(":")[0] for stop_id in self.network.stops if ":" in stop_id}
            ),
        }

        report = ValidationReport(
            valid=valid,
            errors=self.errors.copy(),
            warnings=self.warnings.copy(),
            stats=stats,
        )

        if not valid:
            logger.error(f"Validation failed with {len(self.errors)} errors")
        elif self.warnings:
            logger.warning(f"Validation passed with {len(self.warnings)} warnings")
        else:
            logger.info("Validation passed")

        return report

    def _validate_stops(self) -> None:
        """Validate stop keys, scoped IDs and coordinates."""
        if not self.network.stops:
            self.errors.append("Network has no stops")

        for stop_id, stop in self.network.stops.items():
            if stop.id != stop_id:
                self.errors.append(f"Stop {stop.id} is stored under key {stop_id}")
            try:
                split_scoped_id(stop_id)
            except ValueError:
                self.errors.append(f"Stop ID {stop_id} is not region-scoped")
            if not (math.isfinite(stop.lat) and math.isfinite(stop.lon)):
                self.warnings.append(f"Stop {stop_id} has no valid coordinates")

    def _validate_routes(self) -> None:
        """Validate routes have stops that resolve."""
        if not self.network.routes:
            self.errors.append("Network has no routes")

        for route in self.network.routes:
            if not route.stops:
                self.errors.append(f"Route {route.id} has no stops")
                continue

            dangling = [stop_id for stop_id in route.stops if stop_id not in self.network.stops]
            if dangling:
                self.warnings.append(
                    f"Route {route.id} references {len(dangling)} unknown stops: "
                    f"{', '.join(dangling[:5])}"
                )

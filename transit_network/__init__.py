"""Transit Network - Merge regional GTFS feeds into one queryable network."""

from transit_network.api import build_network, load_network, load_region, validate
from transit_network.version import VERSION

__version__ = VERSION
__all__ = ["VERSION", "build_network", "load_network", "load_region", "validate"]

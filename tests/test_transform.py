"""Tests for transform modules."""

import math
from pathlib import Path

import pytest

from transit_network.gtfs.models import GTFSRoute, GTFSStop, RegionData, Route, Stop, StopTime, Trip
from transit_network.gtfs.reader import RegionReader
from transit_network.transform.city import city_label
from transit_network.transform.country import resolve_country
from transit_network.transform.ids import scoped_id, split_scoped_id
from transit_network.transform.merge import EmptyNetworkError, merge_regions
from transit_network.transform.routes import (
    build_routes,
    materialize_routes,
    select_representative_trips,
)
from transit_network.transform.stops import build_stops


def test_scoped_id() -> None:
    """Test region scoping of raw IDs."""
    assert scoped_id("EU", "A1") == "EU:A1"
    assert split_scoped_id("EU:A1") == ("EU", "A1")
    # Raw IDs may themselves contain the separator
    assert split_scoped_id("GB:490:1") == ("GB", "490:1")


def test_split_scoped_id_rejects_unscoped() -> None:
    """Test unscoped IDs are rejected."""
    with pytest.raises(ValueError):
        split_scoped_id("A1")


@pytest.mark.parametrize(
    ("timezone", "tag", "expected"),
    [
        ("Europe/Berlin", None, "Germany"),
        ("Europe/London", "(NA)", "United Kingdom"),
        ("America/Chicago", None, "United States"),
        ("Europe/Luxembourg", None, "Germany"),
        (None, "(NA)", "United States"),
        (None, "(UK)", "United Kingdom"),
        ("America/Toronto", "(NA)", "Toronto"),
        ("America/Argentina/Buenos_Aires", None, "Argentina"),
        ("UTC", None, "Unknown"),
        (None, None, "Unknown"),
        (None, "(XX)", "Unknown"),
    ],
)
def test_resolve_country(timezone: str | None, tag: str | None, expected: str) -> None:
    """Test country resolution fallback order."""
    assert resolve_country(timezone, tag) == expected


def test_resolve_country_custom_table() -> None:
    """Test the lookup table can be overridden."""
    assert resolve_country("Asia/Tokyo", timezones={"Asia/Tokyo": "Japan"}) == "Japan"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Berlin Hbf", "Berlin"),
        ("Amsterdam Sloterdijk", "Amsterdam"),
        ("Amsterdam (Duivendrecht)", "Amsterdam"),
        ("Munich, Fröttmaning", "Munich"),
        ("Lyon - Perrache", "Lyon"),
        ("Prague: Florenc", "Prague"),
        ("Istanbul Esenler", "Istanbul"),
        ("Frankfurt am Main", "Frankfurt am Main"),
        ("Victoria", "Victoria"),
        ("  Vienna  ", "Vienna"),
        ("", ""),
    ],
)
def test_city_label(name: str, expected: str) -> None:
    """Test city label derivation from stop names."""
    assert city_label(name) == expected


def test_city_label_drops_only_last_word() -> None:
    """Test only one trailing sub-location is removed."""
    assert city_label("London Victoria Coach") == "London Victoria"


def test_build_stops_with_tag() -> None:
    """Test region tag is appended to both name and city."""
    stops = build_stops(
        [GTFSStop(stop_id="B3", name="Amsterdam", lat=42.9, lon=-74.2, timezone=None)],
        "US",
        "(NA)",
    )

    stop = stops["US:B3"]
    assert stop.id == "US:B3"
    assert stop.name == "Amsterdam (NA)"
    assert stop.city == "Amsterdam (NA)"
    assert stop.country == "United States"


def test_build_stops_empty_tag_is_no_tag() -> None:
    """Test an empty region tag leaves name and city untouched."""
    stops = build_stops(
        [GTFSStop(stop_id="A1", name="Berlin Hbf", lat=52.5, lon=13.4, timezone="Europe/Berlin")],
        "EU",
        "",
    )

    assert stops["EU:A1"].name == "Berlin Hbf"
    assert stops["EU:A1"].city == "Berlin"


def test_build_stops_keeps_nan_coordinates() -> None:
    """Test unparsable coordinates pass through as nan."""
    stops = build_stops(
        [GTFSStop(stop_id="X", name="Somewhere", lat=math.nan, lon=math.nan)], "EU"
    )

    assert math.isnan(stops["EU:X"].lat)
    assert stops["EU:X"].country == "Unknown"


def test_representative_trip_first_wins() -> None:
    """Test the first trip per route is selected."""
    trips = [
        Trip(trip_id="T1", route_id="R1"),
        Trip(trip_id="T2", route_id="R2"),
        Trip(trip_id="T3", route_id="R1"),
    ]

    assert select_representative_trips(trips, "EU") == {"EU:R1": "T1", "EU:R2": "T2"}


def test_materialize_orders_by_sequence() -> None:
    """Test stops are ordered by ascending stop_sequence."""
    routes = build_routes([GTFSRoute(route_id="R1", short_name="X1")], "EU")
    stop_times = [
        StopTime(trip_id="T1", stop_id="C", stop_sequence=3),
        StopTime(trip_id="T1", stop_id="A", stop_sequence=1),
        StopTime(trip_id="T1", stop_id="B", stop_sequence=2),
    ]

    result = materialize_routes(routes, [Trip(trip_id="T1", route_id="R1")], stop_times, "EU")

    assert len(result) == 1
    assert result[0].stops == ("EU:A", "EU:B", "EU:C")
    assert result[0].short_name == "X1"


def test_materialize_stable_on_equal_sequence() -> None:
    """Test rows sharing a sequence number keep input order."""
    routes = build_routes([GTFSRoute(route_id="R1")], "EU")
    stop_times = [
        StopTime(trip_id="T1", stop_id="Z", stop_sequence=2),
        StopTime(trip_id="T1", stop_id="B", stop_sequence=1),
        StopTime(trip_id="T1", stop_id="A", stop_sequence=1),
    ]

    result = materialize_routes(routes, [Trip(trip_id="T1", route_id="R1")], stop_times, "EU")

    assert result[0].stops == ("EU:B", "EU:A", "EU:Z")


def test_materialize_drops_empty_routes(gtfs_eu: Path) -> None:
    """Test routes without trips or stop times are discarded."""
    reader = RegionReader(str(gtfs_eu))
    reader.read_all()

    routes = build_routes(reader.routes, "EU")
    result = materialize_routes(routes, reader.trips, reader.stop_times, "EU")

    assert [route.id for route in result] == ["EU:R1", "EU:R2"]
    assert all(route.stops for route in result)
    assert result[0].stops == ("EU:A1", "EU:A3", "EU:A2")


def test_merge_regions() -> None:
    """Test merging unions stops and concatenates routes."""
    eu = RegionData(
        stops={"EU:A": Stop("EU:A", "A", "A", 1.0, 1.0, "Germany")},
        routes=[Route("EU:R", None, None, ("EU:A",))],
    )
    us = RegionData(
        stops={"US:A": Stop("US:A", "A", "A", 2.0, 2.0, "United States")},
        routes=[Route("US:R", None, None, ("US:A",))],
    )

    network = merge_regions([eu, RegionData(), us])

    assert list(network.stops) == ["EU:A", "US:A"]
    assert [route.id for route in network.routes] == ["EU:R", "US:R"]


def test_merge_keeps_first_on_collision() -> None:
    """Test a colliding stop ID does not overwrite the earlier region."""
    first = RegionData(
        stops={"EU:A": Stop("EU:A", "First", "A", 1.0, 1.0, "Germany")},
        routes=[Route("EU:R", None, None, ("EU:A",))],
    )
    second = RegionData(stops={"EU:A": Stop("EU:A", "Second", "A", 2.0, 2.0, "France")})

    network = merge_regions([first, second])

    assert network.stops["EU:A"].name == "First"


def test_merge_empty_raises() -> None:
    """Test an empty merged network is fatal."""
    with pytest.raises(EmptyNetworkError):
        merge_regions([RegionData(), RegionData()])


def test_merge_without_routes_raises() -> None:
    """Test stops without routes are still fatal."""
    only_stops = RegionData(stops={"EU:A": Stop("EU:A", "A", "A", 1.0, 1.0, "Germany")})

    with pytest.raises(EmptyNetworkError):
        merge_regions([only_stops])

"""City label derivation from stop names."""

from collections.abc import Set

CITY_SEPARATORS = ("(", ",", " - ", ":")

# Station or district names that follow a city name without a separator,
# e.g. "Amsterdam Sloterdijk".
SUB_LOCATIONS: Set[str] = frozenset(
    {
        "Sloterdijk",
        "Bijlmer",
        "Amstel",
        "Schiphol",
        "Victoria",
        "Bercy",
        "Esenler",
        "Alibeyköy",
        "Dudullu",
        "Ataşehir",
        # transit hubs
        "Hbf",
        "ZOB",
        "Station",
        "Busstation",
        "Airport",
        "Terminal",
        "Coach",
    }
)


def city_label(stop_name: str, sub_locations: Set[str] = SUB_LOCATIONS) -> str:
    """Derive a city label from a raw stop name."""
    city = stop_name
    for separator in CITY_SEPARATORS:
        city = city.split(separator, 1)[0]
    city = city.strip()

    words = city.split(" ")
    if len(words) > 1 and words[-1] in sub_locations:
        return " ".join(words[:-1]).strip()

    return city

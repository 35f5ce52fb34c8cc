"""Country resolution from stop time zones."""

from collections.abc import Mapping
from types import MappingProxyType

UNKNOWN_COUNTRY = "Unknown"

# Catch-all for unlisted European zones; not an inference about the stop.
EUROPE_FALLBACK_COUNTRY = "Germany"

TIMEZONE_COUNTRIES: Mapping[str, str] = MappingProxyType(
    {
        "Europe/Berlin": "Germany",
        "Europe/Amsterdam": "Netherlands",
        "Europe/Copenhagen": "Denmark",
        "Europe/Paris": "France",
        "Europe/Prague": "Czech Republic",
        "Europe/Brussels": "Belgium",
        "Europe/Warsaw": "Poland",
        "Europe/Vienna": "Austria",
        "Europe/Zurich": "Switzerland",
        "Europe/Rome": "Italy",
        "Europe/Madrid": "Spain",
        "Europe/London": "United Kingdom",
        "Europe/Istanbul": "Turkey",
        "Europe/Lisbon": "Portugal",
        "Europe/Stockholm": "Sweden",
        "Europe/Oslo": "Norway",
        "Europe/Helsinki": "Finland",
        "Europe/Budapest": "Hungary",
        "Europe/Dublin": "Ireland",
        "Europe/Bucharest": "Romania",
        "Europe/Sofia": "Bulgaria",
        "Europe/Belgrade": "Serbia",
        "Europe/Zagreb": "Croatia",
        "Europe/Ljubljana": "Slovenia",
        "Europe/Bratislava": "Slovakia",
        "America/New_York": "United States",
        "America/Chicago": "United States",
        "America/Denver": "United States",
        "America/Los_Angeles": "United States",
        "America/Phoenix": "United States",
    }
)

REGION_TAG_COUNTRIES: Mapping[str, str] = MappingProxyType(
    {
        "(NA)": "United States",
        "(UK)": "United Kingdom",
    }
)


def resolve_country(
    timezone: str | None,
    region_tag: str | None = None,
    timezones: Mapping[str, str] = TIMEZONE_COUNTRIES,
    region_tags: Mapping[str, str] = REGION_TAG_COUNTRIES,
) -> str:
    """
    Map a stop time zone to a country name.

    Lookup order: exact zone match, any ``Europe`` zone to the fallback
    country, region tag when the zone is absent, then the zone segment
    after the first ``/``. Returns ``"Unknown"`` when nothing resolves.
    """
    if timezone is not None:
        country = timezones.get(timezone)
        if country is not None:
            return country
        if "Europe" in timezone:
            return EUROPE_FALLBACK_COUNTRY
    elif region_tag is not None:
        country = region_tags.get(region_tag)
        if country is not None:
            return country

    if timezone is not None:
        parts = timezone.split("/")
        if len(parts) > 1 and parts[1]:
            return parts[1]

    return UNKNOWN_COUNTRY

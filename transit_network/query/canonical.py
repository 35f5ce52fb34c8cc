"""
City label canonicalization.

Stop city labels are grouped by a single nearest-shorter-prefix pass: a
cleaned label maps to the shortest other cleaned label that is a
word-boundary prefix of it. The result is one level deep and never
re-applied, so the chosen canonical label is always a fixed point.
Region-tagged labels such as ``Amsterdam (NA)`` never group: they neither
absorb nor get absorbed by another label.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from transit_network.gtfs.models import Network

logger = logging.getLogger(__name__)

# Shorter candidates ("San", "New") are too generic to group under
MIN_CANONICAL_LENGTH = 5

_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_TAG_RE = re.compile(r"\s*\(([A-Z]{2,3})\)\s*$")
_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")
_TAGGED_RE = re.compile(r"\([A-Z]{2,3}\)$")


def _collapse(label: str) -> str:
    return _WHITESPACE_RE.sub(" ", label).strip()


def clean_city_label(city: str) -> str:
    """Strip parenthetical content and extra whitespace, keeping a trailing region tag."""
    normalized = _collapse(city)
    match = _TRAILING_TAG_RE.search(normalized)
    tag = f" ({match.group(1)})" if match else ""
    without_tag = normalized[: match.start()] if match else normalized

    base = _collapse(_PARENTHETICAL_RE.sub("", without_tag))
    return f"{base}{tag}".strip()


def has_region_tag(city: str) -> bool:
    """Return True when the label ends with a bracketed region code."""
    return _TAGGED_RE.search(city) is not None


def _find_canonical(cleaned: str, candidates: list[str], min_length: int) -> str:
    if has_region_tag(cleaned):
        return cleaned
    cleaned_lower = cleaned.lower()

    for candidate in candidates:
        if candidate == cleaned:
            continue
        if len(candidate) < min_length:
            continue
        if has_region_tag(candidate):
            continue
        if cleaned_lower.startswith(f"{candidate.lower()} "):
            return candidate

    return cleaned


class CityCanonicalizer:
    """Raw city label to canonical label mapping for one network."""

    def __init__(self, network: Network, min_length: int = MIN_CANONICAL_LENGTH) -> None:
        """Build the mapping from the cities present on the network's stops."""
        raw_cities = list(dict.fromkeys(stop.city for stop in network.stops.values()))
        cleaned_cities = list(dict.fromkeys(clean_city_label(raw) for raw in raw_cities))
        # sorted() is stable, so equal-length candidates keep first-seen order
        candidates = sorted(cleaned_cities, key=len)

        by_cleaned = {
            cleaned: _find_canonical(cleaned, candidates, min_length) for cleaned in cleaned_cities
        }
        by_raw = {raw: by_cleaned[clean_city_label(raw)] for raw in raw_cities}

        self.by_raw: Mapping[str, str] = MappingProxyType(by_raw)

        grouped = sum(1 for cleaned, canonical in by_cleaned.items() if cleaned != canonical)
        logger.debug(
            f"Canonicalized {len(raw_cities)} city labels into "
            f"{len(set(by_cleaned.values()))} cities ({grouped} grouped)"
        )

    def canonicalize(self, city: str) -> str:
        """Return the canonical label for a raw city label.

        Labels not present on the network are only cleaned.
        """
        canonical = self.by_raw.get(city)
        if canonical is not None:
            return canonical
        return clean_city_label(city)


@dataclass(frozen=True)
class CityBucket:
    """Raw labels and stop names grouped under one canonical city."""

    raw_labels: frozenset[str]
    stop_names: frozenset[str]


def build_city_buckets(
    network: Network, canonicalizer: CityCanonicalizer
) -> Mapping[str, CityBucket]:
    """Group stops' raw city labels and names by canonical city."""
    raw_labels: dict[str, set[str]] = {}
    stop_names: dict[str, set[str]] = {}

    for stop in network.stops.values():
        city = canonicalizer.canonicalize(stop.city)
        if city not in raw_labels:
            raw_labels[city] = set()
            stop_names[city] = set()
        raw_labels[city].add(stop.city)
        stop_names[city].add(stop.name)

    return MappingProxyType(
        {
            city: CityBucket(raw_labels=frozenset(labels), stop_names=frozenset(stop_names[city]))
            for city, labels in raw_labels.items()
        }
    )


def format_city_details(city: str, bucket: CityBucket) -> str:
    """Render a bucket as the multi-line city hover text."""
    labels = sorted(bucket.raw_labels)
    names = sorted(bucket.stop_names)
    lines = [
        f"Grouped city: {city}",
        "",
        f"City labels ({len(labels)}):",
        *(f"- {label}" for label in labels),
        "",
        f"Stops ({len(names)}):",
        *(f"- {name}" for name in names),
    ]
    return "\n".join(lines)

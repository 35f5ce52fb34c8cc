"""Region-scoped identifiers."""

SCOPE_SEPARATOR = ":"


def scoped_id(region_code: str, raw_id: str) -> str:
    """Prefix a raw GTFS ID with its region code, e.g. ``EU:A1``."""
    return f"{region_code}{SCOPE_SEPARATOR}{raw_id}"


def split_scoped_id(value: str) -> tuple[str, str]:
    """Split a scoped ID into (region_code, raw_id)."""
    region_code, sep, raw_id = value.partition(SCOPE_SEPARATOR)
    if not sep or not region_code or not raw_id:
        raise ValueError(f"Not a region-scoped ID: {value!r}")
    return region_code, raw_id

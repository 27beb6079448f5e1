"""Helpers for placing sightings on a map and labelling them in lists."""
from typing import Iterable, List, Tuple

from .sighting import SightingRecord

# Roughly the geographic center of the contiguous United States.
DEFAULT_CENTER = (39.8283, -98.5795)


def has_location_fix(record: SightingRecord) -> bool:
    # (0, 0) is the "no GPS fix" sentinel
    return record.latitude != 0 or record.longitude != 0


def mappable(records: Iterable[SightingRecord]) -> List[SightingRecord]:
    return [r for r in records if has_location_fix(r)]


def map_center(records: Iterable[SightingRecord]) -> Tuple[float, float]:
    """Mean position of the sightings that have a fix, or DEFAULT_CENTER if none do."""
    valid = mappable(records)
    if not valid:
        return DEFAULT_CENTER
    return (
        sum(r.latitude for r in valid) / len(valid),
        sum(r.longitude for r in valid) / len(valid),
    )


def location_label(record: SightingRecord) -> str:
    if record.address:
        return record.address
    return f"{record.latitude:.4f}, {record.longitude:.4f}"

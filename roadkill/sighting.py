from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .classifier import classify

UNKNOWN_ANIMAL = "Unknown"


class SightingStatus(str, Enum):
    LIVE = "live"
    DEAD = "dead"


def coerce_timestamp(value: object) -> Optional[datetime]:
    """
    Turn the timestamp shapes the backends hand back into an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), unix seconds, ISO-8601
    strings with an optional trailing ``Z`` and date-only strings (noon UTC).
    Returns None for anything unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return coerce_timestamp(datetime.fromisoformat(s))
        except ValueError:
            pass
        try:
            d = date.fromisoformat(s)
            return datetime(d.year, d.month, d.day, 12, 0, tzinfo=timezone.utc)
        except ValueError:
            return None
    return None


class SightingDraft(BaseModel):
    """A sighting as entered by the user, before the backend assigns an id."""

    animal: str = ""
    status: SightingStatus = SightingStatus.LIVE
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: object) -> Optional[datetime]:
        return coerce_timestamp(v)


class SightingRecord(BaseModel):
    """A persisted sighting. Every field is populated; address and notes may be None."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    animal: str = Field(min_length=1)
    status: SightingStatus = SightingStatus.LIVE
    latitude: float = 0.0
    longitude: float = 0.0
    address: Optional[str] = None
    timestamp: datetime
    notes: Optional[str] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: object) -> datetime:
        dt = coerce_timestamp(v)
        if dt is None:
            raise ValueError(f"unparseable timestamp: {v!r}")
        return dt


def draft_from_transcript(
    text: str,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    address: Optional[str] = None,
    notes: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> SightingDraft:
    """
    Build a draft from typed text or a speech transcript.

    The classifier decides the status and strips status words from the animal
    name; if nothing is left the trimmed input is kept as the name.
    """
    result = classify(text)
    animal = result.cleaned_animal or (text or "").strip()
    return SightingDraft(
        animal=animal,
        status=SightingStatus(result.status),
        latitude=latitude,
        longitude=longitude,
        address=address or None,
        timestamp=timestamp,
        notes=(notes or "").strip() or None,
    )

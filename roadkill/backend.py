"""
Backend adapter contract

Each adapter moves plain documents to and from one physical store. Encoding
the timestamp for the wire and decoding stored documents into
SightingRecord happen here so the repository never branches on backend.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

import pydantic

from .errors import FetchError
from .sighting import UNKNOWN_ANIMAL, SightingRecord, SightingStatus, coerce_timestamp


def _number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _status(value: Any) -> SightingStatus:
    try:
        return SightingStatus(str(value).strip().lower())
    except ValueError:
        return SightingStatus.LIVE


class BackendAdapter(ABC):
    """One physical sighting store."""

    name: str = "backend"
    # Exception types the underlying client raises for transport or protocol failures.
    transport_errors: Tuple[Type[BaseException], ...] = ()

    @abstractmethod
    async def insert(self, document: Dict[str, Any]) -> str:
        """Persist a document and return the id the store assigned."""

    @abstractmethod
    async def fetch_all(self) -> List[Mapping[str, Any]]:
        """Return stored documents, newest timestamp first."""

    @abstractmethod
    async def delete(self, sighting_id: str) -> None:
        """Delete one document by id."""

    @abstractmethod
    def encode_timestamp(self, value: datetime) -> Any:
        """Convert an aware datetime into the store's representation."""

    def decode_timestamp(self, value: Any) -> Optional[datetime]:
        return coerce_timestamp(value)

    def document_id(self, document: Mapping[str, Any]) -> Any:
        return document.get("id")

    def decode(self, document: Mapping[str, Any]) -> SightingRecord:
        """
        Normalize a stored document into a fully populated SightingRecord.

        Missing animal becomes "Unknown", missing coordinates 0, missing or
        unrecognized status "live". A missing id or timestamp cannot be
        defaulted and raises FetchError.
        """
        if not isinstance(document, Mapping):
            raise FetchError(f"{self.name} returned an unexpected payload: {document!r}")

        doc_id = _text(self.document_id(document))
        if doc_id is None:
            raise FetchError(f"{self.name} returned a sighting without an id")

        timestamp = self.decode_timestamp(document.get("timestamp"))
        if timestamp is None:
            raise FetchError(f"{self.name} returned sighting {doc_id} with an unreadable timestamp")

        status = document.get("status")
        try:
            return SightingRecord(
                id=doc_id,
                animal=_text(document.get("animal")) or UNKNOWN_ANIMAL,
                status=_status(status) if status is not None else SightingStatus.LIVE,
                latitude=_number(document.get("latitude")),
                longitude=_number(document.get("longitude")),
                address=_text(document.get("address")),
                timestamp=timestamp,
                notes=_text(document.get("notes")),
            )
        except pydantic.ValidationError as exc:
            raise FetchError(f"{self.name} returned an invalid sighting {doc_id}: {exc}") from exc

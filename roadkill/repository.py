"""
Sighting repository

The one persistence entry point for callers. It is built around a single
backend adapter chosen at startup and never switches adapters afterwards.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

import pydantic

from .backend import BackendAdapter
from .config import Settings, load_settings
from .errors import FetchError, PersistenceError, SightingError, ValidationError
from .local_backend import LocalBackend
from .remote_backend import RemoteBackend
from .sighting import SightingDraft, SightingRecord

logger = logging.getLogger("roadkill.repository")


class SightingRepository:
    """Create, list and delete sightings through one backend adapter."""

    def __init__(self, adapter: BackendAdapter):
        self._adapter = adapter

    @property
    def adapter(self) -> BackendAdapter:
        return self._adapter

    def _validate(self, sighting: Union[SightingDraft, Mapping[str, Any]]) -> SightingDraft:
        if isinstance(sighting, SightingDraft):
            draft = sighting
        else:
            try:
                draft = SightingDraft.model_validate(dict(sighting))
            except pydantic.ValidationError as exc:
                raise ValidationError(f"Invalid sighting: {exc}") from exc

        missing = []
        if not draft.animal.strip():
            missing.append("animal")
        if draft.latitude is None:
            missing.append("latitude")
        if draft.longitude is None:
            missing.append("longitude")
        if missing:
            verb = "is" if len(missing) == 1 else "are"
            raise ValidationError(f"{', '.join(missing)} {verb} required")
        return draft

    def _encode(self, draft: SightingDraft) -> Dict[str, Any]:
        timestamp = draft.timestamp or datetime.now(timezone.utc)
        return {
            "animal": draft.animal.strip(),
            "status": draft.status.value,
            "latitude": draft.latitude,
            "longitude": draft.longitude,
            "address": draft.address or None,
            "timestamp": self._adapter.encode_timestamp(timestamp),
            "notes": draft.notes or None,
        }

    async def add(self, sighting: Union[SightingDraft, Mapping[str, Any]]) -> str:
        """
        Persist a new sighting.

        Args:
            sighting: Draft (or plain mapping) without an id; timestamp defaults to now

        Returns:
            The id assigned by the backend

        Raises:
            ValidationError: animal, latitude or longitude is missing
            PersistenceError: the backend rejected or failed the write
        """
        document = self._encode(self._validate(sighting))
        try:
            sighting_id = await self._adapter.insert(document)
        except SightingError:
            raise
        except self._adapter.transport_errors as exc:
            logger.error("Saving sighting to %s failed: %s", self._adapter.name, exc)
            raise PersistenceError(str(exc) or "Failed to save sighting") from exc
        logger.info("Saved sighting id=%s animal=%s status=%s", sighting_id, document["animal"], document["status"])
        return sighting_id

    async def list(self) -> List[SightingRecord]:
        """
        Fetch every sighting, newest first, normalized into SightingRecord.

        Raises:
            FetchError: transport failure, or any stored document could not be decoded
        """
        try:
            documents = await self._adapter.fetch_all()
            return [self._adapter.decode(doc) for doc in documents]
        except SightingError:
            raise
        except self._adapter.transport_errors as exc:
            logger.error("Fetching sightings from %s failed: %s", self._adapter.name, exc)
            raise FetchError(str(exc) or "Failed to fetch sightings") from exc

    async def remove(self, sighting_id: str) -> None:
        """
        Delete a sighting by id. Deleting an unknown id is an error, not a no-op.

        Raises:
            NotFoundError: the backend reports no such sighting
            PersistenceError: the backend failed the delete
        """
        if not sighting_id:
            raise ValidationError("id is required")
        try:
            await self._adapter.delete(sighting_id)
        except SightingError:
            raise
        except self._adapter.transport_errors as exc:
            logger.error("Deleting sighting %s from %s failed: %s", sighting_id, self._adapter.name, exc)
            raise PersistenceError(str(exc) or "Failed to delete sighting") from exc
        logger.info("Deleted sighting id=%s", sighting_id)


def create_adapter(settings: Settings) -> BackendAdapter:
    if settings.is_development:
        logger.info("mode=LOCAL api=%s", settings.local_api_url)
        return LocalBackend(settings.local_api_url, timeout=settings.http_timeout)
    logger.info("mode=REMOTE collection=%s", settings.firestore_collection)
    return RemoteBackend(project_id=settings.firebase_project_id, collection=settings.firestore_collection)


def create_repository(settings: Optional[Settings] = None) -> SightingRepository:
    return SightingRepository(create_adapter(settings or load_settings()))

"""
Remote Firestore backend

Stores sightings in a Cloud Firestore collection. Timestamps are written as
native Firestore timestamps (aware datetimes) and come back as
DatetimeWithNanoseconds.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from .backend import BackendAdapter
from .errors import NotFoundError

logger = logging.getLogger("roadkill.remote_backend")

DEFAULT_COLLECTION = "sightings"


class RemoteBackend(BackendAdapter):
    """CRUD against a managed Firestore collection."""

    name = "firestore"
    transport_errors = (google_exceptions.GoogleAPICallError, google_exceptions.RetryError)

    def __init__(
        self,
        project_id: Optional[str] = None,
        collection: str = DEFAULT_COLLECTION,
        client: Optional[Any] = None,
    ):
        self.project_id = project_id
        self.collection_name = collection
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = firestore.AsyncClient(project=self.project_id)
        return self._client

    def _collection(self):
        return self.client.collection(self.collection_name)

    def encode_timestamp(self, value: datetime) -> datetime:
        return value.astimezone(timezone.utc)

    async def insert(self, document: Dict[str, Any]) -> str:
        _, ref = await self._collection().add(document)
        logger.info("Added %s/%s animal=%s", self.collection_name, ref.id, document.get("animal"))
        return ref.id

    async def fetch_all(self) -> List[Mapping[str, Any]]:
        query = self._collection().order_by("timestamp", direction=firestore.Query.DESCENDING)
        documents = []
        async for snapshot in query.stream():
            data = snapshot.to_dict() or {}
            data["id"] = snapshot.id
            documents.append(data)
        return documents

    async def delete(self, sighting_id: str) -> None:
        ref = self._collection().document(sighting_id)
        snapshot = await ref.get()
        if not snapshot.exists:
            raise NotFoundError(f"Sighting {sighting_id} not found")
        await ref.delete()
        logger.info("Deleted %s/%s", self.collection_name, sighting_id)

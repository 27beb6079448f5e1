"""
Local REST backend

Talks to the development sighting service (see roadkill.main) over HTTP:
GET /sightings, POST /sightings, DELETE /sightings/{id}, GET /health.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .backend import BackendAdapter
from .errors import FetchError, NotFoundError, PersistenceError

logger = logging.getLogger("roadkill.local_backend")

DEFAULT_API_PORT = 3001
EMULATOR_HOST = "10.0.2.2"


def resolve_local_api_url(
    platform: Optional[str] = None,
    browser_host: Optional[str] = None,
    host_uri: Optional[str] = None,
    port: int = DEFAULT_API_PORT,
) -> str:
    """
    Work out where the local sighting service lives from the client's point of view.

    Args:
        platform: "web", "android" or "ios"
        browser_host: Hostname the browser page was served from (web only)
        host_uri: Dev server "host:port" as seen by a physical device
        port: Port the sighting service listens on

    Returns:
        Base URL without trailing slash
    """
    if (platform or "").lower() == "web":
        return f"http://{browser_host or 'localhost'}:{port}"
    if host_uri:
        ip = host_uri.split(":")[0]
        if ip:
            return f"http://{ip}:{port}"
    return f"http://{EMULATOR_HOST}:{port}"


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return fallback


class LocalBackend(BackendAdapter):
    """CRUD against the local REST service."""

    name = "local"
    transport_errors = (httpx.HTTPError, ValueError)

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            base_url: Service base URL, e.g. http://10.0.2.2:3001
            client: Shared client to issue requests with; one is opened per call otherwise
            timeout: Per-request timeout in seconds, None for no limit
        """
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{endpoint}"
        if self.client is not None:
            return await self.client.request(method, url, timeout=self.timeout, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.request(method, url, **kwargs)

    def encode_timestamp(self, value: datetime) -> str:
        return value.astimezone(timezone.utc).isoformat()

    def document_id(self, document: Mapping[str, Any]) -> Any:
        return document.get("id") or document.get("_id")

    async def insert(self, document: Dict[str, Any]) -> str:
        logger.info("POST %s/sightings animal=%s", self.base_url, document.get("animal"))
        response = await self._request("POST", "/sightings", json=document)
        if not response.is_success:
            raise PersistenceError(_error_message(response, "Failed to save sighting"))
        body = response.json()
        sighting_id = body.get("id") if isinstance(body, dict) else None
        if not sighting_id:
            raise PersistenceError("Sighting service did not return an id")
        return str(sighting_id)

    async def fetch_all(self) -> List[Mapping[str, Any]]:
        response = await self._request("GET", "/sightings")
        if not response.is_success:
            raise FetchError(_error_message(response, "Failed to fetch sightings"))
        data = response.json()
        if not isinstance(data, list):
            raise FetchError("Sighting service returned an unexpected payload")
        return data

    async def delete(self, sighting_id: str) -> None:
        response = await self._request("DELETE", f"/sightings/{sighting_id}")
        if response.status_code == 404:
            raise NotFoundError(_error_message(response, "Sighting not found"))
        if not response.is_success:
            raise PersistenceError(_error_message(response, "Failed to delete sighting"))

    async def health(self) -> Dict[str, Any]:
        response = await self._request("GET", "/health")
        response.raise_for_status()
        return response.json()

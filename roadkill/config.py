"""
Runtime configuration

Read once from the environment (and a .env file when present). The run mode
decides which backend the sighting repository talks to for the life of the
process.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .local_backend import DEFAULT_API_PORT, resolve_local_api_url
from .remote_backend import DEFAULT_COLLECTION

DEVELOPMENT = "development"
PRODUCTION = "production"
RUN_MODES = (DEVELOPMENT, PRODUCTION)


@dataclass(frozen=True)
class Settings:
    run_mode: str = DEVELOPMENT
    local_api_url: str = f"http://localhost:{DEFAULT_API_PORT}"
    http_timeout: Optional[float] = None
    firebase_project_id: Optional[str] = None
    firestore_collection: str = DEFAULT_COLLECTION

    @property
    def is_development(self) -> bool:
        return self.run_mode == DEVELOPMENT


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


def load_settings() -> Settings:
    load_dotenv()

    run_mode = os.getenv("ROADKILL_RUN_MODE", DEVELOPMENT).strip().lower()
    if run_mode not in RUN_MODES:
        raise ValueError(f"ROADKILL_RUN_MODE must be one of {', '.join(RUN_MODES)}, got {run_mode!r}")

    api_url = os.getenv("ROADKILL_API_URL")
    if not api_url:
        api_url = resolve_local_api_url(
            platform=os.getenv("ROADKILL_PLATFORM"),
            browser_host=os.getenv("ROADKILL_BROWSER_HOST"),
            host_uri=os.getenv("ROADKILL_HOST_URI"),
            port=int(os.getenv("ROADKILL_API_PORT", DEFAULT_API_PORT)),
        )

    return Settings(
        run_mode=run_mode,
        local_api_url=api_url.rstrip("/"),
        http_timeout=_optional_float("ROADKILL_HTTP_TIMEOUT"),
        firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
        firestore_collection=os.getenv("FIRESTORE_COLLECTION", DEFAULT_COLLECTION),
    )

class SightingError(Exception):
    """Base class for failures surfaced to callers of the sighting repository."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SightingError):
    """A required field is missing before a write is attempted."""


class PersistenceError(SightingError):
    """The backend rejected or failed a write."""


class FetchError(SightingError):
    """A read failed, or the backend returned something we could not decode."""


class NotFoundError(SightingError):
    """The delete target does not exist."""

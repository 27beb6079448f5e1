"""
Test configuration and fixtures
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roadkill.database import Base, get_db
from roadkill.local_backend import LocalBackend
from roadkill.main import app
from roadkill.repository import SightingRepository

BASE_URL = "http://localhost"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def session_factory():
    """In-memory SQLite shared by every session of one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client wired straight into the sighting service"""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def local_backend(client) -> LocalBackend:
    return LocalBackend(BASE_URL, client=client)


@pytest.fixture
def local_repository(local_backend) -> SightingRepository:
    return SightingRepository(local_backend)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    async def get(self):
        return FakeSnapshot(self.id, self._store.get(self.id))

    async def delete(self):
        self._store.pop(self.id, None)


def _order_key(value):
    # timestamps sort before other value types, as in Firestore
    if isinstance(value, datetime):
        return (0, value, "")
    return (1, EPOCH, str(value))


class FakeQuery:
    def __init__(self, store, field, direction):
        self._store = store
        self._field = field
        self._direction = direction

    async def stream(self):
        # Firestore leaves out documents that lack the ordered field
        present = [(k, v) for k, v in self._store.items() if v.get(self._field) is not None]
        items = sorted(
            present,
            key=lambda item: _order_key(item[1][self._field]),
            reverse=self._direction == "DESCENDING",
        )
        for doc_id, data in items:
            yield FakeSnapshot(doc_id, data)


class FakeCollection:
    def __init__(self, store):
        self.documents = store
        self._counter = 0

    async def add(self, document):
        self._counter += 1
        doc_id = f"doc{self._counter}"
        self.documents[doc_id] = dict(document)
        return None, FakeDocumentRef(self.documents, doc_id)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self.documents, field, direction)

    def document(self, doc_id):
        return FakeDocumentRef(self.documents, doc_id)


class FakeFirestore:
    """Just enough of firestore.AsyncClient for the remote backend"""

    def __init__(self):
        self.collections = {}

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection({})
        return self.collections[name]


@pytest.fixture
def firestore_client() -> FakeFirestore:
    return FakeFirestore()

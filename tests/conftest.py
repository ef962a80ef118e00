"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.main import create_app
from api.routes import get_repository
from storage.models import Book
from storage.repository import BookRepository

BOOK_ID = "64b7f0c2a1b2c3d4e5f60718"


@pytest.fixture
def book_id():
    """A well-formed identifier."""
    return BOOK_ID


@pytest.fixture
def sample_book_document():
    """A book document as stored in MongoDB."""
    created = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    return {
        "_id": ObjectId(BOOK_ID),
        "title": "Dune",
        "author": "Herbert",
        "genre": "SciFi",
        "publishedDate": datetime(1965, 1, 1, tzinfo=timezone.utc),
        "createdAt": created,
        "updatedAt": created,
        "__v": 0,
    }


@pytest.fixture
def sample_book(sample_book_document):
    """The Book built from the sample document."""
    return Book.from_document(sample_book_document)


@pytest.fixture
def mock_collection():
    """Create a mock Motor collection."""
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def mock_repository():
    """Create a mock book repository."""
    return AsyncMock(spec=BookRepository)


@pytest.fixture
def api_config():
    """Development configuration for the test application."""
    return APIConfig(environment="development", log_format="console")


@pytest.fixture
def app(api_config, mock_repository):
    """Application with the repository dependency replaced by a mock."""
    application = create_app(api_config)
    application.dependency_overrides[get_repository] = lambda: mock_repository
    return application


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app, raise_server_exceptions=False)


class InMemoryCursor:
    """Cursor over a snapshot of documents supporting sort/skip/limit/to_list."""

    def __init__(self, documents):
        self.documents = documents

    def sort(self, keys):
        for field, direction in reversed(keys):
            self.documents.sort(key=lambda document: document[field], reverse=direction < 0)
        return self

    def skip(self, count):
        self.documents = self.documents[count:]
        return self

    def limit(self, count):
        self.documents = self.documents[:count]
        return self

    async def to_list(self, length=None):
        return [dict(document) for document in self.documents[:length]]


class InMemoryCollection:
    """Stateful stand-in for the Motor collection calls BookRepository makes."""

    def __init__(self):
        self.documents = {}

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = dict(document)
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    async def find_one(self, query):
        document = self.documents.get(query["_id"])
        return dict(document) if document is not None else None

    async def find_one_and_update(self, query, update, return_document=None):
        document = self.documents.get(query["_id"])
        if document is None:
            return None
        document.update(update["$set"])
        return dict(document)

    async def find_one_and_delete(self, query):
        return self.documents.pop(query["_id"], None)

    async def count_documents(self, query):
        return len(self.documents)

    def find(self, query):
        return InMemoryCursor(list(self.documents.values()))


@pytest.fixture
def in_memory_repository():
    """BookRepository over a stateful in-memory collection."""
    return BookRepository(InMemoryCollection())


@pytest.fixture
def stateful_client(api_config, in_memory_repository):
    """Test client whose routes use the in-memory repository."""
    application = create_app(api_config)
    application.dependency_overrides[get_repository] = lambda: in_memory_repository
    return TestClient(application, raise_server_exceptions=False)

import os
from datetime import datetime, timezone
from itertools import count
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

# Settings are read at import time
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")

from app.core.dependencies import get_ingestion_service, services
from app.core.exceptions import DatabaseError, EmbeddingError
from app.document_service import app
from app.models.document import AuthenticatedCaller
from app.services.auth import AuthService, hash_api_key
from app.services.ingestion import DocumentIngestionService

VALID_API_KEY = "valid-key"
DIMENSIONS = 4


class FakeEmbeddingService:
    """Deterministic embedding provider double."""

    def __init__(self, dimensions: int = DIMENSIONS) -> None:
        self.dimensions = dimensions
        self.calls: List[List[str]] = []
        self.fail = False
        self.override: Optional[List[List[float]]] = None

    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.fail:
            raise EmbeddingError("Failed to generate embeddings: quota exceeded")
        if self.override is not None:
            return self.override
        return [
            [float(len(text)), float(index)] + [0.5] * (self.dimensions - 2)
            for index, text in enumerate(texts)
        ]


class FakeDatabase:
    """In-memory storage double with all-or-nothing inserts."""

    def __init__(self) -> None:
        self.rows: List[dict] = []
        self.api_keys = {
            hash_api_key(VALID_API_KEY): {"project_id": "proj-1", "user_id": "user-1"},
        }
        self.insert_calls = 0
        self.fail_insert = False
        self.fail_list = False
        self.fail_lookup = False
        self._ids = count(1)

    async def list_documents(
        self, collection_id: str, limit: int, include_embedding: bool = False
    ) -> List[dict]:
        if self.fail_list:
            raise DatabaseError("Failed to fetch documents: connection refused")
        matches = [row for row in self.rows if row["collection_id"] == collection_id]
        result = []
        for row in matches[:limit]:
            row = dict(row)
            if not include_embedding:
                row.pop("embedding")
            result.append(row)
        return result

    async def insert_documents(self, documents) -> List[dict]:
        self.insert_calls += 1
        if self.fail_insert:
            raise DatabaseError("Failed to insert documents: constraint violation")
        inserted = [
            {
                "id": next(self._ids),
                "content": doc.content,
                "metadata": doc.metadata,
                "embedding": list(doc.embedding),
                "collection_id": doc.collection_id,
                "source": doc.source,
                "owner_id": doc.owner_id,
                "created_at": datetime.now(timezone.utc),
            }
            for doc in documents
        ]
        self.rows.extend(inserted)
        return [dict(row) for row in inserted]

    async def find_api_key(self, key_hash: str) -> Optional[dict]:
        if self.fail_lookup:
            raise DatabaseError("Failed to look up API key: connection refused")
        return self.api_keys.get(key_hash)

    async def create_api_key(self, key_hash: str, project_id: str, user_id: str) -> None:
        self.api_keys[key_hash] = {"project_id": project_id, "user_id": user_id}


@pytest.fixture
def fake_embedding():
    return FakeEmbeddingService()


@pytest.fixture
def fake_database():
    return FakeDatabase()


@pytest.fixture
def caller():
    return AuthenticatedCaller(account_id="user-1", project_id="proj-1")


@pytest.fixture
def ingestion_service(fake_embedding, fake_database):
    """Create ingestion service over in-memory collaborators"""
    return DocumentIngestionService(
        embedding_service=fake_embedding, database=fake_database, page_size=50
    )


@pytest.fixture
def client(monkeypatch, ingestion_service, fake_database):
    """Test client with fake collaborators; the lifespan is not run."""
    monkeypatch.setattr(services, "auth_service", AuthService(fake_database))
    app.dependency_overrides[get_ingestion_service] = lambda: ingestion_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-API-Key": VALID_API_KEY}

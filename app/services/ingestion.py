"""Document ingestion service: lists and batch-inserts embedded documents."""

import logging
import time
from typing import List, Optional, Sequence

from app.core.config import settings
from app.core.exceptions import EmbeddingError, InvalidRequestError
from app.models.document import AuthenticatedCaller, Document, DocumentInsert
from app.models.document_api import DocumentCreate
from app.monitoring.metrics import (
    documents_inserted_total,
    documents_listed_total,
    embedding_duration_seconds,
    insert_batch_size,
    insert_requests_total,
    list_requests_total,
    storage_duration_seconds,
)
from app.services.database import DatabaseService
from app.services.embedding import EmbeddingService

logger = logging.getLogger(__name__)

MISSING_COLLECTION_MESSAGE = "Missing collection_id query parameter"
MISSING_DOCUMENTS_MESSAGE = "Missing documents in request body"


class DocumentIngestionService:
    """Lists documents of a collection and ingests new ones."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        database: DatabaseService,
        page_size: Optional[int] = None,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            embedding_service: Embedding generation service.
            database: Database service used for reads and batch inserts.
            page_size: Maximum number of documents a list call returns.
        """
        self.embedding_service = embedding_service
        self.database = database
        self.page_size = page_size or settings.documents_page_size

    async def list_documents(
        self,
        collection_id: Optional[str],
        limit: Optional[int] = None,
        include_embedding: bool = False,
    ) -> List[Document]:
        """
        Return the first page of documents stored in a collection.

        Args:
            collection_id: Collection to read from.
            limit: Optional smaller page size, capped at the configured one.
            include_embedding: Whether to return the stored vectors.

        Returns:
            Documents ordered by id, possibly empty.

        Raises:
            InvalidRequestError: If collection_id is missing or limit < 1.
            DatabaseError: If the read fails.
        """
        collection_id = require_collection_id(collection_id)
        if limit is not None and limit < 1:
            raise InvalidRequestError("limit must be a positive integer")
        page = min(limit, self.page_size) if limit else self.page_size

        list_requests_total.inc()
        with storage_duration_seconds.time():
            rows = await self.database.list_documents(
                collection_id, limit=page, include_embedding=include_embedding
            )

        documents = [Document(**row) for row in rows]
        documents_listed_total.inc(len(documents))
        logger.info(
            f"Listed {len(documents)} documents from collection {collection_id}")
        return documents

    async def insert_documents(
        self,
        caller: AuthenticatedCaller,
        collection_id: Optional[str],
        records: Optional[Sequence[DocumentCreate]],
    ) -> List[Document]:
        """
        Embed and persist a batch of records as one atomic insert.

        Steps run strictly in order: validate, embed every record in one
        provider call, build the rows, write them in a single statement.
        Nothing is written if any step fails.

        Args:
            caller: Authenticated caller; becomes the owner of every document.
            collection_id: Collection the documents are added to.
            records: Records to ingest, in submission order.

        Returns:
            Persisted documents in submission order.

        Raises:
            InvalidRequestError: If collection_id is missing or records is empty.
            EmbeddingError: If the provider fails or returns malformed vectors.
            DatabaseError: If the insert fails.
        """
        collection_id = require_collection_id(collection_id)
        if not records:
            raise InvalidRequestError(MISSING_DOCUMENTS_MESSAGE)

        insert_requests_total.inc()
        insert_batch_size.observe(len(records))

        start_time = time.time()
        embeddings = await self.embedding_service.generate_embeddings(
            [record.content for record in records]
        )
        embedding_duration_seconds.observe(time.time() - start_time)
        self._check_embeddings(embeddings, expected=len(records))

        to_insert = [
            DocumentInsert(
                content=record.content,
                metadata=record.metadata,
                embedding=embeddings[index],
                collection_id=collection_id,
                source=record.source,
                owner_id=caller.account_id,
            )
            for index, record in enumerate(records)
        ]

        with storage_duration_seconds.time():
            rows = await self.database.insert_documents(to_insert)

        documents = [Document(**row) for row in rows]
        documents_inserted_total.inc(len(documents))
        logger.info(
            f"Inserted {len(documents)} documents into collection {collection_id}")
        return documents

    def _check_embeddings(
        self, embeddings: Sequence[Sequence[float]], expected: int
    ) -> None:
        if len(embeddings) != expected:
            raise EmbeddingError(
                f"Embedding provider returned {len(embeddings)} vectors for {expected} texts")

        dimensions = self.embedding_service.dimensions
        for index, vector in enumerate(embeddings):
            if len(vector) != dimensions:
                raise EmbeddingError(
                    f"Embedding {index} has {len(vector)} dimensions, expected {dimensions}")


def require_collection_id(collection_id: Optional[str]) -> str:
    """Return collection_id, raising InvalidRequestError when it is blank."""
    if not collection_id or not collection_id.strip():
        raise InvalidRequestError(MISSING_COLLECTION_MESSAGE)
    return collection_id

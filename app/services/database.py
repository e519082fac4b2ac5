"""Database service for PostgreSQL operations."""

import json
import logging
from typing import List, Optional, Sequence

import asyncpg
from pgvector.asyncpg import register_vector

from app.core.config import settings
from app.core.exceptions import DatabaseError
from app.models.document import DocumentInsert

logger = logging.getLogger(__name__)

DOCUMENT_COLUMNS = "id, content, metadata, collection_id, source, owner_id, created_at"


class DatabaseService:
    """Service for PostgreSQL database operations."""

    def __init__(self) -> None:
        """Initialize database service."""
        self.pool: Optional[asyncpg.Pool] = None
        self.timeout = settings.db_timeout_seconds
        self.dimensions = settings.embedding_dimensions

    async def connect(self) -> None:
        """Create connection pool."""
        try:
            if settings.auto_create_schema:
                await self._ensure_extension()
            self.pool = await asyncpg.create_pool(
                settings.postgres_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                command_timeout=self.timeout,
                init=self._init_connection,
            )
        except Exception as e:
            raise DatabaseError(
                f"Failed to connect to database: {str(e)}") from e

    async def disconnect(self) -> None:
        """Close connection pool."""
        if self.pool:
            await self.pool.close()

    async def _ensure_extension(self) -> None:
        # The vector type must exist before pooled connections register it.
        conn = await asyncpg.connect(settings.postgres_url, timeout=self.timeout)
        try:
            await conn.execute("CREATE EXTENSION IF NOT EXISTS vector")
        finally:
            await conn.close()

    @staticmethod
    async def _init_connection(conn: asyncpg.Connection) -> None:
        await register_vector(conn)
        await conn.set_type_codec(
            "jsonb",
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
        )

    def _require_pool(self) -> asyncpg.Pool:
        if not self.pool:
            raise DatabaseError("Database not connected")
        return self.pool

    async def init_schema(self) -> None:
        """Create the documents and api_keys tables if they do not exist."""
        pool = self._require_pool()
        dimensions = int(self.dimensions)

        try:
            async with pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute(
                        f"""
                        CREATE TABLE IF NOT EXISTS documents (
                            id BIGINT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                            content TEXT NOT NULL CHECK (content <> ''),
                            metadata JSONB,
                            embedding vector({dimensions}) NOT NULL,
                            collection_id TEXT NOT NULL,
                            source TEXT NOT NULL,
                            owner_id TEXT NOT NULL,
                            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
                        )
                        """
                    )
                    await conn.execute(
                        """
                        CREATE INDEX IF NOT EXISTS ix_documents_collection_id
                        ON documents (collection_id)
                        """
                    )
                    await conn.execute(
                        """
                        CREATE TABLE IF NOT EXISTS api_keys (
                            id BIGINT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                            key_hash TEXT NOT NULL UNIQUE,
                            project_id TEXT NOT NULL,
                            user_id TEXT NOT NULL,
                            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                            revoked_at TIMESTAMPTZ
                        )
                        """
                    )
            logger.info("Database schema ready")
        except Exception as e:
            raise DatabaseError(f"Failed to initialize schema: {str(e)}") from e

    async def ping(self) -> bool:
        """
        Check that a pooled connection can run a trivial query.

        Returns:
            True if the database answered.
        """
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetchval("SELECT 1", timeout=self.timeout) == 1
        except Exception as e:
            raise DatabaseError(f"Database ping failed: {str(e)}") from e

    async def list_documents(
        self,
        collection_id: str,
        limit: int,
        include_embedding: bool = False,
    ) -> List[dict]:
        """
        Get documents belonging to a collection.

        Args:
            collection_id: Collection to read from.
            limit: Maximum number of documents to return.
            include_embedding: Whether to return the stored vectors.

        Returns:
            List of document dictionaries ordered by id.
        """
        pool = self._require_pool()
        columns = DOCUMENT_COLUMNS
        if include_embedding:
            columns += ", embedding"

        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {columns}
                    FROM documents
                    WHERE collection_id = $1
                    ORDER BY id
                    LIMIT $2
                    """,
                    collection_id,
                    limit,
                    timeout=self.timeout,
                )
                return [_row_to_dict(row) for row in rows]
        except Exception as e:
            raise DatabaseError(f"Failed to fetch documents: {str(e)}") from e

    async def insert_documents(
        self, documents: Sequence[DocumentInsert]
    ) -> List[dict]:
        """
        Insert a batch of documents in a single statement.

        All rows are written by one INSERT inside a transaction, so either
        every document is stored or none is. Values are bound as parallel
        arrays and expanded server-side with unnest.

        Args:
            documents: Documents to insert, in submission order.

        Returns:
            Inserted document dictionaries in submission order.
        """
        pool = self._require_pool()
        if not documents:
            return []

        contents = [doc.content for doc in documents]
        metadata = [
            json.dumps(doc.metadata) if doc.metadata is not None else None
            for doc in documents
        ]
        embeddings = [_vector_literal(doc.embedding) for doc in documents]
        collection_ids = [doc.collection_id for doc in documents]
        sources = [doc.source for doc in documents]
        owner_ids = [doc.owner_id for doc in documents]

        try:
            async with pool.acquire() as conn:
                async with conn.transaction():
                    # Identity values follow the ORDER BY, so sorting the
                    # returned rows by id restores submission order.
                    rows = await conn.fetch(
                        f"""
                        WITH inserted AS (
                            INSERT INTO documents
                                (content, metadata, embedding, collection_id, source, owner_id)
                            SELECT t.content, t.metadata::jsonb, t.embedding::vector,
                                   t.collection_id, t.source, t.owner_id
                            FROM unnest(
                                $1::text[], $2::text[], $3::text[],
                                $4::text[], $5::text[], $6::text[]
                            ) WITH ORDINALITY
                                AS t(content, metadata, embedding,
                                     collection_id, source, owner_id, ord)
                            ORDER BY t.ord
                            RETURNING {DOCUMENT_COLUMNS}, embedding
                        )
                        SELECT * FROM inserted ORDER BY id
                        """,
                        contents,
                        metadata,
                        embeddings,
                        collection_ids,
                        sources,
                        owner_ids,
                        timeout=self.timeout,
                    )
                    return [_row_to_dict(row) for row in rows]
        except Exception as e:
            raise DatabaseError(f"Failed to insert documents: {str(e)}") from e

    async def find_api_key(self, key_hash: str) -> Optional[dict]:
        """
        Look up an active API key by its hash.

        Args:
            key_hash: SHA-256 hex digest of the presented key.

        Returns:
            Dictionary with project_id and user_id, or None if not found.
        """
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    """
                    SELECT project_id, user_id
                    FROM api_keys
                    WHERE key_hash = $1 AND revoked_at IS NULL
                    """,
                    key_hash,
                    timeout=self.timeout,
                )
                return dict(row) if row else None
        except Exception as e:
            raise DatabaseError(f"Failed to look up API key: {str(e)}") from e

    async def create_api_key(
        self, key_hash: str, project_id: str, user_id: str
    ) -> None:
        """
        Store a new API key hash.

        Args:
            key_hash: SHA-256 hex digest of the key.
            project_id: Project the key belongs to.
            user_id: Account that owns documents written with the key.
        """
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO api_keys (key_hash, project_id, user_id)
                    VALUES ($1, $2, $3)
                    """,
                    key_hash,
                    project_id,
                    user_id,
                    timeout=self.timeout,
                )
        except Exception as e:
            raise DatabaseError(f"Failed to create API key: {str(e)}") from e


def _vector_literal(embedding: Sequence[float]) -> str:
    return "[" + ",".join(str(float(value)) for value in embedding) + "]"


def _row_to_dict(row: asyncpg.Record) -> dict:
    result = dict(row)
    if result.get("embedding") is not None:
        result["embedding"] = [float(value) for value in result["embedding"]]
    result["owner_id"] = str(result["owner_id"])
    return result

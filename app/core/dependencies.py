"""Dependency injection for services."""

from typing import Optional

from fastapi import Header, Request

from app.core.config import settings
from app.models.document import AuthenticatedCaller
from app.services.auth import AuthService
from app.services.database import DatabaseService
from app.services.embedding import EmbeddingService
from app.services.ingestion import DocumentIngestionService


class ServiceContainer:
    """Container for service instances."""

    def __init__(self) -> None:
        """Initialize service container."""
        self.database = DatabaseService()
        self.embedding_service = EmbeddingService()
        self.auth_service = AuthService(self.database)
        self.ingestion_service = DocumentIngestionService(
            embedding_service=self.embedding_service,
            database=self.database,
        )

    async def initialize(self) -> None:
        """Initialize all services."""
        await self.database.connect()
        if settings.auto_create_schema:
            await self.database.init_schema()

    async def shutdown(self) -> None:
        """Shutdown all services."""
        await self.database.disconnect()
        await self.embedding_service.client.close()


services = ServiceContainer()


def get_ingestion_service() -> DocumentIngestionService:
    """FastAPI dependency returning the shared ingestion service."""
    return services.ingestion_service


async def get_current_caller(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> AuthenticatedCaller:
    """FastAPI dependency resolving the caller from the API key header."""
    api_key = request.headers.get(settings.api_key_header)
    if not api_key and authorization and authorization.lower().startswith("bearer "):
        api_key = authorization[7:].strip()
    return await services.auth_service.verify(api_key)

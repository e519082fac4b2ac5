"""Health check utilities."""

from typing import Dict

from app.services.database import DatabaseService
from app.services.embedding import EmbeddingService
from app.services.health import check_openai, check_postgres


async def check_all_dependencies(
    database: DatabaseService,
    embedding_service: EmbeddingService,
) -> Dict:
    """
    Check all service dependencies.

    Args:
        database: Database service.
        embedding_service: Embedding service.

    Returns:
        Dictionary with overall status and individual service statuses.
    """
    services = {}
    overall_status = "healthy"

    postgres_status = await check_postgres(database)
    services["postgres"] = postgres_status
    if postgres_status.get("status") != "healthy":
        overall_status = "unhealthy"

    openai_status = await check_openai(embedding_service)
    services["openai"] = openai_status
    if openai_status.get("status") == "unhealthy":
        overall_status = "unhealthy"

    return {"status": overall_status, "services": services}


async def check_readiness(database: DatabaseService) -> Dict:
    """
    Check service readiness.

    Only storage is required.

    Args:
        database: Database service.

    Returns:
        Readiness status dictionary.
    """
    postgres_status = await check_postgres(database)
    ready = postgres_status.get("status") == "healthy"
    return {"ready": ready, "postgres": ready}

"""Health check service for dependency verification."""

import time
from typing import Any, Dict

from app.core.config import settings
from app.services.database import DatabaseService
from app.services.embedding import EmbeddingService


async def check_postgres(database: DatabaseService) -> Dict[str, Any]:
    """
    Check PostgreSQL connectivity through the service pool.

    Args:
        database: DatabaseService instance.

    Returns:
        Health status dictionary.
    """
    try:
        if not database.pool:
            return {"status": "unhealthy", "error": "Not connected", "latency_ms": 0}

        start_time = time.time()
        await database.ping()
        latency_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
            "latency_ms": 0,
        }


async def check_openai(embedding_service: EmbeddingService) -> Dict[str, Any]:
    """
    Check OpenAI API connectivity.

    Args:
        embedding_service: EmbeddingService whose client is probed.

    Returns:
        Health status dictionary.
    """
    try:
        if not settings.openai_api_key:
            return {"status": "not_configured", "error": "API key not set"}

        start_time = time.time()
        await embedding_service.client.models.retrieve(embedding_service.model)
        latency_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
        }
    except Exception as e:
        error_msg = str(e).lower()
        if "api key" in error_msg or "authentication" in error_msg:
            return {"status": "unhealthy", "error": "Invalid API key"}
        return {
            "status": "unhealthy",
            "error": str(e),
            "latency_ms": 0,
        }

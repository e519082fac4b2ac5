"""Document Service: lists and ingests embedded documents per collection."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from app.api import documents
from app.api.health import check_all_dependencies, check_readiness
from app.core.config import settings
from app.core.dependencies import services
from app.core.exceptions import (
    AuthenticationError,
    DatabaseError,
    EmbeddingError,
    InvalidRequestError,
)
from app.monitoring.metrics import request_errors_total

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    await services.initialize()
    logger.info("Document Service started")
    yield
    await services.shutdown()
    logger.info("Document Service stopped")


app = FastAPI(title="Document Service", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents.router, tags=["documents"])


def error_response(status_code: int, kind: str, message: str) -> JSONResponse:
    """Build the JSON error body returned for every failed request."""
    request_errors_total.labels(kind=kind).inc()
    return JSONResponse(
        status_code=status_code, content={"error": message, "kind": kind})


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return error_response(401, "unauthorized", str(exc))


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(
    request: Request, exc: InvalidRequestError
) -> JSONResponse:
    return error_response(400, "invalid_request", str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return error_response(400, "invalid_request", f"Invalid request: {details}")


@app.exception_handler(EmbeddingError)
async def embedding_error_handler(
    request: Request, exc: EmbeddingError
) -> JSONResponse:
    logger.error(f"Embedding failed: {str(exc)}")
    return error_response(400, "embedding_failure", str(exc))


@app.exception_handler(DatabaseError)
async def database_error_handler(
    request: Request, exc: DatabaseError
) -> JSONResponse:
    logger.error(f"Storage failed: {str(exc)}")
    return error_response(400, "storage_failure", str(exc))


@app.get("/health")
async def health() -> dict:
    """
    Health check endpoint with dependency verification.

    Returns:
        Health status with service dependencies.
    """
    result = await check_all_dependencies(
        services.database, services.embedding_service
    )
    return {"service": settings.service_name, **result}


@app.get("/ready")
async def readiness() -> dict:
    """
    Readiness check endpoint.

    Returns:
        Readiness status.
    """
    result = await check_readiness(services.database)
    return {"service": settings.service_name, **result}


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.service_port)

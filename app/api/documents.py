"""Document list and batch insert routes."""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from app.core.dependencies import get_current_caller, get_ingestion_service
from app.models.document import AuthenticatedCaller, Document
from app.models.document_api import ErrorResponse, parse_records
from app.services.ingestion import DocumentIngestionService, require_collection_id

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Bad request"},
    401: {"model": ErrorResponse, "description": "Invalid or missing API key"},
}


@router.get(
    "/documents",
    response_model=List[Document],
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(get_current_caller)],
)
async def list_documents(
    collection_id: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    include_embedding: bool = Query(False),
    ingestion: DocumentIngestionService = Depends(get_ingestion_service),
) -> List[Document]:
    """
    List documents of a collection.

    Returns at most one page of documents; an unknown collection yields an
    empty list.
    """
    return await ingestion.list_documents(
        collection_id, limit=limit, include_embedding=include_embedding
    )


@router.post(
    "/documents",
    response_model=List[Document],
    responses=ERROR_RESPONSES,
)
async def create_documents(
    collection_id: Optional[str] = Query(None),
    body: Any = Body(None),
    caller: AuthenticatedCaller = Depends(get_current_caller),
    ingestion: DocumentIngestionService = Depends(get_ingestion_service),
) -> List[Document]:
    """
    Add a batch of documents to a collection.

    Every record is embedded and the batch is stored atomically; the
    persisted documents come back in submission order. The collection is
    checked before the body is validated.
    """
    collection_id = require_collection_id(collection_id)
    records = parse_records(body)
    return await ingestion.insert_documents(caller, collection_id, records)

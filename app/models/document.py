"""Document models for the ingestion service."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Document(BaseModel):
    """Document model representing a stored, embedded text record."""

    id: int
    content: str
    metadata: Optional[Any] = None
    collection_id: str
    owner_id: str
    source: str
    created_at: datetime
    embedding: Optional[List[float]] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class DocumentInsert(BaseModel):
    """Document row handed to storage for a batch insert."""

    content: str = Field(..., min_length=1)
    metadata: Optional[Any] = None
    embedding: List[float]
    collection_id: str = Field(..., min_length=1)
    source: str
    owner_id: str


class AuthenticatedCaller(BaseModel):
    """Account resolved from a verified API key."""

    account_id: str
    project_id: str

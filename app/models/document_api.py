"""Pydantic models for document API."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from app.core.exceptions import InvalidRequestError


class DocumentCreate(BaseModel):
    """Model for a single record in a batch insert request."""

    content: str = Field(..., min_length=1)
    source: str
    metadata: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Model for error responses."""

    error: str
    kind: str


_records_adapter = TypeAdapter(List[DocumentCreate])


def parse_records(body: Any) -> Optional[List[DocumentCreate]]:
    """
    Validate a raw request body as a batch of records.

    Args:
        body: Decoded JSON body, or None when the request had none.

    Returns:
        Validated records, or None for an absent body.

    Raises:
        InvalidRequestError: If the body does not match the record schema.
    """
    if body is None:
        return None
    try:
        return _records_adapter.validate_python(body)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise InvalidRequestError(f"Invalid request: {details}") from e

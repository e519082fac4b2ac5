"""API key authentication service."""

import hashlib
import logging
import secrets
from typing import Optional

from app.core.exceptions import AuthenticationError, DatabaseError
from app.models.document import AuthenticatedCaller
from app.services.database import DatabaseService

logger = logging.getLogger(__name__)


def hash_api_key(api_key: str) -> str:
    """Return the SHA-256 hex digest stored for an API key."""
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


class AuthService:
    """Verifies API keys against the api_keys table."""

    def __init__(self, database: DatabaseService) -> None:
        """
        Initialize auth service.

        Args:
            database: Database service holding the api_keys table.
        """
        self.database = database

    async def verify(self, api_key: Optional[str]) -> AuthenticatedCaller:
        """
        Resolve the caller behind an API key.

        Args:
            api_key: Key presented by the caller.

        Returns:
            The authenticated caller.

        Raises:
            AuthenticationError: If the key is missing, unknown or revoked,
                or the lookup itself fails.
        """
        if not api_key:
            raise AuthenticationError("Missing API key")

        try:
            record = await self.database.find_api_key(hash_api_key(api_key))
        except DatabaseError as e:
            logger.error(f"API key lookup failed: {str(e)}")
            raise AuthenticationError("Unable to verify API key") from e

        if not record:
            logger.warning("Rejected request with unknown API key")
            raise AuthenticationError("Invalid API key")

        return AuthenticatedCaller(
            account_id=str(record["user_id"]),
            project_id=str(record["project_id"]),
        )

    async def issue_key(self, project_id: str, user_id: str) -> str:
        """
        Create and store a new API key.

        Returns:
            The plaintext key. Only its hash is persisted.
        """
        api_key = secrets.token_urlsafe(32)
        await self.database.create_api_key(hash_api_key(api_key), project_id, user_id)
        logger.info(f"Issued API key for project {project_id}")
        return api_key

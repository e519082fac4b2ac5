"""OpenAI embedding generation service."""

import logging
from typing import List, Optional

from openai import AsyncOpenAI

from app.core.config import settings
from app.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 2048


class EmbeddingService:
    """Service for generating embeddings using OpenAI."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        batch_size: Optional[int] = None,
    ) -> None:
        """
        Initialize the embedding service.

        Args:
            client: Preconfigured OpenAI client, built from settings if omitted.
            batch_size: Maximum number of texts sent per API request.
        """
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.embedding_timeout_seconds,
            max_retries=0,
        )
        self.model = settings.embedding_model
        self.dimensions = settings.embedding_dimensions
        self.batch_size = min(
            batch_size or settings.embedding_batch_size, MAX_BATCH_SIZE)

    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for a list of texts.

        The texts are sent in consecutive slices of ``batch_size``; the
        returned vectors keep the input order. A failure in any slice fails
        the whole call.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text.

        Raises:
            EmbeddingError: If embedding generation fails.
        """
        if not texts:
            return []

        embeddings: List[List[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start:start + self.batch_size]
            try:
                response = await self.client.embeddings.create(
                    model=self.model,
                    input=batch,
                    dimensions=self.dimensions,
                )
            except Exception as e:
                logger.error(
                    f"Embedding request failed for {len(batch)} texts: {str(e)}")
                raise EmbeddingError(
                    f"Failed to generate embeddings: {str(e)}") from e

            ordered = sorted(response.data, key=lambda item: item.index)
            embeddings.extend(item.embedding for item in ordered)

        return embeddings

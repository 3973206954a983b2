"""Text embeddings for forecast retrieval."""

from __future__ import annotations

import logging
from typing import Sequence

from openai import APIError, APITimeoutError, AsyncOpenAI, RateLimitError

logger = logging.getLogger("thermalai.embeddings")


class EmbeddingService:
    """Generate embedding vectors with the OpenAI embeddings API."""

    def __init__(self, *, api_key: str, model: str, timeout: float = 30.0) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("OpenAI API key not configured")
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []

        client = self._get_client()
        try:
            response = await client.embeddings.create(model=self.model, input=list(texts))
        except (APITimeoutError, RateLimitError, APIError) as exc:
            logger.error("Embedding request failed: %s", exc)
            raise RuntimeError("Embedding service unavailable") from exc

        ordered = sorted(response.data, key=lambda item: item.index)
        return [list(item.embedding) for item in ordered]

    async def embed_query(self, text: str) -> list[float]:
        vectors = await self.embed_documents([text])
        return vectors[0]


__all__ = ["EmbeddingService"]

"""Thin OpenAI chat-completion wrapper for pilot-facing answers."""

from __future__ import annotations

import logging
from typing import Any

from openai import APIError, APITimeoutError, AsyncOpenAI, RateLimitError

logger = logging.getLogger("thermalai.openai")


class CompletionClient:
    """Send a system prompt plus the pilot's message to a chat model.

    Configuration is passed in explicitly; the underlying ``AsyncOpenAI``
    client is created on first use.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout: float = 30.0,
        max_tokens: int = 2048,
        temperature: float = 0.2,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("OpenAI API key not configured")
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
            logger.info("Initialized OpenAI client for model %s", self.model)
        return self._client

    async def complete(self, user_message: str, *, system_message: str | None = None) -> str:
        """Return the model's text answer for a single chat turn."""

        messages: list[dict[str, Any]] = []
        if system_message:
            messages.append({"role": "system", "content": system_message})
        messages.append({"role": "user", "content": user_message})

        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except (APITimeoutError, RateLimitError, APIError) as exc:
            logger.error("OpenAI API error: %s", exc)
            raise RuntimeError("AI service temporarily unavailable") from exc

        choice = response.choices[0].message
        return choice.content or ""


__all__ = ["CompletionClient"]

"""LLM client used by the scope matcher.

The matcher only depends on the ScopeLLMClient protocol so tests can
substitute a fake; OpenAIScopeClient talks to any OpenAI-compatible API.
"""
from __future__ import annotations

import logging
from typing import Protocol

import openai
from openai import AsyncOpenAI

from recommender.config import LLMSettings, settings
from recommender.errors import LLMResponseMalformed, LLMUnavailable

logger = logging.getLogger(__name__)


class ScopeLLMClient(Protocol):
    """Anything that turns a (system, user) prompt into raw reply text."""

    async def complete(self, system: str, user: str) -> str:
        ...


class OpenAIScopeClient:
    """Chat completion client in JSON mode.

    Every SDK failure (missing key, connection, timeout, HTTP status) becomes
    LLMUnavailable; nothing is retried beyond ``max_retries`` on the SDK.
    """

    def __init__(self, config: LLMSettings | None = None, client: AsyncOpenAI | None = None) -> None:
        self.config = config or settings.llm
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        # Created on first use so the API can start (and serve the catalog) without a key
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.api_key or None,
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
                max_retries=self.config.max_retries,
            )
        return self._client

    async def complete(self, system: str, user: str) -> str:
        logger.info(f"Requesting scope match from {self.config.model}")
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.APITimeoutError as e:
            logger.error(f"LLM request timed out after {self.config.timeout_seconds}s")
            raise LLMUnavailable("Language model request timed out") from e
        except openai.OpenAIError as e:
            logger.error(f"LLM request failed: {e}")
            raise LLMUnavailable(f"Language model request failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            logger.warning("Empty response from LLM")
            raise LLMResponseMalformed("Language model returned an empty reply")

        return response.choices[0].message.content

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

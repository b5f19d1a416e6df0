"""
OpenAI adapter - OpenAI API client.

Provides:
- Text embeddings for semantic search (text-embedding-3-small)
- Short completions for tag suggestions (gpt-4o-mini)

Every call is bounded by ``AI_TIMEOUT_SECONDS`` and any provider failure
(rate limit, connection error, timeout, API error, empty response) is
raised as ``UpstreamUnavailableError``. Callers decide whether that is
fatal: semantic search and embed-on-create swallow it, tag suggestion
surfaces it.
"""

from typing import Optional

from openai import APIConnectionError, APIError, APITimeoutError, AsyncOpenAI, RateLimitError

from cerebero.config.settings import Settings
from cerebero.shared.core.exceptions import UpstreamUnavailableError
from cerebero.shared.core.logging import get_logger


logger = get_logger(__name__)

SERVICE_NAME = "openai"


class OpenAIAdapter:
    """
    Adapter for OpenAI API operations.

    Args:
        settings: Application settings (OPENAI_API_KEY, model names, timeout)
        client: Pre-built client; tests pass a mock
    """

    COMPLETION_MAX_TOKENS = 64

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None) -> None:
        self.api_key = settings.OPENAI_API_KEY
        self.embedding_model = settings.EMBEDDING_MODEL
        self.completion_model = settings.COMPLETION_MODEL
        self.timeout = settings.AI_TIMEOUT_SECONDS
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-loaded OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise UpstreamUnavailableError(
                    SERVICE_NAME, message="OpenAI API key not configured"
                )
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def embed(self, text: str) -> list[float]:
        """
        Generate an embedding vector for ``text``.

        Raises:
            UpstreamUnavailableError: If the provider call fails
        """
        try:
            response = await self.client.embeddings.create(
                model=self.embedding_model,
                input=text,
            )
        except RateLimitError as e:
            logger.warning("openai_rate_limited", operation="embed", error=str(e))
            raise UpstreamUnavailableError(SERVICE_NAME) from e
        except (APITimeoutError, APIConnectionError) as e:
            logger.error("openai_connection_failed", operation="embed", error=str(e))
            raise UpstreamUnavailableError(SERVICE_NAME) from e
        except APIError as e:
            logger.error("openai_api_error", operation="embed", error=str(e))
            raise UpstreamUnavailableError(SERVICE_NAME) from e

        if not response.data:
            raise UpstreamUnavailableError(SERVICE_NAME, message="No embedding returned")
        return list(response.data[0].embedding)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Generate a completion and return its text.

        Raises:
            UpstreamUnavailableError: If the provider call fails
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.completion_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens or self.COMPLETION_MAX_TOKENS,
            )
        except RateLimitError as e:
            logger.warning("openai_rate_limited", operation="complete", error=str(e))
            raise UpstreamUnavailableError(SERVICE_NAME) from e
        except (APITimeoutError, APIConnectionError) as e:
            logger.error("openai_connection_failed", operation="complete", error=str(e))
            raise UpstreamUnavailableError(SERVICE_NAME) from e
        except APIError as e:
            logger.error("openai_api_error", operation="complete", error=str(e))
            raise UpstreamUnavailableError(SERVICE_NAME) from e

        if not response.choices:
            raise UpstreamUnavailableError(SERVICE_NAME, message="No completion returned")
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

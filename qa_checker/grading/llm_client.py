"""
LLM client for the scoring oracle.

Provides an async wrapper around the OpenAI SDK, usable with any
OpenAI-compatible endpoint. Every failure surfaces as LLMError carrying
the HTTP status, so callers can tell an overloaded service from a
broken request. Retrying is left to the caller.
"""

import logging

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from qa_checker.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Status the oracle returns when it is temporarily overloaded
OVERLOADED_STATUS = 503


class LLMError(Exception):
    """Raised when an LLM API call fails."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        status_code: int | None = None,
    ):
        self.cause = cause
        self.status_code = status_code
        super().__init__(message)

    @property
    def overloaded(self) -> bool:
        """True for the transient "service overloaded" condition."""
        return self.status_code == OVERLOADED_STATUS


class LLMClient:
    """
    Async client for an OpenAI-compatible chat completions API.

    Configured once per process from Settings and injected into the
    scoring oracle.
    """

    def __init__(self, settings: Settings | None = None, client: AsyncOpenAI | None = None):
        """
        Initialize the LLM client.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
            client: Preconfigured SDK client, mainly for tests.
        """
        self._settings = settings or get_settings()
        self._client = client or AsyncOpenAI(
            api_key=self._settings.llm_api_key,
            base_url=self._settings.llm_base_url,
            # Retries are owned by the scoring oracle
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._settings.llm_model

    async def generate(
        self,
        prompt: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """
        Send a single prompt and return the model's text.

        Args:
            prompt: The full natural-language instruction.
            temperature: Override temperature (uses config default if None).
            max_tokens: Override maximum response tokens.

        Returns:
            The generated text response.

        Raises:
            LLMError: If the call fails or the response is empty.
        """
        temp = temperature if temperature is not None else self._settings.llm_temperature

        try:
            response = await self._client.chat.completions.create(
                model=self._settings.llm_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temp,
                max_tokens=max_tokens or self._settings.llm_max_tokens,
            )
        except APIStatusError as e:
            raise LLMError(f"API error: {e.message}", cause=e, status_code=e.status_code) from e
        except APIConnectionError as e:
            raise LLMError(f"Connection failed: {e}", cause=e) from e
        except Exception as e:
            raise LLMError(f"Unexpected error: {e}", cause=e) from e

        if not response.choices or not response.choices[0].message.content:
            raise LLMError("Empty response from LLM")

        return response.choices[0].message.content

    async def health_check(self) -> bool:
        """
        Check if the API is reachable.

        Returns:
            True if API is healthy, False otherwise.
        """
        try:
            await self.generate("ping", max_tokens=5)
        except LLMError as e:
            logger.warning("LLM health check failed: %s", e)
            return False
        return True

    async def close(self) -> None:
        await self._client.close()

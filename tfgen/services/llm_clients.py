"""
Chat-completion API clients (OpenAI and Mistral).
Both speak the same /chat/completions wire format over httpx.
"""
from typing import Dict, Any, List, Optional
import asyncio
import json
import logging

import httpx

from tfgen.core.config import config
from tfgen.resilience.circuit_breaker import get_circuit_breaker


logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class LLMAPIError(Exception):
    """Raised when a chat-completion request fails."""
    pass


class ChatCompletionClient:
    """Base client with retries, exponential backoff and a circuit breaker."""

    provider = "llm"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float,
        max_tokens: Optional[int] = None,
        retries: int = 3,
        backoff_factor: float = 0.5
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.retries = retries
        self.backoff_factor = backoff_factor
        self.circuit_breaker = get_circuit_breaker(self.provider)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _backoff(self, attempt: int, retry_after: Optional[str] = None) -> None:
        delay = self.backoff_factor * (2 ** attempt)
        if retry_after:
            try:
                delay = float(retry_after)
            except ValueError:
                pass
        await asyncio.sleep(delay)

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.1,
        max_tokens: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Send a chat completion request.

        Args:
            messages: List of message dictionaries with 'role' and 'content'
            temperature: Sampling temperature, lower = more deterministic
            max_tokens: Overrides the client's configured token limit

        Returns:
            API response dictionary

        Raises:
            LLMAPIError: If the key is missing, the breaker is open, or all
                attempts fail
        """
        if not self.api_key:
            raise LLMAPIError(f"{self.provider} API key is not configured")

        if not self.circuit_breaker.allow_request():
            raise LLMAPIError(
                f"{self.provider} temporarily unavailable (circuit breaker open)"
            )

        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        limit = max_tokens or self.max_tokens
        if limit:
            payload["max_tokens"] = limit

        try:
            return await self._send(url, headers, payload)
        except asyncio.CancelledError:
            self.circuit_breaker.record_failure()
            raise

    def _decode(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            result = response.json()
        except ValueError as error:
            self.circuit_breaker.record_failure()
            raise LLMAPIError(f"{self.provider} returned a non-JSON response") from error
        if not isinstance(result, dict):
            self.circuit_breaker.record_failure()
            raise LLMAPIError(f"{self.provider} returned an unexpected response shape")
        return result

    async def _send(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        for attempt in range(self.retries):
            last_attempt = attempt == self.retries - 1
            try:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        url,
                        headers=headers,
                        json=payload,
                        timeout=self.timeout,
                    )
                    response.raise_for_status()
                    result = self._decode(response)
                self.circuit_breaker.record_success()
                return result

            except httpx.HTTPStatusError as error:
                status = error.response.status_code
                try:
                    detail = error.response.json().get("error", {}).get("message", str(error))
                except (json.JSONDecodeError, AttributeError):
                    detail = error.response.text or str(error)

                if status in RETRYABLE_STATUS_CODES and not last_attempt:
                    logger.debug("%s returned %s, retrying (attempt %d)", self.provider, status, attempt + 1)
                    await self._backoff(attempt, error.response.headers.get("Retry-After"))
                    continue
                self.circuit_breaker.record_failure()
                raise LLMAPIError(
                    f"{self.provider} request failed: {detail} (status: {status})"
                ) from error

            except httpx.TimeoutException as error:
                if not last_attempt:
                    await self._backoff(attempt)
                    continue
                self.circuit_breaker.record_failure()
                raise LLMAPIError(f"{self.provider} request timed out: {error}") from error

            except httpx.RequestError as error:
                if not last_attempt:
                    await self._backoff(attempt)
                    continue
                self.circuit_breaker.record_failure()
                raise LLMAPIError(f"Failed to connect to {self.provider}: {error}") from error

        self.circuit_breaker.record_failure()
        raise LLMAPIError(f"{self.provider} request failed after {self.retries} attempts")


class OpenAIClient(ChatCompletionClient):
    """OpenAI chat completions; the primary backend."""

    provider = "openai"

    def __init__(self, api_key: Optional[str] = None):
        super().__init__(
            api_key=api_key or config.OPENAI_API_KEY,
            base_url=config.OPENAI_API_BASE_URL,
            model=config.OPENAI_MODEL,
            timeout=config.OPENAI_TIMEOUT,
            max_tokens=config.OPENAI_MAX_TOKENS,
        )


class MistralClient(ChatCompletionClient):
    """Mistral chat completions; used when OpenAI fails."""

    provider = "mistral"

    def __init__(self, api_key: Optional[str] = None):
        super().__init__(
            api_key=api_key or config.MISTRAL_API_KEY,
            base_url=config.MISTRAL_API_BASE_URL,
            model=config.MISTRAL_MODEL,
            timeout=config.MISTRAL_TIMEOUT,
            max_tokens=config.MISTRAL_MAX_TOKENS,
        )

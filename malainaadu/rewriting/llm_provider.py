"""LLM provider interface and implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import OpenAI

from ..errors import ConfigurationError, RewriteError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send a single prompt and return the model's text reply.

        Raises:
            RewriteError: on transport failure, a non-2xx reply or an empty answer
        """

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""


class GeminiProvider(LLMProvider):
    """Google Gemini over its REST generateContent endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: int = 1024,
        timeout: float = 15.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key, sent in the query string
            model: Model name to use
            base_url: Custom base URL (for testing)
            client: Preconfigured httpx client (for testing)
        """
        self.api_key = api_key
        self.model = model
        self.base_url = (base_url or GEMINI_BASE_URL).rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._client = client
        self.total_tokens = 0
        self.api_calls = 0

    def _post(self, url: str, body: Dict[str, Any]) -> httpx.Response:
        params = {"key": self.api_key}
        if self._client is not None:
            return self._client.post(url, params=params, json=body, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, params=params, json=body)

    def generate(self, prompt: str) -> str:
        """Generate text with Gemini."""
        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

        self.api_calls += 1
        try:
            response = self._post(url, body)
        except httpx.TimeoutException as e:
            raise RewriteError(f"Gemini request timeout after {self.timeout:g}s") from e
        except httpx.HTTPError as e:
            raise RewriteError(f"Gemini request failed: {e}") from e

        if not response.is_success:
            logger.error("Gemini API error: %s %s", response.status_code, response.text[:500])
            raise RewriteError(f"Gemini API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise RewriteError("Gemini returned a non-JSON body") from e

        usage = data.get("usageMetadata") or {}
        self.total_tokens += usage.get("totalTokenCount", 0)

        candidates: List[Dict[str, Any]] = data.get("candidates") or []
        parts: List[Dict[str, Any]] = []
        if candidates:
            parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text.strip():
            raise RewriteError("Gemini returned no text")
        return text

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "model": self.model,
        }


class OpenAIProvider(LLMProvider):
    """OpenAI implementation of LLM provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: int = 1024,
        timeout: float = 15.0,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model name to use
            base_url: Custom base URL (for testing)
        """
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.total_tokens = 0
        self.api_calls = 0

    def generate(self, prompt: str) -> str:
        """Generate text with OpenAI."""
        self.api_calls += 1
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_output_tokens,
            )
        except openai.OpenAIError as e:
            raise RewriteError(f"OpenAI request failed: {e}") from e

        # Update usage stats
        if response.usage:
            self.total_tokens += response.usage.total_tokens

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise RewriteError("OpenAI returned no text")
        return content.strip()

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "model": self.model,
        }


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing and dry runs."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None) -> None:
        """
        Initialize mock provider.

        Args:
            replies: Replies returned in order; the last one repeats
            error: Raised from every call instead of replying
        """
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[str] = []

    def generate(self, prompt: str) -> str:
        """Return the next canned reply."""
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        if not self.replies:
            raise RewriteError("Mock provider has no replies")
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "total_tokens": len(self.calls) * 100,
            "api_calls": len(self.calls),
            "model": "mock",
        }


def create_llm_provider(llm_config: Dict[str, Any], timeout: float = 15.0) -> LLMProvider:
    """Build the configured provider from `Config.get_llm_config()` output."""
    provider = (llm_config.get("provider") or "gemini").lower()
    api_key = llm_config.get("api_key")
    if not api_key:
        raise ConfigurationError("No API key configured for the rewrite provider")

    common = {
        "api_key": api_key,
        "base_url": llm_config.get("base_url"),
        "temperature": llm_config.get("temperature", 0.7),
        "max_output_tokens": llm_config.get("max_output_tokens", 1024),
        "timeout": timeout,
    }
    if provider == "gemini":
        return GeminiProvider(model=llm_config.get("model") or "gemini-2.0-flash", **common)
    if provider == "openai":
        return OpenAIProvider(model=llm_config.get("model") or "gpt-4o-mini", **common)
    raise ConfigurationError(f"Unknown LLM provider: {provider}")

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """The LLM call failed at the transport or API level."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class BaseProvider(ABC):
    """Abstract base class for completion providers"""

    name: str  # Provider identifier, e.g. "claude"

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key
        self._client: Optional[httpx.AsyncClient] = None

    def is_configured(self) -> bool:
        """Check if provider has valid API key"""
        return bool(self.api_key)

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        model: str,
        max_tokens: int,
        temperature: float,
        timeout: Optional[float] = None,
    ) -> str:
        """Single non-streaming completion; returns the response text."""
        pass

    async def cleanup(self):
        """Cleanup HTTP client resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

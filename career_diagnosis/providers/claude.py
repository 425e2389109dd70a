import logging
from typing import Optional

import httpx
import orjson

from career_diagnosis.config import settings
from career_diagnosis.providers.base import BaseProvider, ProviderError

logger = logging.getLogger(__name__)


class ClaudeProvider(BaseProvider):
    name = "claude"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key if api_key is not None else settings.anthropic_api_key)
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.anthropic_base_url,
            headers={
                "x-api-key": self.api_key or "",
                "anthropic-version": settings.anthropic_version,
                "Content-Type": "application/json",
            },
            timeout=settings.detailed_timeout,
            transport=transport,
        )

    def _extract_text(self, data: dict) -> str:
        """First text block of a Messages API response."""
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type", "text") == "text":
                return block.get("text") or ""
        return ""

    async def complete(
        self,
        prompt: str,
        model: str,
        max_tokens: int,
        temperature: float,
        timeout: Optional[float] = None,
    ) -> str:
        """Send one user message to the Messages API and return the reply text."""
        if not self.is_configured():
            raise ProviderError(self.name, "API key is not configured")
        if self._client is None:
            raise ProviderError(self.name, "client is closed")

        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            response = await self._client.post(
                "/messages",
                json=payload,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
            response.raise_for_status()
            data = orjson.loads(response.content)
        except httpx.HTTPStatusError as e:
            logger.warning(f"Claude API returned {e.response.status_code} for model {model}")
            raise ProviderError(self.name, f"HTTP {e.response.status_code}", e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning(f"Claude API request failed: {type(e).__name__}")
            raise ProviderError(self.name, f"request failed ({type(e).__name__})") from e
        except orjson.JSONDecodeError as e:
            raise ProviderError(self.name, "response body is not valid") from e

        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected response shape")
        return self._extract_text(data)

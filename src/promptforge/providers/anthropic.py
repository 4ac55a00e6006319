"""
Anthropic provider adapter (Messages API)

Handles key differences from chat-completions:
  - Endpoint: {base}/v1/messages
  - Auth: x-api-key header instead of Authorization: Bearer
  - max_tokens is required
  - Response format: content blocks; text blocks are concatenated
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from promptforge.common.errors import EmptyOrBlockedResponseError, MalformedResponseError, ProviderError
from promptforge.providers.base import ProviderAdapter
from promptforge.schemas.providers import ProviderConfig, ProviderKind

logger = structlog.stdlib.get_logger()

ANTHROPIC_API_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 4096


class AnthropicAdapter(ProviderAdapter):
    kind = ProviderKind.ANTHROPIC

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_base: str = "https://api.anthropic.com",
        timeout: float = 120.0,
    ) -> None:
        super().__init__(http_client)
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def transform_request(
        self, prompt: str, config: ProviderConfig
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        url = f"{self.api_base}/v1/messages"
        headers = {
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
            "content-type": "application/json",
        }
        body: dict[str, Any] = {
            "model": config.model,
            "max_tokens": DEFAULT_MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }
        return url, headers, body

    @staticmethod
    def extract_text(raw_response: Any) -> str:
        if not isinstance(raw_response, dict) or not isinstance(raw_response.get("content"), list):
            raise MalformedResponseError("Invalid response structure from the API.")

        text_parts = [
            block.get("text", "")
            for block in raw_response["content"]
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        text = "".join(text_parts)
        if not text:
            raise EmptyOrBlockedResponseError("The response was empty.")
        return text

    async def generate_text(self, prompt: str, config: ProviderConfig) -> str:
        url, headers, body = self.transform_request(prompt, config)

        try:
            response = await self.client.post(url, headers=headers, json=body, timeout=self.timeout)

            if not response.is_success:
                await self._log_error_response(response, model=config.model, config=config.id)
                raise ProviderError(
                    self.error_detail(response),
                    details={"provider": self.kind.value, "status_code": response.status_code},
                )

            try:
                raw = response.json()
            except ValueError as e:
                raise MalformedResponseError("Invalid response structure from the API.") from e

            return self.extract_text(raw)
        except Exception as e:
            raise self.qualify(e) from e

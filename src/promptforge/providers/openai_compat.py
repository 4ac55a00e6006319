"""
Generic chat-completions adapter (OpenAI, Grok, DeepSeek).

All three families accept the same request and response shape and differ
only by endpoint URL:
  - POST {endpoint} with {"model", "messages": [{"role": "user", "content": prompt}]}
  - Auth: Authorization: Bearer <api key>
  - Response: choices[0].message.content
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from promptforge.common.errors import MalformedResponseError, ProviderError
from promptforge.providers.base import ProviderAdapter
from promptforge.schemas.providers import ProviderConfig, ProviderKind

logger = structlog.stdlib.get_logger()


class OpenAICompatibleAdapter(ProviderAdapter):
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        kind: ProviderKind,
        endpoint: str,
        timeout: float = 120.0,
    ) -> None:
        super().__init__(http_client)
        self.kind = kind
        self.endpoint = endpoint
        self.timeout = timeout

    def transform_request(
        self, prompt: str, config: ProviderConfig
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Returns (url, headers, body) for the chat-completions call."""
        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }
        body: dict[str, Any] = {
            "model": config.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        return self.endpoint, headers, body

    @staticmethod
    def extract_content(raw_response: Any) -> str:
        content = None
        if isinstance(raw_response, dict):
            choices = raw_response.get("choices")
            if isinstance(choices, list) and choices and isinstance(choices[0], dict):
                message = choices[0].get("message")
                if isinstance(message, dict):
                    content = message.get("content")

        if not isinstance(content, str):
            raise MalformedResponseError("Invalid response structure from the API.")
        return content

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

            return self.extract_content(raw)
        except Exception as e:
            raise self.qualify(e) from e

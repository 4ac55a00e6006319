"""Tests for the Anthropic Messages adapter."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest
import respx

from promptforge.common.errors import EmptyOrBlockedResponseError, MalformedResponseError
from promptforge.providers.anthropic import ANTHROPIC_API_VERSION, AnthropicAdapter
from promptforge.schemas.providers import ProviderConfig, ProviderKind


def _make_config() -> ProviderConfig:
    return ProviderConfig(
        id="cfg-claude",
        name="Claude",
        provider=ProviderKind.ANTHROPIC,
        api_key="sk-ant-test",
        model="claude-3-5-sonnet-20240620",
    )


@pytest.mark.unit
class TestAnthropicAdapter:
    def test_transform_request(self) -> None:
        adapter = AnthropicAdapter(MagicMock())
        url, headers, body = adapter.transform_request("Hello", _make_config())

        assert url == "https://api.anthropic.com/v1/messages"
        assert headers["x-api-key"] == "sk-ant-test"
        assert headers["anthropic-version"] == ANTHROPIC_API_VERSION
        assert "Authorization" not in headers
        assert body["max_tokens"] > 0
        assert body["messages"] == [{"role": "user", "content": "Hello"}]

    def test_extract_text_joins_text_blocks(self) -> None:
        raw = {
            "content": [
                {"type": "text", "text": "Hello "},
                {"type": "tool_use", "id": "x"},
                {"type": "text", "text": "world"},
            ]
        }
        assert AnthropicAdapter.extract_text(raw) == "Hello world"

    def test_extract_text_empty(self) -> None:
        with pytest.raises(EmptyOrBlockedResponseError):
            AnthropicAdapter.extract_text({"content": []})

    def test_extract_text_malformed(self) -> None:
        with pytest.raises(MalformedResponseError):
            AnthropicAdapter.extract_text({"choices": []})

    @respx.mock
    async def test_generate_text(self) -> None:
        route = respx.post("https://api.anthropic.com/v1/messages").mock(
            return_value=httpx.Response(
                200, json={"content": [{"type": "text", "text": "Bonjour"}], "stop_reason": "end_turn"}
            )
        )
        async with httpx.AsyncClient() as client:
            result = await AnthropicAdapter(client).generate_text("Hi", _make_config())

        assert result == "Bonjour"
        assert route.calls.last.request.headers["x-api-key"] == "sk-ant-test"

"""Tests for provider routing, capability gating and credential checks."""

from __future__ import annotations

import httpx
import pytest
import respx

from promptforge.common.errors import (
    CapabilityNotSupportedError,
    MissingCredentialError,
    UnsupportedProviderError,
)
from promptforge.providers.anthropic import AnthropicAdapter
from promptforge.providers.dispatcher import ProviderDispatcher
from promptforge.providers.google import GoogleAdapter
from promptforge.providers.openai_compat import OpenAICompatibleAdapter
from promptforge.schemas.providers import ProviderConfig, ProviderKind


@pytest.mark.unit
class TestRegistry:
    def test_every_kind_has_an_adapter(self, dispatcher: ProviderDispatcher) -> None:
        assert set(dispatcher.adapters) == set(ProviderKind)
        assert dispatcher.list_supported_providers() == sorted(k.value for k in ProviderKind)

    def test_adapter_types(self, dispatcher: ProviderDispatcher) -> None:
        assert isinstance(dispatcher.get_adapter(ProviderKind.GEMINI), GoogleAdapter)
        assert isinstance(dispatcher.get_adapter("anthropic"), AnthropicAdapter)
        for kind in (ProviderKind.OPENAI, ProviderKind.GROK, ProviderKind.DEEPSEEK):
            adapter = dispatcher.get_adapter(kind)
            assert isinstance(adapter, OpenAICompatibleAdapter)
            assert adapter.kind is kind

    def test_only_gemini_is_multimodal(self, dispatcher: ProviderDispatcher) -> None:
        multimodal = {k for k, a in dispatcher.adapters.items() if a.supports_video}
        assert multimodal == {ProviderKind.GEMINI}

    def test_unknown_provider(self, dispatcher: ProviderDispatcher) -> None:
        with pytest.raises(UnsupportedProviderError):
            dispatcher.get_adapter("mistral")

    def test_unknown_provider_in_config(self) -> None:
        with pytest.raises(UnsupportedProviderError):
            ProviderConfig(id="x", name="x", provider="mistral", model="m")


@pytest.mark.unit
class TestPreconditions:
    async def test_missing_key_fails_before_io(
        self, dispatcher: ProviderDispatcher, openai_config: ProviderConfig
    ) -> None:
        config = openai_config.model_copy(update={"api_key": ""})
        with respx.mock(assert_all_called=False) as mock:
            route = mock.route()
            with pytest.raises(MissingCredentialError, match="API Key not set"):
                await dispatcher.generate_text("Hi", config)
        assert not route.called

    @pytest.mark.parametrize("kind", [k for k in ProviderKind if not k.is_native])
    async def test_speech_rejected_for_non_native(
        self, dispatcher: ProviderDispatcher, kind: ProviderKind
    ) -> None:
        config = ProviderConfig(id="c", name="c", provider=kind, api_key="k", model="m")
        with respx.mock(assert_all_called=False) as mock:
            route = mock.route()
            with pytest.raises(CapabilityNotSupportedError) as exc_info:
                await dispatcher.generate_speech("Hi", config)
        assert not route.called
        assert exc_info.value.message == (
            "Speech generation is only supported for the Google Gemini provider."
        )

    async def test_video_rejected_before_key_check(
        self, dispatcher: ProviderDispatcher, openai_config: ProviderConfig
    ) -> None:
        statuses: list[str] = []
        config = openai_config.model_copy(update={"api_key": ""})
        with pytest.raises(CapabilityNotSupportedError, match="Video generation is only supported"):
            await dispatcher.generate_video("Hi", config, statuses.append)
        assert statuses == []

    @respx.mock
    async def test_routes_to_configured_endpoint(
        self, dispatcher: ProviderDispatcher
    ) -> None:
        route = respx.post("https://api.deepseek.com/v1/chat/completions").mock(
            return_value=httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})
        )
        config = ProviderConfig(
            id="d", name="DeepSeek", provider=ProviderKind.DEEPSEEK, api_key="k", model="deepseek-chat"
        )
        assert await dispatcher.generate_text("Hi", config) == "ok"
        assert route.called


@pytest.mark.unit
class TestClientLifecycle:
    async def test_owned_client_created_lazily_and_closed(self, settings) -> None:
        dispatcher = ProviderDispatcher(settings)
        client = dispatcher.client
        assert dispatcher.client is client

        await dispatcher.aclose()
        assert client.is_closed

    async def test_borrowed_client_is_left_open(self, settings) -> None:
        async with httpx.AsyncClient() as client:
            async with ProviderDispatcher(settings, http_client=client) as dispatcher:
                assert dispatcher.client is client
            assert not client.is_closed

"""
Provider dispatcher: routes generation calls to the adapter for a config's provider.

The dispatcher owns its HTTP client: it is created on first use and closed
by ``aclose()`` (the app lifespan uses the dispatcher as an async context
manager). Every ProviderKind has a registered adapter; UnsupportedProviderError
is reserved for values outside the enum.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import httpx
import structlog

from promptforge.common.cancellation import CancellationToken
from promptforge.common.errors import (
    CapabilityNotSupportedError,
    MissingCredentialError,
    UnsupportedProviderError,
)
from promptforge.config import Settings, get_settings
from promptforge.core.media.store import MediaStore
from promptforge.providers.anthropic import AnthropicAdapter
from promptforge.providers.base import ProgressCallback, ProviderAdapter
from promptforge.providers.google import GoogleAdapter
from promptforge.providers.openai_compat import OpenAICompatibleAdapter
from promptforge.schemas.providers import ProviderConfig, ProviderKind

logger = structlog.stdlib.get_logger()


class ProviderDispatcher:
    def __init__(
        self,
        settings: Settings | None = None,
        media_store: MediaStore | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        self.media_store = (
            media_store
            if media_store is not None
            else MediaStore(self.settings.video.media_store_capacity)
        )
        self._http_client = http_client
        self._owns_client = http_client is None
        self._sleep = sleep
        self._adapters: dict[ProviderKind, ProviderAdapter] | None = None

    # Resource lifecycle

    @property
    def client(self) -> httpx.AsyncClient:
        """The shared async HTTP client, created on first use."""
        if self._http_client is None or self._http_client.is_closed:
            endpoints = self.settings.providers
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    endpoints.request_timeout_seconds,
                    connect=endpoints.connect_timeout_seconds,
                ),
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                http2=True,
                follow_redirects=True,
            )
            self._owns_client = True
            self._adapters = None
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()
        self._http_client = None
        self._adapters = None

    async def __aenter__(self) -> ProviderDispatcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # Registry

    def _build_adapters(self) -> dict[ProviderKind, ProviderAdapter]:
        client = self.client
        endpoints = self.settings.providers
        timeout = endpoints.request_timeout_seconds
        return {
            ProviderKind.GEMINI: GoogleAdapter(
                client,
                self.media_store,
                api_base=endpoints.gemini_base,
                speech=self.settings.speech,
                video=self.settings.video,
                timeout=timeout,
                sleep=self._sleep,
            ),
            ProviderKind.OPENAI: OpenAICompatibleAdapter(
                client, ProviderKind.OPENAI, endpoints.openai, timeout
            ),
            ProviderKind.GROK: OpenAICompatibleAdapter(
                client, ProviderKind.GROK, endpoints.grok, timeout
            ),
            ProviderKind.DEEPSEEK: OpenAICompatibleAdapter(
                client, ProviderKind.DEEPSEEK, endpoints.deepseek, timeout
            ),
            ProviderKind.ANTHROPIC: AnthropicAdapter(
                client, api_base=endpoints.anthropic_base, timeout=timeout
            ),
        }

    @property
    def adapters(self) -> dict[ProviderKind, ProviderAdapter]:
        if self._adapters is None or self._http_client is None or self._http_client.is_closed:
            self._adapters = self._build_adapters()
        return self._adapters

    def get_adapter(self, provider: ProviderKind | str) -> ProviderAdapter:
        kind = ProviderKind.parse(provider)
        adapter = self.adapters.get(kind)
        if adapter is None:
            supported = ", ".join(self.list_supported_providers())
            raise UnsupportedProviderError(
                f"Unsupported provider: {provider}. Supported: {supported}",
                details={"provider": str(provider)},
            )
        return adapter

    def list_supported_providers(self) -> list[str]:
        return sorted(kind.value for kind in self.adapters)

    # Preconditions

    @staticmethod
    def _check_credentials(config: ProviderConfig) -> None:
        # The native adapter enforces its own key requirement
        if not config.provider.is_native and not config.api_key:
            raise MissingCredentialError(
                "API Key not set for the selected provider. Please configure it in the settings.",
                details={"provider": config.provider.value, "config": config.id},
            )

    @staticmethod
    def _require_native(config: ProviderConfig, capability: str) -> None:
        if not config.provider.is_native:
            raise CapabilityNotSupportedError(
                f"{capability} generation is only supported for the Google Gemini provider.",
                details={"provider": config.provider.value, "capability": capability.lower()},
            )

    # Operations

    async def generate_text(self, prompt: str, config: ProviderConfig) -> str:
        adapter = self.get_adapter(config.provider)
        self._check_credentials(config)

        await logger.ainfo(
            "generate.text.request",
            provider=config.provider.value,
            model=config.model,
            prompt_chars=len(prompt),
        )
        return await adapter.generate_text(prompt, config)

    async def generate_speech(
        self,
        text: str,
        config: ProviderConfig,
        cancel: CancellationToken | None = None,
    ) -> str:
        adapter = self.get_adapter(config.provider)
        self._require_native(config, "Speech")
        self._check_credentials(config)

        await logger.ainfo("generate.speech.request", provider=config.provider.value, text_chars=len(text))
        return await adapter.generate_speech(text, config, cancel)

    async def generate_video(
        self,
        prompt: str,
        config: ProviderConfig,
        on_progress: ProgressCallback,
        cancel: CancellationToken | None = None,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
        model: str | None = None,
    ) -> str:
        adapter = self.get_adapter(config.provider)
        self._require_native(config, "Video")
        self._check_credentials(config)

        await logger.ainfo(
            "generate.video.request",
            provider=config.provider.value,
            model=model or self.settings.video.model,
            aspect_ratio=aspect_ratio,
            resolution=resolution,
        )
        return await adapter.generate_video(
            prompt,
            config,
            on_progress,
            cancel,
            aspect_ratio=aspect_ratio,
            resolution=resolution,
            model=model,
        )

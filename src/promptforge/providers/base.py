"""Abstract base class for provider protocol adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

import httpx
import structlog

from promptforge.common.cancellation import CancellationToken
from promptforge.common.errors import (
    CapabilityNotSupportedError,
    GenerationCancelledError,
    NetworkError,
    PromptForgeError,
)
from promptforge.schemas.providers import ProviderConfig, ProviderKind

logger = structlog.stdlib.get_logger()

# One-way status channel: adapter → caller. Never awaited.
ProgressCallback = Callable[[str], None]


class ProviderAdapter(ABC):
    """
    Base class for all provider adapters.

    Subclasses must implement:
      - generate_text() : single synchronous completion

    Multimodal adapters override generate_speech() / generate_video() and
    set the matching ``supports_*`` flag.
    """

    kind: ProviderKind
    supports_speech: bool = False
    supports_video: bool = False

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self.client = http_client

    @property
    def label(self) -> str:
        """Provider prefix used in user-facing error messages."""
        return self.kind.value.upper()

    @abstractmethod
    async def generate_text(self, prompt: str, config: ProviderConfig) -> str:
        """Send ``prompt`` and return the response text."""
        ...

    async def generate_speech(
        self,
        text: str,
        config: ProviderConfig,
        cancel: CancellationToken | None = None,
    ) -> str:
        raise CapabilityNotSupportedError(
            f"Speech generation is not supported for the {self.kind.display_name} provider.",
            details={"provider": self.kind.value, "capability": "speech"},
        )

    async def generate_video(
        self,
        prompt: str,
        config: ProviderConfig,
        on_progress: ProgressCallback,
        cancel: CancellationToken | None = None,
        *,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
        model: str | None = None,
    ) -> str:
        raise CapabilityNotSupportedError(
            f"Video generation is not supported for the {self.kind.display_name} provider.",
            details={"provider": self.kind.value, "capability": "video"},
        )

    # Shared helpers

    def qualify(self, exc: Exception, prefix: str | None = None) -> PromptForgeError:
        """Re-wrap any adapter failure with a provider-qualified message."""
        prefix = prefix or f"{self.label} API Error: "
        if isinstance(exc, GenerationCancelledError):
            return exc
        if isinstance(exc, PromptForgeError):
            return exc.with_prefix(prefix)
        if isinstance(exc, httpx.HTTPError):
            return NetworkError(
                f"{prefix}{exc}" if str(exc) else f"{prefix}{type(exc).__name__}",
                details={"provider": self.kind.value},
            )
        return PromptForgeError(
            f"{prefix}{exc}",
            details={"provider": self.kind.value},
        )

    async def _log_error_response(self, response: httpx.Response, **extra: Any) -> None:
        await logger.aerror(
            f"provider.{self.kind.value}.error",
            status_code=response.status_code,
            body=response.text[:500],
            **extra,
        )

    @staticmethod
    def error_detail(response: httpx.Response) -> str:
        """Best-effort message from a provider's JSON error envelope."""
        try:
            data = response.json()
        except ValueError:
            return response.reason_phrase or f"API request failed with status {response.status_code}"

        message = None
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict):
                message = error.get("message")
            elif isinstance(error, str):
                message = error
        if isinstance(message, str) and message:
            return message
        return f"API request failed with status {response.status_code}"

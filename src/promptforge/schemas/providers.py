"""Provider configuration schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field, field_validator

from promptforge.common.errors import UnsupportedProviderError


class ProviderKind(str, enum.Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    GROK = "grok"
    DEEPSEEK = "deepseek"
    ANTHROPIC = "anthropic"

    @classmethod
    def parse(cls, value: str | ProviderKind) -> ProviderKind:
        if isinstance(value, ProviderKind):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as e:
            raise UnsupportedProviderError(f"Unsupported provider: {value}") from e

    @property
    def is_native(self) -> bool:
        """Native multimodal provider (text, speech and video)."""
        return self is ProviderKind.GEMINI

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ProviderKind.GEMINI: "Google Gemini",
    ProviderKind.OPENAI: "OpenAI",
    ProviderKind.GROK: "Grok",
    ProviderKind.DEEPSEEK: "DeepSeek",
    ProviderKind.ANTHROPIC: "Anthropic (Claude)",
}

DEFAULT_MODELS: dict[ProviderKind, str] = {
    ProviderKind.GEMINI: "gemini-2.5-flash",
    ProviderKind.OPENAI: "gpt-4-turbo",
    ProviderKind.GROK: "grok-2",
    ProviderKind.DEEPSEEK: "deepseek-chat",
    ProviderKind.ANTHROPIC: "claude-3-5-sonnet-20240620",
}


class ProviderConfig(BaseModel):
    id: str
    name: str
    provider: ProviderKind
    api_key: str = ""
    model: str = Field(..., min_length=1)

    @field_validator("provider", mode="before")
    @classmethod
    def _parse_provider(cls, value: object) -> ProviderKind:
        return ProviderKind.parse(value)  # type: ignore[arg-type]

    @field_validator("model")
    @classmethod
    def _model_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("model must not be blank")
        return value.strip()


class ProviderConfigRequest(BaseModel):
    """Create/update payload; ``id`` is assigned by the server when omitted."""

    id: str | None = None
    name: str = Field(..., min_length=1, max_length=255)
    provider: ProviderKind
    api_key: str = ""
    model: str | None = None

    @field_validator("provider", mode="before")
    @classmethod
    def _parse_provider(cls, value: object) -> ProviderKind:
        return ProviderKind.parse(value)  # type: ignore[arg-type]


class ProviderConfigInfo(BaseModel):
    """Public view of a config; the key is never echoed back."""

    id: str
    name: str
    provider: ProviderKind
    provider_name: str
    model: str
    has_api_key: bool
    api_key_hint: str | None
    is_active: bool


class ProviderConfigListResponse(BaseModel):
    configs: list[ProviderConfigInfo]
    active_id: str | None
    total: int


class SetActiveRequest(BaseModel):
    id: str


def to_info(config: ProviderConfig, active_id: str | None) -> ProviderConfigInfo:
    key = config.api_key
    return ProviderConfigInfo(
        id=config.id,
        name=config.name,
        provider=config.provider,
        provider_name=config.provider.display_name,
        model=config.model,
        has_api_key=bool(key),
        api_key_hint=f"...{key[-4:]}" if len(key) >= 8 else None,
        is_active=config.id == active_id,
    )

"""
PromptForge configuration.

Resolution order (highest priority first):
  1. Environment variables   (PROMPTFORGE_STORAGE__BACKEND=redis ...)
  2. YAML config file        (promptforge.yaml)
  3. Defaults defined here
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(StrEnum):
    JSON = "json"
    CONSOLE = "console"


class StorageBackend(StrEnum):
    MEMORY = "memory"
    REDIS = "redis"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1


class LoggingSettings(BaseModel):
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON


class StorageSettings(BaseModel):
    backend: StorageBackend = StorageBackend.MEMORY
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "promptforge:"


class ProviderEndpoints(BaseModel):
    """Base URLs for each provider family."""

    gemini_base: str = "https://generativelanguage.googleapis.com"
    openai: str = "https://api.openai.com/v1/chat/completions"
    grok: str = "https://api.x.ai/v1/chat/completions"
    deepseek: str = "https://api.deepseek.com/v1/chat/completions"
    anthropic_base: str = "https://api.anthropic.com"
    request_timeout_seconds: float = 120.0
    connect_timeout_seconds: float = 10.0


class SpeechSettings(BaseModel):
    model: str = "gemini-2.5-flash-preview-tts"
    voice: str = "Kore"
    sample_rate: int = 24000
    channels: int = 1


class VideoSettings(BaseModel):
    model: str = "veo-3.1-fast-generate-preview"
    resolution: str = "720p"
    aspect_ratio: str = "16:9"
    poll_interval_seconds: float = 10.0
    # 0 disables the cap; the job then polls until done or cancelled
    max_polls: int = 0
    media_store_capacity: int = 32


class Settings(BaseSettings):
    """Root settings: merges env vars, YAML and defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PROMPTFORGE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    env: str = "development"
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    providers: ProviderEndpoints = Field(default_factory=ProviderEndpoints)
    speech: SpeechSettings = Field(default_factory=SpeechSettings)
    video: VideoSettings = Field(default_factory=VideoSettings)

    # Convenience alias for a flat env var
    log_level: str = ""

    def model_post_init(self, __context: Any) -> None:
        if self.log_level:
            self.logging.level = LogLevel(self.log_level.upper())


def _load_yaml_config() -> dict[str, Any]:
    """Load YAML config file if it exists."""
    search_paths = [
        Path("promptforge.yaml"),
        Path("config/promptforge.yaml"),
        Path("/etc/promptforge/promptforge.yaml"),
    ]
    for path in search_paths:
        if path.is_file():
            with open(path) as f:
                return yaml.safe_load(f) or {}
    return {}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    yaml_data = _load_yaml_config()
    return Settings(**yaml_data)

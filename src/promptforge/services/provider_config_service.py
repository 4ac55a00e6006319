"""
Per-user provider configurations and the active-config pointer.

API keys are Fernet-encrypted before they reach the store. Rules carried
over from the UI:
  - saving a new config, or any config while none is active, activates it
  - deleting the active config activates the first remaining one (or none)
"""

from __future__ import annotations

import json
import uuid

import structlog

from promptforge.common.crypto import decrypt_value, encrypt_value
from promptforge.common.errors import NotFoundError, ValidationError
from promptforge.schemas.providers import (
    DEFAULT_MODELS,
    ProviderConfig,
    ProviderConfigRequest,
)
from promptforge.services.storage import KeyValueStore

logger = structlog.stdlib.get_logger()


class ProviderConfigService:
    def __init__(self, store: KeyValueStore, user_id: str) -> None:
        self.store = store
        self.user_id = user_id

    @property
    def configs_key(self) -> str:
        return f"provider_configs:{self.user_id}"

    @property
    def active_key(self) -> str:
        return f"active_config:{self.user_id}"

    # Persistence

    async def list_configs(self) -> list[ProviderConfig]:
        raw = await self.store.get(self.configs_key)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
            configs = []
            for entry in entries:
                encrypted = entry.pop("api_key_encrypted", "")
                configs.append(
                    ProviderConfig(**entry, api_key=decrypt_value(encrypted) if encrypted else "")
                )
            return configs
        except (ValueError, TypeError, KeyError) as e:
            await logger.aerror("provider_configs.load_failed", user_id=self.user_id, error=str(e))
            return []

    async def _save_configs(self, configs: list[ProviderConfig]) -> None:
        entries = []
        for config in configs:
            entry = config.model_dump(mode="json", exclude={"api_key"})
            entry["api_key_encrypted"] = encrypt_value(config.api_key) if config.api_key else ""
            entries.append(entry)
        await self.store.set(self.configs_key, json.dumps(entries))

    async def get_active_id(self) -> str | None:
        return await self.store.get(self.active_key)

    async def _set_active_id(self, config_id: str | None) -> None:
        if config_id is None:
            await self.store.remove(self.active_key)
        else:
            await self.store.set(self.active_key, config_id)

    # Queries

    async def get(self, config_id: str) -> ProviderConfig:
        for config in await self.list_configs():
            if config.id == config_id:
                return config
        raise NotFoundError(f"Provider config not found: {config_id}")

    async def get_active(self) -> ProviderConfig:
        """The active config; falls back to the first config when the pointer is unset."""
        configs = await self.list_configs()
        if not configs:
            raise NotFoundError("No active API provider selected.")
        active_id = await self.get_active_id()
        for config in configs:
            if config.id == active_id:
                return config
        return configs[0]

    async def resolve(self, config_id: str | None) -> ProviderConfig:
        return await self.get(config_id) if config_id else await self.get_active()

    # Commands

    async def save(self, request: ProviderConfigRequest) -> ProviderConfig:
        configs = await self.list_configs()
        existing_index = next(
            (i for i, c in enumerate(configs) if request.id and c.id == request.id), None
        )

        api_key = request.api_key.strip()
        if existing_index is not None and not api_key:
            # Editing without re-entering the key keeps the stored one
            api_key = configs[existing_index].api_key

        model = (request.model or "").strip() or DEFAULT_MODELS[request.provider]
        config = ProviderConfig(
            id=request.id or f"cfg-{uuid.uuid4().hex[:12]}",
            name=request.name.strip(),
            provider=request.provider,
            api_key=api_key,
            model=model,
        )
        if not config.name:
            raise ValidationError("Provider name is required.")

        if existing_index is None:
            configs.append(config)
        else:
            configs[existing_index] = config
        await self._save_configs(configs)

        active_id = await self.get_active_id()
        if not active_id or existing_index is None:
            await self._set_active_id(config.id)

        await logger.ainfo(
            "provider_configs.saved",
            user_id=self.user_id,
            config_id=config.id,
            provider=config.provider.value,
            created=existing_index is None,
        )
        return config

    async def delete(self, config_id: str) -> None:
        configs = await self.list_configs()
        remaining = [c for c in configs if c.id != config_id]
        if len(remaining) == len(configs):
            raise NotFoundError(f"Provider config not found: {config_id}")
        await self._save_configs(remaining)

        if await self.get_active_id() == config_id:
            await self._set_active_id(remaining[0].id if remaining else None)

    async def set_active(self, config_id: str) -> ProviderConfig:
        config = await self.get(config_id)
        await self._set_active_id(config.id)
        return config

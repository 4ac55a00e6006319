"""Tests for provider config persistence and the active-config pointer."""

from __future__ import annotations

import json

import pytest

from promptforge.common.errors import NotFoundError
from promptforge.schemas.providers import DEFAULT_MODELS, ProviderConfigRequest, ProviderKind
from promptforge.services.provider_config_service import ProviderConfigService
from promptforge.services.storage import InMemoryKeyValueStore


def _request(name: str, provider: str = "openai", **kwargs) -> ProviderConfigRequest:
    return ProviderConfigRequest(name=name, provider=provider, api_key=kwargs.pop("api_key", "sk-1"), **kwargs)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def service(store: InMemoryKeyValueStore) -> ProviderConfigService:
    return ProviderConfigService(store, "user-1")


@pytest.mark.unit
class TestProviderConfigService:
    async def test_first_save_becomes_active(self, service: ProviderConfigService) -> None:
        config = await service.save(_request("Work"))

        assert await service.get_active_id() == config.id
        assert (await service.get_active()).id == config.id
        assert config.model == DEFAULT_MODELS[ProviderKind.OPENAI]

    async def test_new_config_becomes_active(self, service: ProviderConfigService) -> None:
        await service.save(_request("First"))
        second = await service.save(_request("Second", provider="gemini"))
        assert await service.get_active_id() == second.id

    async def test_editing_keeps_active_pointer(self, service: ProviderConfigService) -> None:
        first = await service.save(_request("First"))
        second = await service.save(_request("Second"))

        await service.save(_request("First renamed", id=first.id, api_key=""))

        assert await service.get_active_id() == second.id
        edited = await service.get(first.id)
        assert edited.name == "First renamed"
        # Blank key on edit keeps the stored key
        assert edited.api_key == "sk-1"

    async def test_delete_active_falls_back_to_first_remaining(
        self, service: ProviderConfigService
    ) -> None:
        first = await service.save(_request("First"))
        second = await service.save(_request("Second"))

        await service.delete(second.id)
        assert await service.get_active_id() == first.id

        await service.delete(first.id)
        assert await service.get_active_id() is None
        with pytest.raises(NotFoundError, match="No active API provider selected."):
            await service.get_active()

    async def test_delete_unknown(self, service: ProviderConfigService) -> None:
        with pytest.raises(NotFoundError):
            await service.delete("cfg-missing")

    async def test_set_active_and_resolve(self, service: ProviderConfigService) -> None:
        first = await service.save(_request("First"))
        await service.save(_request("Second"))

        await service.set_active(first.id)
        assert (await service.resolve(None)).id == first.id
        with pytest.raises(NotFoundError):
            await service.resolve("cfg-missing")

    async def test_api_key_encrypted_at_rest(
        self, service: ProviderConfigService, store: InMemoryKeyValueStore
    ) -> None:
        await service.save(_request("Secret", api_key="sk-very-secret"))

        raw = await store.get("provider_configs:user-1")
        assert raw is not None
        assert "sk-very-secret" not in raw
        [entry] = json.loads(raw)
        assert "api_key" not in entry
        assert entry["api_key_encrypted"]

        [config] = await service.list_configs()
        assert config.api_key == "sk-very-secret"

    async def test_configs_are_per_user(self, store: InMemoryKeyValueStore) -> None:
        await ProviderConfigService(store, "alice").save(_request("Alice"))
        assert await ProviderConfigService(store, "bob").list_configs() == []

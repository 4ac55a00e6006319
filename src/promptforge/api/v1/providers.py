"""Provider configuration endpoints. API keys are write-only."""

from __future__ import annotations

from fastapi import APIRouter, status

from promptforge.api.deps import ProviderConfigs
from promptforge.schemas.providers import (
    ProviderConfigInfo,
    ProviderConfigListResponse,
    ProviderConfigRequest,
    SetActiveRequest,
    to_info,
)

router = APIRouter(prefix="/providers", tags=["Providers"])


@router.get("", response_model=ProviderConfigListResponse, summary="List provider configs")
async def list_providers(service: ProviderConfigs) -> ProviderConfigListResponse:
    configs = await service.list_configs()
    active_id = await service.get_active_id()
    return ProviderConfigListResponse(
        configs=[to_info(c, active_id) for c in configs],
        active_id=active_id,
        total=len(configs),
    )


@router.post(
    "",
    response_model=ProviderConfigInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create a provider config",
)
async def create_provider(body: ProviderConfigRequest, service: ProviderConfigs) -> ProviderConfigInfo:
    config = await service.save(body.model_copy(update={"id": None}))
    return to_info(config, await service.get_active_id())


# Static paths before /{config_id}
@router.get("/active", response_model=ProviderConfigInfo, summary="Active provider config")
async def get_active_provider(service: ProviderConfigs) -> ProviderConfigInfo:
    config = await service.get_active()
    return to_info(config, config.id)


@router.put("/active", response_model=ProviderConfigInfo, summary="Select the active config")
async def set_active_provider(body: SetActiveRequest, service: ProviderConfigs) -> ProviderConfigInfo:
    config = await service.set_active(body.id)
    return to_info(config, config.id)


@router.put("/{config_id}", response_model=ProviderConfigInfo, summary="Update a provider config")
async def update_provider(
    config_id: str, body: ProviderConfigRequest, service: ProviderConfigs
) -> ProviderConfigInfo:
    await service.get(config_id)
    config = await service.save(body.model_copy(update={"id": config_id}))
    return to_info(config, await service.get_active_id())


@router.delete(
    "/{config_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a provider config",
)
async def delete_provider(config_id: str, service: ProviderConfigs) -> None:
    await service.delete(config_id)

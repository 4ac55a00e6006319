"""Template catalog endpoints: built-ins plus the user's custom templates."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from promptforge.api.deps import CurrentUser, Templates
from promptforge.core.templates import catalog
from promptforge.core.templates.defaults import (
    BUILTIN_TEMPLATES,
    FORMAT_OPTIONS,
    STYLE_OPTIONS,
    TONE_OPTIONS,
    default_inputs,
)
from promptforge.schemas.templates import (
    PromptInputs,
    ReorderRequest,
    Template,
    TemplateDraft,
    TemplateListResponse,
    TemplateOptionsResponse,
    TemplateUpdate,
)

router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get("", response_model=TemplateListResponse, summary="List templates")
async def list_templates(
    service: Templates,
    search: str | None = Query(default=None, max_length=200),
) -> TemplateListResponse:
    builtin = list(BUILTIN_TEMPLATES)
    custom = await service.list_custom()
    if search:
        builtin = catalog.filter_templates(builtin, search)
        custom = catalog.filter_templates(custom, search)
    return TemplateListResponse(builtin=builtin, custom=custom, total=len(builtin) + len(custom))


@router.get("/options", response_model=TemplateOptionsResponse, summary="Tone/style/format choices")
async def template_options(user: CurrentUser) -> TemplateOptionsResponse:
    return TemplateOptionsResponse(
        tones=list(TONE_OPTIONS),
        styles=list(STYLE_OPTIONS),
        formats=list(FORMAT_OPTIONS),
    )


@router.post(
    "",
    response_model=Template,
    status_code=status.HTTP_201_CREATED,
    summary="Create a custom template",
)
async def create_template(body: TemplateDraft, service: Templates) -> Template:
    return await service.create(body)


@router.post("/reorder", response_model=list[Template], summary="Reorder custom templates")
async def reorder_templates(body: ReorderRequest, service: Templates) -> list[Template]:
    return await service.reorder(body.ordered_ids)


@router.put("/{template_id}", response_model=Template, summary="Update a custom template")
async def update_template(template_id: str, body: TemplateUpdate, service: Templates) -> Template:
    return await service.update(template_id, body)


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a custom template",
)
async def delete_template(template_id: str, service: Templates) -> None:
    await service.delete(template_id)


@router.get(
    "/{template_id}/inputs",
    response_model=PromptInputs,
    response_model_by_alias=True,
    summary="Default inputs for a template",
)
async def template_inputs(template_id: str, service: Templates) -> PromptInputs:
    return default_inputs(await service.get(template_id))

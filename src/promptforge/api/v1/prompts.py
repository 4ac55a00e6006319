"""POST /v1/prompts/assemble: render a structured prompt from a template and inputs."""

from __future__ import annotations

from fastapi import APIRouter

from promptforge.api.deps import Templates
from promptforge.core.prompts.assembler import assemble, unfilled_variables
from promptforge.schemas.templates import AssembleRequest, AssembleResponse

router = APIRouter(prefix="/prompts", tags=["Prompts"])


@router.post("/assemble", response_model=AssembleResponse, summary="Assemble a prompt")
async def assemble_prompt(body: AssembleRequest, service: Templates) -> AssembleResponse:
    template = body.template if body.template is not None else await service.get(body.template_id)
    inputs = body.inputs.for_template(template)
    return AssembleResponse(
        prompt=assemble(inputs, template),
        template_id=template.id,
        unfilled=unfilled_variables(inputs, template),
    )

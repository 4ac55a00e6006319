"""Template, variable and prompt-input schemas."""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_KEY_STRIP = re.compile(r"[^A-Z0-9_]")


def normalize_key(raw: str) -> str:
    """Uppercase a variable key and drop anything outside [A-Z0-9_]."""
    return _KEY_STRIP.sub("", raw.upper())


class VariableType(StrEnum):
    SINGLE_LINE = "input"
    MULTI_LINE = "textarea"


class TemplateVariable(BaseModel):
    key: str
    label: str
    placeholder: str = ""
    type: VariableType = VariableType.SINGLE_LINE

    @field_validator("key")
    @classmethod
    def _normalize_key(cls, value: str) -> str:
        key = normalize_key(value)
        if not key:
            raise ValueError("Variable key must contain at least one letter, digit or underscore")
        return key


class Template(BaseModel):
    id: str
    name: str
    description: str = ""
    category: str | None = None
    base_prompt: str
    variables: list[TemplateVariable] = Field(default_factory=list)
    created_at: int | None = None

    @model_validator(mode="after")
    def _unique_keys(self) -> Template:
        seen: set[str] = set()
        for variable in self.variables:
            if variable.key in seen:
                raise ValueError(f"Duplicate variable key: {variable.key}")
            seen.add(variable.key)
        return self

    @property
    def variable_keys(self) -> list[str]:
        return [v.key for v in self.variables]


class TemplateDraft(BaseModel):
    """User-supplied fields of a new template (id and created_at are assigned)."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: str | None = None
    base_prompt: str = Field(..., min_length=1)
    variables: list[TemplateVariable] = Field(default_factory=list)

    @field_validator("name", "base_prompt")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("category")
    @classmethod
    def _trim_category(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TemplateUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    category: str | None = None
    base_prompt: str | None = None
    variables: list[TemplateVariable] | None = None


class PromptInputs(BaseModel):
    """
    Free-form values feeding the assembler.

    The eight stylistic fields are fixed; template variable values live in
    ``variables`` keyed by variable key.
    """

    model_config = ConfigDict(populate_by_name=True)

    persona: str = ""
    audience: str = ""
    tone: str = ""
    style: str = ""
    format: str = ""
    length: str = ""
    context: str = ""
    negative_constraints: str = Field("", alias="negativeConstraints")
    variables: dict[str, str] = Field(default_factory=dict)

    def value_for(self, key: str) -> str:
        return self.variables.get(key, "")

    def for_template(self, template: Template) -> PromptInputs:
        """Copy with exactly one (possibly empty) entry per template variable."""
        values = {key: self.variables.get(key, "") for key in template.variable_keys}
        return self.model_copy(update={"variables": values})

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> PromptInputs:
        """Build inputs from a flat mapping of field name → value."""
        fixed = set(cls.model_fields) - {"variables"}
        payload: dict[str, Any] = {}
        variables: dict[str, str] = dict(data.get("variables") or {})
        for name, value in data.items():
            if name == "variables":
                continue
            if name in fixed or name == "negativeConstraints":
                payload[name] = "" if value is None else str(value)
            else:
                variables[name] = "" if value is None else str(value)
        return cls(**payload, variables=variables)


class AssembleRequest(BaseModel):
    template_id: str | None = None
    template: Template | None = None
    inputs: PromptInputs = Field(default_factory=PromptInputs)

    @model_validator(mode="after")
    def _one_template_source(self) -> AssembleRequest:
        if (self.template_id is None) == (self.template is None):
            raise ValueError("Provide exactly one of template_id or template")
        return self


class AssembleResponse(BaseModel):
    prompt: str
    template_id: str
    unfilled: list[str]


class ReorderRequest(BaseModel):
    ordered_ids: list[str]


class TemplateListResponse(BaseModel):
    builtin: list[Template]
    custom: list[Template]
    total: int


class TemplateOptionsResponse(BaseModel):
    tones: list[str]
    styles: list[str]
    formats: list[str]

"""
In-memory template collection operations.

Every function takes a collection snapshot and returns a new list; the input
is never mutated. Persisting the result is the caller's job.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Iterable, Sequence

from pydantic import ValidationError as PydanticValidationError

from promptforge.common.errors import NotFoundError, ValidationError
from promptforge.schemas.templates import Template, TemplateDraft, TemplateUpdate

UNCATEGORIZED = "Uncategorized"


class SortBy(StrEnum):
    CATEGORY = "category"
    NAME = "name"
    DATE = "date"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


def _build(data: dict) -> Template:
    try:
        return Template.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid template", details={"errors": e.errors(include_url=False, include_context=False)}
        ) from e


def _index_of(templates: Sequence[Template], template_id: str) -> int:
    for i, template in enumerate(templates):
        if template.id == template_id:
            return i
    raise NotFoundError(f"Template not found: {template_id}")


def create_template(
    templates: Sequence[Template], draft: TemplateDraft, now_ms: int
) -> tuple[list[Template], Template]:
    """Append a new custom template built from ``draft``."""
    template_id = f"custom-{now_ms}"
    suffix = 1
    existing = {t.id for t in templates}
    while template_id in existing:
        template_id = f"custom-{now_ms}-{suffix}"
        suffix += 1

    template = _build({"id": template_id, "created_at": now_ms, **draft.model_dump()})
    return [*templates, template], template


def update_template(
    templates: Sequence[Template], template_id: str, changes: TemplateUpdate
) -> tuple[list[Template], Template]:
    index = _index_of(templates, template_id)
    data = templates[index].model_dump()
    data.update(changes.model_dump(exclude_unset=True))
    # Re-validate so key normalization and uniqueness still hold
    updated = _build(data)

    result = list(templates)
    result[index] = updated
    return result, updated


def delete_template(templates: Sequence[Template], template_id: str) -> list[Template]:
    _index_of(templates, template_id)
    return [t for t in templates if t.id != template_id]


def reorder_templates(templates: Sequence[Template], ordered_ids: Sequence[str]) -> list[Template]:
    """Return the collection in the order given by ``ordered_ids`` (a permutation)."""
    by_id = {t.id: t for t in templates}
    if len(ordered_ids) != len(by_id) or set(ordered_ids) != set(by_id):
        raise ValidationError(
            "Reorder must list every template id exactly once",
            details={"expected": sorted(by_id), "received": list(ordered_ids)},
        )
    return [by_id[i] for i in ordered_ids]


def move_template(templates: Sequence[Template], template_id: str, new_index: int) -> list[Template]:
    index = _index_of(templates, template_id)
    result = list(templates)
    template = result.pop(index)
    new_index = max(0, min(new_index, len(result)))
    result.insert(new_index, template)
    return result


def merge_catalog(defaults: Iterable[Template], custom: Iterable[Template]) -> list[Template]:
    """Built-ins first, then custom templates."""
    return [*defaults, *custom]


def find_template(
    templates: Sequence[Template], template_id: str | None, fallback: Template | None = None
) -> Template:
    """Look up a template by id, falling back to ``fallback`` when given."""
    for template in templates:
        if template.id == template_id:
            return template
    if fallback is not None:
        return fallback
    raise NotFoundError(f"Template not found: {template_id}")


def filter_templates(templates: Sequence[Template], term: str) -> list[Template]:
    """Case-insensitive match on name or description."""
    needle = term.lower()
    return [t for t in templates if needle in t.name.lower() or needle in t.description.lower()]


def group_by_category(
    templates: Sequence[Template],
    sort_by: SortBy = SortBy.CATEGORY,
    order: SortOrder = SortOrder.ASC,
) -> dict[str, list[Template]]:
    """
    Group templates by category, ordering both groups and members.

    Sorting by category orders the group names and keeps members in
    collection order. Sorting by name or date orders members within each
    group; groups are then alphabetical with Uncategorized last.
    """
    reverse = order == SortOrder.DESC

    grouped: dict[str, list[Template]] = {}
    for template in templates:
        grouped.setdefault(template.category or UNCATEGORIZED, []).append(template)

    if sort_by == SortBy.NAME:
        for members in grouped.values():
            members.sort(key=lambda t: t.name.lower(), reverse=reverse)
    elif sort_by == SortBy.DATE:
        for members in grouped.values():
            members.sort(key=lambda t: t.created_at or 0, reverse=reverse)

    if sort_by == SortBy.CATEGORY:
        names = sorted(grouped, key=str.lower, reverse=reverse)
    else:
        names = sorted(grouped, key=lambda c: (c == UNCATEGORIZED, c.lower()))

    return {name: grouped[name] for name in names}

"""Per-user custom template persistence on top of the key-value store."""

from __future__ import annotations

import json
import time

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from promptforge.core.templates import catalog
from promptforge.core.templates.defaults import BUILTIN_TEMPLATES
from promptforge.schemas.templates import Template, TemplateDraft, TemplateUpdate
from promptforge.services.storage import KeyValueStore

logger = structlog.stdlib.get_logger()

_TEMPLATE_LIST = TypeAdapter(list[Template])


def _now_ms() -> int:
    return int(time.time() * 1000)


class TemplateService:
    def __init__(self, store: KeyValueStore, user_id: str) -> None:
        self.store = store
        self.user_id = user_id

    @property
    def storage_key(self) -> str:
        return f"templates:{self.user_id}"

    async def list_custom(self) -> list[Template]:
        raw = await self.store.get(self.storage_key)
        if not raw:
            return []
        try:
            templates = _TEMPLATE_LIST.validate_json(raw)
        except PydanticValidationError as e:
            await logger.aerror("templates.load_failed", user_id=self.user_id, error=str(e))
            return []
        # Older entries may predate created_at; 0 keeps date sorting stable
        return [
            t if t.created_at is not None else t.model_copy(update={"created_at": 0})
            for t in templates
        ]

    async def save_custom(self, templates: list[Template]) -> None:
        payload = json.dumps([t.model_dump(mode="json") for t in templates])
        await self.store.set(self.storage_key, payload)

    async def list_all(self) -> list[Template]:
        return catalog.merge_catalog(BUILTIN_TEMPLATES, await self.list_custom())

    async def get(self, template_id: str) -> Template:
        return catalog.find_template(await self.list_all(), template_id)

    async def create(self, draft: TemplateDraft) -> Template:
        templates, created = catalog.create_template(await self.list_custom(), draft, _now_ms())
        await self.save_custom(templates)
        await logger.ainfo("templates.created", user_id=self.user_id, template_id=created.id)
        return created

    async def update(self, template_id: str, changes: TemplateUpdate) -> Template:
        templates, updated = catalog.update_template(await self.list_custom(), template_id, changes)
        await self.save_custom(templates)
        return updated

    async def delete(self, template_id: str) -> None:
        templates = catalog.delete_template(await self.list_custom(), template_id)
        await self.save_custom(templates)
        await logger.ainfo("templates.deleted", user_id=self.user_id, template_id=template_id)

    async def reorder(self, ordered_ids: list[str]) -> list[Template]:
        templates = catalog.reorder_templates(await self.list_custom(), ordered_ids)
        await self.save_custom(templates)
        return templates

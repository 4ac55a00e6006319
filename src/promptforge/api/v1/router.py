"""V1 API router."""

from fastapi import APIRouter

from promptforge.api.v1.auth import router as auth_router
from promptforge.api.v1.generate import router as generate_router
from promptforge.api.v1.media import router as media_router
from promptforge.api.v1.prompts import router as prompts_router
from promptforge.api.v1.providers import router as providers_router
from promptforge.api.v1.templates import router as templates_router

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(auth_router)
v1_router.include_router(templates_router)
v1_router.include_router(prompts_router)
v1_router.include_router(providers_router)
v1_router.include_router(generate_router)
v1_router.include_router(media_router)

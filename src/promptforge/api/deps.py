"""
FastAPI dependency injection.

Central place for all shared dependencies used across routes. Long-lived
resources (store, dispatcher, media store, identity provider) are created by
the app lifespan and read from ``request.app.state``.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, Header, Request

from promptforge.common.errors import AuthenticationError
from promptforge.config import Settings, get_settings
from promptforge.core.media.store import MediaStore
from promptforge.providers.dispatcher import ProviderDispatcher
from promptforge.schemas.auth import UserIdentity
from promptforge.services.identity import IdentityProvider
from promptforge.services.provider_config_service import ProviderConfigService
from promptforge.services.storage import KeyValueStore
from promptforge.services.template_service import TemplateService

logger = structlog.stdlib.get_logger()


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store


def get_dispatcher(request: Request) -> ProviderDispatcher:
    return request.app.state.dispatcher


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


# Type aliases for cleaner signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Store = Annotated[KeyValueStore, Depends(get_store)]
Dispatcher = Annotated[ProviderDispatcher, Depends(get_dispatcher)]
Media = Annotated[MediaStore, Depends(get_media_store)]
Identity = Annotated[IdentityProvider, Depends(get_identity)]


def bearer_token(authorization: Annotated[str | None, Header()] = None) -> str:
    """
    Extract the session token.

    Accepts:
        - Authorization: Bearer pf_sess_xxx
    """
    if not authorization:
        raise AuthenticationError("Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid Authorization header format. Expected: Bearer <token>")
    return parts[1].strip()


SessionToken = Annotated[str, Depends(bearer_token)]


async def get_current_user(token: SessionToken, identity: Identity) -> UserIdentity:
    user = await identity.current_user(token)
    if user is None:
        raise AuthenticationError("Invalid or expired session")
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


CurrentUser = Annotated[UserIdentity, Depends(get_current_user)]


def get_template_service(user: CurrentUser, store: Store) -> TemplateService:
    return TemplateService(store, user.id)


def get_provider_config_service(user: CurrentUser, store: Store) -> ProviderConfigService:
    return ProviderConfigService(store, user.id)


Templates = Annotated[TemplateService, Depends(get_template_service)]
ProviderConfigs = Annotated[ProviderConfigService, Depends(get_provider_config_service)]

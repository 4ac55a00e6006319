"""
Identity provider: register, login, logout and session lookup.

Only the ``IdentityProvider`` protocol is used by the API layer.
``LocalIdentityProvider`` keeps accounts and sessions in the key-value store:

    user:{email}            -> {"id", "email", "password_hash", "created_at"}
    session:{sha256(token)} -> user id + email
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Protocol, runtime_checkable

import structlog

from promptforge.common.crypto import (
    generate_session_token,
    hash_password,
    hash_token,
    verify_password,
)
from promptforge.common.errors import AuthenticationError, ConflictError, ValidationError
from promptforge.schemas.auth import UserIdentity
from promptforge.services.storage import KeyValueStore

logger = structlog.stdlib.get_logger()


@runtime_checkable
class IdentityProvider(Protocol):
    async def register(self, email: str, password: str) -> tuple[str, UserIdentity]: ...

    async def login(self, email: str, password: str) -> tuple[str, UserIdentity]: ...

    async def logout(self, token: str) -> None: ...

    async def current_user(self, token: str) -> UserIdentity | None: ...


class LocalIdentityProvider:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    @staticmethod
    def _user_key(email: str) -> str:
        return f"user:{email.strip().lower()}"

    @staticmethod
    def _session_key(token: str) -> str:
        return f"session:{hash_token(token)}"

    async def _open_session(self, user: UserIdentity) -> str:
        token = generate_session_token()
        await self.store.set(self._session_key(token), user.model_dump_json())
        return token

    async def register(self, email: str, password: str) -> tuple[str, UserIdentity]:
        email = email.strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required.")

        key = self._user_key(email)
        if await self.store.get(key) is not None:
            raise ConflictError("An account with this email already exists.")

        user = UserIdentity(id=f"user-{uuid.uuid4().hex[:16]}", email=email)
        record = {
            "id": user.id,
            "email": user.email,
            "password_hash": hash_password(password),
            "created_at": int(time.time() * 1000),
        }
        await self.store.set(key, json.dumps(record))
        await logger.ainfo("auth.registered", user_id=user.id)
        return await self._open_session(user), user

    async def login(self, email: str, password: str) -> tuple[str, UserIdentity]:
        raw = await self.store.get(self._user_key(email))
        if raw is None:
            raise AuthenticationError("Invalid email or password.")

        record = json.loads(raw)
        if not verify_password(password, record.get("password_hash", "")):
            await logger.ainfo("auth.login_failed", user_id=record.get("id"))
            raise AuthenticationError("Invalid email or password.")

        user = UserIdentity(id=record["id"], email=record["email"])
        await logger.ainfo("auth.login", user_id=user.id)
        return await self._open_session(user), user

    async def logout(self, token: str) -> None:
        await self.store.remove(self._session_key(token))

    async def current_user(self, token: str) -> UserIdentity | None:
        raw = await self.store.get(self._session_key(token))
        if raw is None:
            return None
        return UserIdentity.model_validate_json(raw)

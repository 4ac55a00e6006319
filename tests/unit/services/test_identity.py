"""Tests for the local identity provider."""

from __future__ import annotations

import pytest

from promptforge.common.crypto import hash_password, verify_password
from promptforge.common.errors import AuthenticationError, ConflictError
from promptforge.services.identity import IdentityProvider, LocalIdentityProvider
from promptforge.services.storage import InMemoryKeyValueStore


@pytest.fixture
def identity() -> LocalIdentityProvider:
    return LocalIdentityProvider(InMemoryKeyValueStore())


@pytest.mark.unit
class TestLocalIdentityProvider:
    def test_satisfies_protocol(self, identity: LocalIdentityProvider) -> None:
        assert isinstance(identity, IdentityProvider)

    async def test_register_and_lookup(self, identity: LocalIdentityProvider) -> None:
        token, user = await identity.register("Writer@Example.com", "s3cret!")

        assert user.email == "writer@example.com"
        assert await identity.current_user(token) == user

    async def test_duplicate_email(self, identity: LocalIdentityProvider) -> None:
        await identity.register("a@example.com", "pw1234")
        with pytest.raises(ConflictError, match="An account with this email already exists."):
            await identity.register("A@example.com", "other")

    async def test_login(self, identity: LocalIdentityProvider) -> None:
        _, registered = await identity.register("a@example.com", "pw1234")
        token, user = await identity.login("a@example.com", "pw1234")
        assert user == registered
        assert await identity.current_user(token) == registered

    @pytest.mark.parametrize(
        ("email", "password"), [("a@example.com", "wrong"), ("nobody@example.com", "pw1234")]
    )
    async def test_bad_credentials(
        self, identity: LocalIdentityProvider, email: str, password: str
    ) -> None:
        await identity.register("a@example.com", "pw1234")
        with pytest.raises(AuthenticationError, match="Invalid email or password."):
            await identity.login(email, password)

    async def test_logout_ends_session(self, identity: LocalIdentityProvider) -> None:
        token, _ = await identity.register("a@example.com", "pw1234")
        await identity.logout(token)
        assert await identity.current_user(token) is None


@pytest.mark.unit
class TestPasswordHashing:
    def test_roundtrip_and_salt(self) -> None:
        first = hash_password("pw", iterations=1000)
        second = hash_password("pw", iterations=1000)
        assert first != second
        assert verify_password("pw", first)
        assert not verify_password("nope", first)

    def test_garbage_hash(self) -> None:
        assert not verify_password("pw", "not-a-hash")

"""Account endpoints: register, login, logout, current user."""

from __future__ import annotations

from fastapi import APIRouter, status

from promptforge.api.deps import CurrentUser, Identity, SessionToken
from promptforge.schemas.auth import LoginRequest, RegisterRequest, SessionResponse, UserIdentity

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account and open a session",
)
async def register(body: RegisterRequest, identity: Identity) -> SessionResponse:
    token, user = await identity.register(body.email, body.password)
    return SessionResponse(token=token, user=user)


@router.post("/login", response_model=SessionResponse, summary="Open a session")
async def login(body: LoginRequest, identity: Identity) -> SessionResponse:
    token, user = await identity.login(body.email, body.password)
    return SessionResponse(token=token, user=user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Close the session")
async def logout(token: SessionToken, identity: Identity) -> None:
    await identity.logout(token)


@router.get("/me", response_model=UserIdentity, summary="Current user")
async def me(user: CurrentUser) -> UserIdentity:
    return user

"""Account and session schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class UserIdentity(BaseModel):
    id: str
    email: str


class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=1024)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value


class RegisterRequest(CredentialsRequest):
    password: str = Field(..., min_length=6, max_length=1024)


class LoginRequest(CredentialsRequest):
    pass


class SessionResponse(BaseModel):
    """Returned once on login/register; the token is the bearer credential."""

    token: str
    user: UserIdentity

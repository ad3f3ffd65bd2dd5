"""Pydantic schemas for registration, login and user listing.

Learn: Pydantic v2 models validate request/response data. UserRead
is built from the ORM object and has no password field at all, so a
hash can never leak through a response.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from diary_api.auth.password import MAX_PASSWORD_BYTES


class Credentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(
                f"password must be at most {MAX_PASSWORD_BYTES} bytes (UTF-8)"
            )
        return value


class RegisterRequest(Credentials):
    pass


class LoginRequest(Credentials):
    pass


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    id: uuid.UUID
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}


class IdentityRead(BaseModel):
    """What the bearer token says about the caller."""

    user_id: str
    username: str | None = None
    permissions: list[str] = []

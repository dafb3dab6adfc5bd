"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


class RegisterRequest(BaseModel):
    username: str = Field(..., max_length=150)
    password: str = Field(..., max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        return value


class LoginRequest(BaseModel):
    username: str = Field(..., max_length=150)
    password: str = Field(..., max_length=MAX_PASSWORD_BYTES)


class UserResponse(BaseModel):
    id: UUID
    username: str


class LoginResponse(BaseModel):
    user: UserResponse

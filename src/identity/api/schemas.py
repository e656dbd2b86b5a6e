"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field

from identity.user.user import UserRole, UserStatus
from shared.schemas import CamelModel

# --- Request Schemas ---


class RegisterRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "ada@example.com",
                    "password": "s3cret-pass",
                    "name": "Ada Lovelace",
                    "username": "ada",
                }
            ]
        }
    }

    email: EmailStr = Field(..., max_length=254)
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1, max_length=100)
    username: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=1000)


class LoginRequest(CamelModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "ada@example.com", "password": "s3cret-pass"}]}}

    email: EmailStr = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=72)


class UpdateUserRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    username: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=1000)


class ChangePasswordRequest(CamelModel):
    old_password: str = Field(..., min_length=1, max_length=72)
    new_password: str = Field(..., min_length=8, max_length=72)


class BanUserRequest(CamelModel):
    reason: str = Field(..., min_length=1, max_length=255)


# --- Response Schemas ---


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    username: str | None = None
    description: str | None = None
    profile_image: str
    banner_image: str | None = None
    email_verified: bool
    status: UserStatus
    role: UserRole
    banned_reason: str | None = None
    created_at: datetime | None = None


class LoginResponse(CamelModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"

"""Pydantic request/response schemas for the Users API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["CUSTOMER", "SHOPKEEPER", "ADMIN"]


class CreateUserRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., max_length=128)
    full_name: str | None = Field(None, max_length=150)
    phone: str | None = Field(None, max_length=20)
    role: Role = "CUSTOMER"


class UpdateUserRequest(BaseModel):
    email: str | None = Field(None, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str | None = Field(None, max_length=128)
    full_name: str | None = Field(None, max_length=150)
    phone: str | None = Field(None, max_length=20)
    role: Role | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    full_name: str | None = None
    phone: str | None = None
    role: str
    is_active: bool
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> UserResponse:
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            phone=user.phone,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
        )

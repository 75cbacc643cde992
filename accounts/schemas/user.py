from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator, model_validator

from accounts.schemas.common import ApiModel, as_utc, iso_date, normalize_email, trimmed_url

USERNAME_PATTERN = r"^[a-zA-Z0-9._-]+$"


class UserCreate(ApiModel):
    username: str = Field(min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    avatar_url: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return normalize_email(v)

    @field_validator("avatar_url", mode="before")
    @classmethod
    def _avatar(cls, v):
        return trimmed_url(v)


class UserUpdate(ApiModel):
    """Sparse update: only fields present in the body are applied."""

    username: Optional[str] = Field(default=None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    avatar_url: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return normalize_email(v)

    @field_validator("avatar_url", mode="before")
    @classmethod
    def _avatar(cls, v):
        return trimmed_url(v)

    @model_validator(mode="after")
    def _required_not_null(self):
        for name in ("username", "email", "password"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class UserOut(ApiModel):
    id: UUID
    username: str
    email: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _utc(cls, v):
        return as_utc(v)


class UserPage(ApiModel):
    items: List[UserOut]
    next_cursor: Optional[UUID] = None
    limit: int


class ListQuery(ApiModel):
    limit: int = Field(default=30, ge=1, le=100)
    cursor: Optional[UUID] = None
    user_id: Optional[UUID] = None
    q: Optional[str] = Field(default=None, min_length=1, max_length=80)
    before: Optional[date] = None
    after: Optional[date] = None

    @field_validator("before", "after", mode="before")
    @classmethod
    def _dates(cls, v):
        return iso_date(v)


class IdParams(ApiModel):
    id: UUID

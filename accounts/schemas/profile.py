from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from accounts.schemas.common import ApiModel, as_utc, iso_date, trimmed_url


class ProfileIn(ApiModel):
    """Body for both create and update; on update only sent fields change (null clears)."""

    bio: Optional[str] = Field(default=None, max_length=280)
    location: Optional[str] = Field(default=None, max_length=80)
    birthdate: Optional[date] = None
    website: Optional[str] = None

    @field_validator("birthdate", mode="before")
    @classmethod
    def _birthdate(cls, v):
        return iso_date(v)

    @field_validator("website", mode="before")
    @classmethod
    def _website(cls, v):
        return trimmed_url(v)


class ProfileOut(ApiModel):
    id: UUID
    user_id: UUID
    bio: Optional[str] = None
    location: Optional[str] = None
    birthdate: Optional[date] = None
    website: Optional[str] = None
    updated_at: datetime

    @field_validator("updated_at", mode="after")
    @classmethod
    def _utc(cls, v):
        return as_utc(v)


class UserIdParams(ApiModel):
    user_id: UUID

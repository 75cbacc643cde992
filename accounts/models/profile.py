from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field

from accounts.core.clock import utcnow


class UserProfile(SQLModel, table=True):
    """
    사용자당 최대 1개의 프로필.
    - user_id: unique → 두 번째 생성은 IntegrityError (409로 매핑)
    - 사용자 삭제 시 ON DELETE CASCADE (alembic 마이그레이션과 동일)
    """
    __tablename__ = "user_profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", unique=True, index=True)
    bio: Optional[str] = Field(default=None, max_length=280)
    location: Optional[str] = Field(default=None, max_length=80)
    birthdate: Optional[date] = None
    website: Optional[str] = None
    updated_at: datetime = Field(default_factory=utcnow)

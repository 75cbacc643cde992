from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from accounts.core.clock import utcnow
from accounts.core.errors import DomainError, ErrorKind
from accounts.models.profile import UserProfile
from accounts.models.user import User


class ProfileRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_user_id(self, user_id: UUID) -> Optional[UserProfile]:
        return self.db.exec(select(UserProfile).where(UserProfile.user_id == user_id)).first()

    def create(self, user_id: UUID, data: Dict[str, Any]) -> UserProfile:
        if self.db.get(User, user_id) is None:
            raise DomainError(ErrorKind.USER_NOT_FOUND)

        profile = UserProfile(user_id=user_id, **data)
        self.db.add(profile)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # FK violation means the user vanished in between; otherwise unique(user_id)
            if self.db.get(User, user_id) is None:
                raise DomainError(ErrorKind.USER_NOT_FOUND)
            raise DomainError(ErrorKind.PROFILE_ALREADY_EXISTS)
        self.db.refresh(profile)
        return profile

    def update(self, user_id: UUID, changes: Dict[str, Any]) -> Optional[UserProfile]:
        profile = self.get_by_user_id(user_id)
        if profile is None:
            return None
        for field, value in changes.items():
            setattr(profile, field, value)
        profile.updated_at = utcnow()
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, or_, select

from accounts.core.clock import day_start_utc, utcnow
from accounts.core.errors import DomainError, ErrorKind
from accounts.models.profile import UserProfile
from accounts.models.user import User

log = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_all(self) -> List[User]:
        return list(self.db.exec(select(User).order_by(User.created_at, User.id)).all())

    def list_page(
        self,
        *,
        limit: int,
        cursor: Optional[UUID] = None,
        q: Optional[str] = None,
        user_id: Optional[UUID] = None,
        before: Optional[date] = None,
        after: Optional[date] = None,
    ) -> Tuple[List[User], Optional[UUID]]:
        """
        Keyset page ordered by id. `after` is inclusive (from the start of
        that day), `before` exclusive (up to the start of that day).
        """
        stmt = select(User)
        if cursor is not None:
            stmt = stmt.where(col(User.id) > cursor)
        if user_id is not None:
            stmt = stmt.where(User.id == user_id)
        if q:
            like = f"%{q}%"
            stmt = stmt.where(
                or_(
                    col(User.username).ilike(like),
                    col(User.email).ilike(like),
                    col(User.display_name).ilike(like),
                )
            )
        if after is not None:
            stmt = stmt.where(col(User.created_at) >= day_start_utc(after))
        if before is not None:
            stmt = stmt.where(col(User.created_at) < day_start_utc(before))

        rows = list(self.db.exec(stmt.order_by(User.id).limit(limit + 1)).all())
        if len(rows) > limit:
            rows = rows[:limit]
            return rows, rows[-1].id
        return rows, None

    def get(self, user_id: UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.exec(select(User).where(User.email == email)).first()

    def _commit(self, user: User) -> User:
        try:
            self.db.commit()
        except IntegrityError:
            # username/email unique constraint; the db decides races between creates
            self.db.rollback()
            raise DomainError(ErrorKind.DUPLICATE_USER)
        self.db.refresh(user)
        return user

    def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        display_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            avatar_url=avatar_url,
        )
        self.db.add(user)
        return self._commit(user)

    def update(self, user: User, changes: Dict[str, Any]) -> User:
        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = utcnow()
        self.db.add(user)
        return self._commit(user)

    def delete(self, user_id: UUID) -> bool:
        user = self.db.get(User, user_id)
        if user is None:
            return False
        profile = self.db.exec(select(UserProfile).where(UserProfile.user_id == user_id)).first()
        if profile is not None:
            self.db.delete(profile)
            self.db.flush()
        self.db.delete(user)
        self.db.commit()
        log.info("Deleted user %s", user_id)
        return True

from __future__ import annotations

from typing import Optional
from uuid import UUID

from accounts.models.profile import UserProfile
from accounts.repositories.profile_repository import ProfileRepository
from accounts.schemas.profile import ProfileIn


class ProfileService:
    def __init__(self, repo: ProfileRepository) -> None:
        self.repo = repo

    def get_by_user_id(self, user_id: UUID) -> Optional[UserProfile]:
        return self.repo.get_by_user_id(user_id)

    def create(self, user_id: UUID, data: ProfileIn) -> UserProfile:
        return self.repo.create(user_id, data.model_dump(exclude_unset=True))

    def update(self, user_id: UUID, data: ProfileIn) -> Optional[UserProfile]:
        # absent fields are left alone, explicit nulls clear
        return self.repo.update(user_id, data.model_dump(exclude_unset=True))

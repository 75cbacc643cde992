from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi.concurrency import run_in_threadpool

from accounts.core.passwords import Passwords
from accounts.models.user import User
from accounts.repositories.user_repository import UserRepository
from accounts.schemas.user import ListQuery, UserCreate, UserUpdate


class UserService:
    def __init__(self, repo: UserRepository, passwords: Passwords) -> None:
        self.repo = repo
        self.passwords = passwords

    def list_all(self) -> List[User]:
        return self.repo.list_all()

    def list_page(self, query: ListQuery):
        return self.repo.list_page(
            limit=query.limit,
            cursor=query.cursor,
            q=query.q,
            user_id=query.user_id,
            before=query.before,
            after=query.after,
        )

    def get(self, user_id: UUID) -> Optional[User]:
        return self.repo.get(user_id)

    async def create(self, data: UserCreate) -> User:
        # plaintext never reaches the repository
        password_hash = await self.passwords.hash(data.password)
        return await run_in_threadpool(
            self.repo.create,
            username=data.username,
            email=data.email,
            password_hash=password_hash,
            display_name=data.display_name,
            avatar_url=data.avatar_url,
        )

    async def update(self, user_id: UUID, data: UserUpdate) -> Optional[User]:
        # sync Session work stays off the event loop in the async paths
        user = await run_in_threadpool(self.repo.get, user_id)
        if user is None:
            return None
        changes = data.model_dump(exclude_unset=True)
        if "password" in changes:
            changes["password_hash"] = await self.passwords.hash(changes.pop("password"))
        return await run_in_threadpool(self.repo.update, user, changes)

    def delete(self, user_id: UUID) -> bool:
        return self.repo.delete(user_id)

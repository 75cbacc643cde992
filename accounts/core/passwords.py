from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi.concurrency import run_in_threadpool


class Passwords:
    """
    argon2 hashing, run off the event loop.

    Both calls are awaited from the thread pool; hash() and verify() never
    run on the loop itself.
    """

    def __init__(self, hasher: Optional[PasswordHasher] = None) -> None:
        self._hasher = hasher or PasswordHasher()

    async def hash(self, plain: str) -> str:
        return await run_in_threadpool(self._hasher.hash, plain)

    async def verify(self, password_hash: str, plain: str) -> bool:
        return await run_in_threadpool(self._verify_sync, password_hash, plain)

    def _verify_sync(self, password_hash: str, plain: str) -> bool:
        try:
            return self._hasher.verify(password_hash, plain)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

from __future__ import annotations

import logging
from typing import Optional
from uuid import uuid4

from fastapi import HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool

from accounts.core.cookies import RefreshCookiePolicy
from accounts.core.passwords import Passwords
from accounts.core.tokens import TokenCodec, TokenError
from accounts.repositories.user_repository import UserRepository
from accounts.services.rotation import RotationLedger

log = logging.getLogger(__name__)


def new_rotation_id() -> str:
    return str(uuid4())


class AuthService:
    """
    login / refresh / logout.

    Holds no per-request state: everything lives in the database or inside the
    tokens. The refresh token only ever travels in the httpOnly cookie; the
    access token is what the response body carries.
    """

    def __init__(
        self,
        codec: TokenCodec,
        passwords: Passwords,
        ledger: RotationLedger,
        cookie: RefreshCookiePolicy,
    ) -> None:
        self.codec = codec
        self.passwords = passwords
        self.ledger = ledger
        self.cookie = cookie

    def _issue(self, sub: str, response: Response) -> str:
        access = self.codec.sign_access(sub)
        rot = new_rotation_id()
        refresh = self.codec.sign_refresh(sub, rot)
        self.ledger.issued(sub, rot)
        self.cookie.set(response, refresh)
        return access

    async def login(
        self,
        users: UserRepository,
        email: Optional[str],
        password: Optional[str],
        response: Response,
    ) -> str:
        if not email or not password:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing credentials")

        user = await run_in_threadpool(users.get_by_email, email.lower().strip())
        # same answer for "no such user" and "wrong password"
        if user is None or not await self.passwords.verify(user.password_hash, password):
            log.info("Login failed")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        log.info("Login ok for user %s", user.id)
        return self._issue(str(user.id), response)

    def refresh(self, request: Request, response: Response) -> str:
        token = self.cookie.read(request)
        if not token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No refresh")

        try:
            claims = self.codec.verify_refresh(token)
        except TokenError:
            log.info("Refresh rejected: token did not verify")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh")

        if not self.ledger.accepts(claims.sub, claims.rot):
            log.warning("Refresh rejected: rotation %s for user %s not accepted", claims.rot, claims.sub)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh")

        self.ledger.retire(claims.sub, claims.rot)
        return self._issue(claims.sub, response)

    def logout(self, request: Request, response: Response) -> None:
        token = self.cookie.read(request)
        if token:
            try:
                claims = self.codec.verify_refresh(token)
            except TokenError:
                claims = None
            if claims is not None:
                self.ledger.retire(claims.sub, claims.rot)
        self.cookie.clear(response)

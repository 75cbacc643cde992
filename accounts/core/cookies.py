from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request, Response

AUTH_PREFIX = "/auth"
REFRESH_COOKIE_NAME = "refresh_token"


@dataclass(frozen=True)
class RefreshCookiePolicy:
    """
    Single source of the refresh cookie attributes.

    Browsers only drop a cookie when the clearing Set-Cookie carries the same
    path/secure/samesite it was set with, so set() and clear() share them.
    """

    name: str = REFRESH_COOKIE_NAME
    path: str = AUTH_PREFIX
    httponly: bool = True
    secure: bool = True
    samesite: str = "strict"
    max_age: Optional[int] = None

    def read(self, request: Request) -> Optional[str]:
        return request.cookies.get(self.name) or None

    def set(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.name,
            value=token,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self.name,
            path=self.path,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )

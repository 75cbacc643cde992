from __future__ import annotations

import hmac
import logging
import secrets

from fastapi import HTTPException, Request, Response, status

log = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_TOKEN_BYTES = 24


def issue_csrf(response: Response) -> str:
    """Mint a token, readable by page script from both the cookie and the header."""
    token = secrets.token_hex(CSRF_TOKEN_BYTES)
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        path="/",
        secure=True,
        httponly=False,
        samesite="strict",
    )
    response.headers[CSRF_HEADER_NAME] = token
    return token


def csrf_tokens_match(cookie_value: str | None, header_value: str | None) -> bool:
    if not cookie_value or not header_value:
        return False
    return hmac.compare_digest(cookie_value.encode("utf-8"), header_value.encode("utf-8"))


def require_csrf(request: Request) -> None:
    """Double-submit check for state-changing auth routes."""
    cookie_value = request.cookies.get(CSRF_COOKIE_NAME)
    header_value = request.headers.get(CSRF_HEADER_NAME)
    if not csrf_tokens_match(cookie_value, header_value):
        log.info("CSRF check failed on %s %s", request.method, request.url.path)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="CSRF validation failed")

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from jose import jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel, ValidationError

from accounts.core.keys import ALGORITHM, KeyProvider

KEY_ID = "k1"

# ---- TTL 파싱 ----
_UNIT_SECONDS = {
    "ms": 0.001, "msec": 0.001, "msecs": 0.001, "millisecond": 0.001, "milliseconds": 0.001,
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
    "y": 31557600, "yr": 31557600, "yrs": 31557600, "year": 31557600, "years": 31557600,
}
_DURATION_RE = re.compile(r"^(?P<n>\d*\.?\d+)\s*(?P<unit>[a-z]+)$", re.IGNORECASE)


def parse_ttl(value: Optional[str], default: str) -> int:
    """
    토큰 수명(초)을 해석한다.
    - 비어 있으면 default
    - 양의 정수면 초 단위 그대로
    - 아니면 "15m", "30d", "2 hours" 같은 축약형
    그 외는 ValueError (설정 로딩 시점에 실패하도록).
    """
    raw = (value or "").strip() or default
    if raw.isdigit():
        seconds = int(raw)
        if seconds <= 0:
            raise ValueError(f"Invalid expiresIn: {raw}")
        return seconds

    m = _DURATION_RE.match(raw)
    if not m or m.group("unit").lower() not in _UNIT_SECONDS:
        raise ValueError(f"Invalid expiresIn: {raw}")
    seconds = int(float(m.group("n")) * _UNIT_SECONDS[m.group("unit").lower()])
    if seconds <= 0:
        raise ValueError(f"Invalid expiresIn: {raw}")
    return seconds


# ---- Claims ----
class AccessClaims(BaseModel):
    sub: str
    scope: Optional[List[str]] = None
    iat: int
    exp: int
    typ: str = "access"


class RefreshClaims(BaseModel):
    sub: str
    rot: str
    iat: int
    exp: int
    typ: str = "refresh"


class TokenError(Exception):
    """Any verification failure. Callers must not tell the client why."""


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenCodec:
    def __init__(self, keys: KeyProvider, access_ttl: int, refresh_ttl: int) -> None:
        self.keys = keys
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def _sign(self, payload: Dict[str, Any], ttl: int) -> str:
        to_encode = payload.copy()
        iat = int(_utcnow().timestamp())
        to_encode["iat"] = iat
        to_encode["exp"] = iat + ttl
        return jwt.encode(
            to_encode,
            self.keys.get_private_key(),
            algorithm=ALGORITHM,
            headers={"kid": KEY_ID},
        )

    def _decode(self, token: str, typ: str) -> Dict[str, Any]:
        try:
            # algorithms pinned: an HS256 token "signed" with the public key must not pass
            payload = jwt.decode(token, self.keys.get_public_key(), algorithms=[ALGORITHM])
        except JOSEError as exc:
            raise TokenError("invalid token") from exc
        if payload.get("typ") != typ:
            raise TokenError("invalid token")
        return payload

    # ---- Access Token ----
    def sign_access(self, sub: str, scope: Optional[List[str]] = None) -> str:
        payload: Dict[str, Any] = {"sub": str(sub), "typ": "access"}
        if scope:
            payload["scope"] = list(scope)
        return self._sign(payload, self.access_ttl)

    def verify_access(self, token: str) -> AccessClaims:
        payload = self._decode(token, "access")
        try:
            return AccessClaims.model_validate(payload)
        except ValidationError as exc:
            raise TokenError("invalid token") from exc

    # ---- Refresh Token (회전 전제) ----
    def sign_refresh(self, sub: str, rot: str) -> str:
        return self._sign({"sub": str(sub), "rot": rot, "typ": "refresh"}, self.refresh_ttl)

    def verify_refresh(self, token: str) -> RefreshClaims:
        payload = self._decode(token, "refresh")
        try:
            return RefreshClaims.model_validate(payload)
        except ValidationError as exc:
            raise TokenError("invalid token") from exc

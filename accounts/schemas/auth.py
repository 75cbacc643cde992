from typing import Optional

from accounts.schemas.common import ApiModel


class LoginRequest(ApiModel):
    # presence is checked by the login flow itself (400 "Missing credentials")
    email: Optional[str] = None
    password: Optional[str] = None


class AccessTokenOut(ApiModel):
    access_token: str

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from accounts.core.cookies import AUTH_PREFIX
from accounts.core.csrf import issue_csrf, require_csrf
from accounts.core.responses import Envelope, ok
from accounts.dependencies.auth import get_auth_service, get_user_repository
from accounts.dependencies.validation import validate
from accounts.repositories.user_repository import UserRepository
from accounts.schemas.auth import AccessTokenOut, LoginRequest
from accounts.services.auth_service import AuthService

auth_router = APIRouter(prefix=AUTH_PREFIX, tags=["auth"])


@auth_router.get("/csrf")
def csrf(_token: str = Depends(issue_csrf)):
    return ok(None)


# login: no session yet, so no CSRF check
@auth_router.post("/login", response_model=Envelope[AccessTokenOut])
async def login(
    response: Response,
    body: LoginRequest = Depends(validate(LoginRequest)),
    users: UserRepository = Depends(get_user_repository),
    auth: AuthService = Depends(get_auth_service),
):
    access = await auth.login(users, body.email, body.password, response)
    return ok(AccessTokenOut(access_token=access))


@auth_router.post(
    "/refresh",
    response_model=Envelope[AccessTokenOut],
    dependencies=[Depends(require_csrf)],
)
def refresh(
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    access = auth.refresh(request, response)
    return ok(AccessTokenOut(access_token=access))


@auth_router.post("/logout", dependencies=[Depends(require_csrf)])
def logout(
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    auth.logout(request, response)
    return ok(None)


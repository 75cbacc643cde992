from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from accounts.core.tokens import AccessClaims, TokenCodec, TokenError
from accounts.db.session import get_session
from accounts.repositories.profile_repository import ProfileRepository
from accounts.repositories.user_repository import UserRepository
from accounts.services.auth_service import AuthService
from accounts.services.profile_service import ProfileService
from accounts.services.user_service import UserService


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.tokens


def get_auth_service(request: Request) -> AuthService:
    state = request.app.state
    return AuthService(state.tokens, state.passwords, state.rotation_ledger, state.refresh_cookie)


def get_user_repository(db: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(db)


def get_user_service(request: Request, repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repo, request.app.state.passwords)


def get_profile_service(db: Session = Depends(get_session)) -> ProfileService:
    return ProfileService(ProfileRepository(db))


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_auth(request: Request, codec: TokenCodec = Depends(get_token_codec)) -> AccessClaims:
    """Bearer access token → claims on request.state.auth; 401 otherwise."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized()
    try:
        claims = codec.verify_access(token.strip())
    except TokenError:
        raise _unauthorized()
    request.state.auth = claims
    return claims

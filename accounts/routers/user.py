from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status

from accounts.core.responses import Envelope, ok
from accounts.core.tokens import AccessClaims
from accounts.dependencies.auth import get_user_service, require_auth
from accounts.dependencies.validation import validate
from accounts.schemas.user import IdParams, ListQuery, UserCreate, UserOut, UserPage, UserUpdate
from accounts.services.user_service import UserService

user_router = APIRouter(prefix="/users", tags=["users"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


@user_router.get("")
def list_users(
    request: Request,
    query: ListQuery = Depends(validate(ListQuery, "query")),
    users: UserService = Depends(get_user_service),
):
    # bare /users keeps returning a plain list; any query string switches to pages
    if not request.url.query:
        return ok([UserOut.model_validate(u) for u in users.list_all()])

    items, next_cursor = users.list_page(query)
    page = UserPage(
        items=[UserOut.model_validate(u) for u in items],
        next_cursor=next_cursor,
        limit=query.limit,
    )
    return ok(page)


@user_router.get("/me", response_model=Envelope[UserOut])
def get_me(
    claims: AccessClaims = Depends(require_auth),
    users: UserService = Depends(get_user_service),
):
    try:
        user_id = UUID(claims.sub)
    except ValueError:
        raise _not_found()
    user = users.get(user_id)
    if user is None:
        raise _not_found()
    return ok(UserOut.model_validate(user))


@user_router.get("/{id}", response_model=Envelope[UserOut])
def get_user(
    params: IdParams = Depends(validate(IdParams, "params")),
    users: UserService = Depends(get_user_service),
):
    user = users.get(params.id)
    if user is None:
        raise _not_found()
    return ok(UserOut.model_validate(user))


@user_router.post("", response_model=Envelope[UserOut], status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate = Depends(validate(UserCreate)),
    users: UserService = Depends(get_user_service),
):
    created = await users.create(body)
    return ok(UserOut.model_validate(created))


@user_router.put("/{id}", response_model=Envelope[UserOut])
async def update_user(
    params: IdParams = Depends(validate(IdParams, "params")),
    body: UserUpdate = Depends(validate(UserUpdate)),
    users: UserService = Depends(get_user_service),
):
    if not body.model_fields_set:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    updated = await users.update(params.id, body)
    if updated is None:
        raise _not_found()
    return ok(UserOut.model_validate(updated))


@user_router.delete("/{id}")
def delete_user(
    params: IdParams = Depends(validate(IdParams, "params")),
    users: UserService = Depends(get_user_service),
):
    if not users.delete(params.id):
        raise _not_found()
    return ok(None)

from fastapi import APIRouter, Depends, HTTPException, status

from accounts.core.responses import Envelope, ok
from accounts.dependencies.auth import get_profile_service
from accounts.dependencies.validation import validate
from accounts.schemas.profile import ProfileIn, ProfileOut, UserIdParams
from accounts.services.profile_service import ProfileService

profile_router = APIRouter(prefix="/users/{userId}/profile", tags=["profiles"])


def _profile_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")


@profile_router.get("", response_model=Envelope[ProfileOut])
def get_profile(
    params: UserIdParams = Depends(validate(UserIdParams, "params")),
    profiles: ProfileService = Depends(get_profile_service),
):
    profile = profiles.get_by_user_id(params.user_id)
    if profile is None:
        raise _profile_not_found()
    return ok(ProfileOut.model_validate(profile))


@profile_router.post("", response_model=Envelope[ProfileOut], status_code=status.HTTP_201_CREATED)
def create_profile(
    params: UserIdParams = Depends(validate(UserIdParams, "params")),
    body: ProfileIn = Depends(validate(ProfileIn)),
    profiles: ProfileService = Depends(get_profile_service),
):
    # USER_NOT_FOUND / PROFILE_ALREADY_EXISTS come up as DomainError → 404 / 409
    profile = profiles.create(params.user_id, body)
    return ok(ProfileOut.model_validate(profile))


@profile_router.put("", response_model=Envelope[ProfileOut])
def update_profile(
    params: UserIdParams = Depends(validate(UserIdParams, "params")),
    body: ProfileIn = Depends(validate(ProfileIn)),
    profiles: ProfileService = Depends(get_profile_service),
):
    profile = profiles.update(params.user_id, body)
    if profile is None:
        raise _profile_not_found()
    return ok(ProfileOut.model_validate(profile))

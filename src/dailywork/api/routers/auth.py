"""Registration and login endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm

from ...core.config import Settings
from ...deps import AuthServiceDependency, CurrentUserDependency, SettingsDependency, UserServiceDependency
from ...schemas import AccessToken, LoginResponse, RegisterRequest, ServiceResult, UserPublic
from ...services import AuthenticationError

router = APIRouter(prefix="/auth", tags=["auth"])


def _expires_in(settings: Settings) -> int:
    return settings.access_token_expire_minutes * 60


@router.post(
    "/register",
    response_model=ServiceResult[UserPublic],
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    response: Response,
    user_service: UserServiceDependency,
) -> ServiceResult[UserPublic]:
    result = await user_service.register(payload)
    response.status_code = result.code
    return result


@router.post("/login", response_model=LoginResponse, summary="Exchange credentials for a token")
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth_service: AuthServiceDependency,
    settings: SettingsDependency,
) -> LoginResponse:
    user = await auth_service.authenticate(form_data.username, form_data.password)
    if user is None:
        raise AuthenticationError("Incorrect username or password.")
    token = auth_service.issue_token(user)
    return LoginResponse(
        user=UserPublic.model_validate(user),
        token=AccessToken(access_token=token.token, expires_in=_expires_in(settings)),
    )


@router.get("/me", response_model=UserPublic, summary="Return the authenticated user")
async def read_current_user(current_user: CurrentUserDependency) -> UserPublic:
    return UserPublic.model_validate(current_user)

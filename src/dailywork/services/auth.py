"""Authentication service: credential checks and access tokens."""

from __future__ import annotations

import logging

from fastapi import status
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings
from ..core.security import GeneratedToken, create_access_token, decode_token, verify_password
from ..errors import ApplicationError, PermissionDeniedError
from ..models import User
from ..schemas import TokenPayload
from .users import UserService

logger = logging.getLogger(__name__)


class AuthenticationError(ApplicationError):
    """Raised when credentials or a bearer token do not identify a user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_message = "Could not validate credentials."


class AuthService:
    """Resolve the acting user for the request layer."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._settings = settings
        self._users = UserService(session)

    async def authenticate(self, login: str, password: str) -> User | None:
        """Return the user matching ``login`` (username or email) and password."""
        user = await self._users.find_by_username(login)
        if user is None and "@" in login:
            user = await self._users.find_by_email(login)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Rejected login attempt")
            return None
        if not user.is_active:
            raise PermissionDeniedError("User account is inactive.")
        return user

    def issue_token(self, user: User) -> GeneratedToken:
        return create_access_token(subject=user.id, settings=self._settings)

    async def resolve_user(self, token: str) -> User:
        """Decode a bearer token and load the user it names."""
        try:
            payload = TokenPayload.model_validate(
                decode_token(
                    token=token,
                    secret=self._settings.jwt_secret_key,
                    algorithm=self._settings.jwt_algorithm,
                )
            )
            user_id = int(payload.sub)
        except (JWTError, PydanticValidationError, ValueError) as exc:
            raise AuthenticationError() from exc

        user = await self._users.get(user_id)
        if user is None:
            raise AuthenticationError()
        if not user.is_active:
            raise PermissionDeniedError("User account is inactive.")
        return user


__all__ = ["AuthService", "AuthenticationError"]

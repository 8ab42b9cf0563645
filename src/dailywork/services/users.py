"""Service layer for user registration and lookup."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.security import get_password_hash
from ..db import atomic
from ..errors import ServerError
from ..models import User
from ..repositories import UserRepository
from ..schemas import RegisterRequest, ServiceResult, UserPublic

logger = logging.getLogger(__name__)


class UserService:
    """Registration and uniqueness-checked lookup of ``User`` records."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = UserRepository(session)

    async def exists_by_email(self, email: str) -> bool:
        """Return ``True`` iff a user already registered ``email``."""
        try:
            user = await self._repository.get_by_email(email)
        except SQLAlchemyError as exc:
            logger.exception("Email uniqueness check failed")
            raise ServerError("Email uniqueness check failed.") from exc
        return user is not None

    async def register(self, registration: RegisterRequest) -> ServiceResult[UserPublic]:
        """Create a user unless the email or username is taken.

        A taken email or username is a declined result, not a fault. A
        concurrent registration that slips past both checks is declined the
        same way once the unique constraints reject it.
        """
        if await self.exists_by_email(registration.email):
            return ServiceResult.declined("Email is already registered.")
        if await self.find_by_username(registration.username) is not None:
            return ServiceResult.declined("Username is already taken.")

        user = User(
            username=registration.username,
            email=registration.email,
            full_name=registration.full_name,
            hashed_password=get_password_hash(registration.password),
        )
        try:
            async with atomic(self._session):
                created = await self._repository.add(user)
        except IntegrityError:
            logger.warning("Registration lost a uniqueness race", extra={"username": registration.username})
            return ServiceResult.declined("Email or username is already registered.")
        except SQLAlchemyError as exc:
            logger.exception("User registration failed")
            raise ServerError("Registration failed.") from exc

        if created is None or created.id is None:
            return ServiceResult.declined("Registration failed.")
        logger.info("Registered user", extra={"user_id": created.id})
        return ServiceResult.success("Registration succeeded.", UserPublic.model_validate(created))

    async def get(self, user_id: int) -> User | None:
        try:
            return await self._repository.get(user_id)
        except SQLAlchemyError as exc:
            logger.exception("User lookup by id failed")
            raise ServerError("User lookup failed.") from exc

    async def find_by_username(self, username: str) -> User | None:
        try:
            return await self._repository.get_by_username(username)
        except SQLAlchemyError as exc:
            logger.exception("User lookup by username failed")
            raise ServerError("User lookup by username failed.") from exc

    async def find_by_email(self, email: str) -> User | None:
        try:
            return await self._repository.get_by_email(email)
        except SQLAlchemyError as exc:
            logger.exception("User lookup by email failed")
            raise ServerError("User lookup by email failed.") from exc

"""Schemas describing authentication payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserPublic


class AccessToken(BaseModel):
    """Bearer token returned after a successful login."""

    access_token: str
    token_type: str = Field(default="bearer", frozen=True)
    expires_in: int


class LoginResponse(BaseModel):
    user: UserPublic
    token: AccessToken


class TokenPayload(BaseModel):
    """Validated JWT payload."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: datetime
    iat: datetime
    jti: str


__all__ = ["AccessToken", "LoginResponse", "TokenPayload"]

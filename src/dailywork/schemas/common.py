"""Uniform result envelope returned by service operations."""

from __future__ import annotations

from typing import Generic, TypeVar

from fastapi import status
from pydantic import BaseModel, Field

ResultT = TypeVar("ResultT")


class ServiceResult(BaseModel, Generic[ResultT]):
    """``{code, message, result}`` envelope shared by every operation.

    A non-2xx ``code`` marks a *declined* outcome: an expected business state
    reported as data rather than raised as a fault.
    """

    code: int = Field(default=status.HTTP_200_OK, description="Numeric status of the outcome")
    message: str = Field(description="Human-readable outcome message")
    result: ResultT | None = Field(default=None, description="Operation payload, if any")

    @property
    def ok(self) -> bool:
        return 200 <= self.code < 300

    @classmethod
    def success(cls, message: str, result: ResultT | None = None) -> "ServiceResult[ResultT]":
        return cls(code=status.HTTP_200_OK, message=message, result=result)

    @classmethod
    def declined(
        cls,
        message: str,
        *,
        code: int = status.HTTP_400_BAD_REQUEST,
    ) -> "ServiceResult[ResultT]":
        return cls(code=code, message=message, result=None)


__all__ = ["ServiceResult"]

"""Generic response envelope used by every platform API endpoint."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")

# Envelope code the platform uses for a successful call
SUCCESS_CODE = 1


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper: ``{code, message, success, data}``."""

    model_config = ConfigDict(extra="allow")

    code: Optional[int] = None
    message: Optional[str] = None
    success: Optional[bool] = None
    data: Optional[T] = None

    @property
    def ok(self) -> bool:
        if self.success is not None:
            return self.success
        return self.code is None or self.code == SUCCESS_CODE

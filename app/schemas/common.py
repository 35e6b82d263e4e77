"""
Shared/common Pydantic schemas used across multiple endpoints
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope returned by admin and labeler endpoints.

    Errors are not wrapped: they surface as HTTPException ``{"detail": ...}``.
    """

    success: bool = True
    message: str
    data: T | None = None


class MessageResponse(BaseModel):
    """Generic message response."""

    success: bool = True
    message: str

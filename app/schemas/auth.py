"""
Authentication schemas for request/response validation.
"""

from typing import Literal

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request schema for admin or labeler login."""

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=255)
    role: Literal["admin", "labeler"]


class LoginResponse(BaseModel):
    """Response schema for successful authentication."""

    token: str
    token_type: str = "bearer"
    role: str
    expires_in: int = Field(..., description="Access token expiration time in seconds from now")

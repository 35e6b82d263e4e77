"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Extracting and verifying JWT bearer tokens from requests
- Loading the current admin or labeler from the database
- Protecting routes by role
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import UserRole
from app.core.database import get_db
from app.core.logging import bind_context
from app.core.security import TokenClaims, verify_access_token
from app.models.admin import Admins
from app.models.labeler import Labelers

# auto_error=False so a missing header yields 401 rather than FastAPI's 403
security = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> TokenClaims:
    """
    Extract and verify the JWT access token from the Authorization header.

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = verify_access_token(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    bind_context(user_id=claims.user_id, role=claims.role)
    return claims


def _require_role(claims: TokenClaims, role: str, label: str) -> None:
    if claims.role != role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient permissions. {label} role required.",
        )


async def require_admin(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Admins:
    """
    Require the token to belong to an existing admin.

    Raises:
        HTTPException: 403 for a labeler token, 401 if the admin no longer exists
    """
    _require_role(claims, UserRole.ADMIN, "Admin")

    admin = await db.get(Admins, claims.user_id)
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return admin


async def require_labeler(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Labelers:
    """
    Require the token to belong to an existing labeler.

    Raises:
        HTTPException: 403 for an admin token, 401 if the labeler was deleted
    """
    _require_role(claims, UserRole.LABELER, "Labeler")

    labeler = await db.get(Labelers, claims.user_id)
    if labeler is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return labeler


# Type aliases for dependency injection
AdminUser = Annotated[Admins, Depends(require_admin)]
LabelerUser = Annotated[Labelers, Depends(require_labeler)]

"""
Authentication API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.logging import get_logger
from app.core.security import create_access_token
from app.schemas.auth import LoginRequest, LoginResponse
from app.services.accounts import authenticate

router = APIRouter(tags=["auth"])
logger = get_logger(__name__)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate an admin or labeler and return a JWT access token.

    The role in the body selects which account table is checked; an admin
    username cannot log in as a labeler and vice versa.
    """
    account = await authenticate(db, credentials.role, credentials.username, credentials.password)
    if account is None:
        logger.warning("login_failed", username=credentials.username, role=credentials.role)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    assert account.id is not None
    token = create_access_token(account.id, credentials.role)
    logger.info("login_success", user_id=account.id, role=credentials.role)

    return LoginResponse(
        token=token,
        role=credentials.role,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

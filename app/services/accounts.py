"""Account lookup, login and the startup admin account."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import UserRole, settings
from app.core.logging import get_logger
from app.core.security import get_password_hash, verify_password
from app.models.admin import Admins
from app.models.labeler import Labelers

logger = get_logger(__name__)

_ACCOUNT_MODELS: dict[str, type[Admins] | type[Labelers]] = {
    UserRole.ADMIN: Admins,
    UserRole.LABELER: Labelers,
}


async def get_account_by_username(db: AsyncSession, role: str, username: str) -> Admins | Labelers | None:
    model = _ACCOUNT_MODELS.get(role)
    if model is None:
        return None
    result = await db.execute(select(model).where(model.username == username))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, role: str, username: str, password: str) -> Admins | Labelers | None:
    """
    Return the account when the username exists for the role and the password matches.

    Unknown users and wrong passwords are indistinguishable to the caller.
    """
    account = await get_account_by_username(db, role, username)
    if account is None or not verify_password(password, account.password_hash):
        return None
    return account


async def ensure_default_admin(db: AsyncSession) -> bool:
    """
    Create the DEFAULT_ADMIN_USERNAME account when it does not exist yet.

    Returns True if an account was created.
    """
    existing = await get_account_by_username(db, UserRole.ADMIN, settings.DEFAULT_ADMIN_USERNAME)
    if existing is not None:
        return False

    db.add(
        Admins(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
        )
    )
    await db.commit()
    logger.info("default_admin_created", username=settings.DEFAULT_ADMIN_USERNAME)
    return True

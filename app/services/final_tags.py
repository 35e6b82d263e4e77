"""
Final tag storage.

The final tags of an image are written as a whole batch: the previous batch
is deleted and the new one inserted in the same transaction, under a lock
held per image so an admin override and an auto-generation run on the same
image never interleave their delete and insert.
"""

import asyncio
from weakref import WeakValueDictionary

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.final_tag import FinalTags
from app.models.image import Images
from app.models.tag import Tags
from app.schemas.final_tag import FinalTagResponse, TagStatistic
from app.services.consensus import auto_generate_final_tags, compute_tag_statistics
from app.services.exceptions import FinalTagPersistenceError
from app.services.image_tags import get_group_tags, get_image_assignments
from app.utils.timestamps import utc_now

logger = get_logger(__name__)

# Locks live as long as some coroutine holds or waits on them
_image_locks: WeakValueDictionary[int, asyncio.Lock] = WeakValueDictionary()


def _lock_for(image_id: int) -> asyncio.Lock:
    lock = _image_locks.get(image_id)
    if lock is None:
        lock = asyncio.Lock()
        _image_locks[image_id] = lock
    return lock


async def get_final_tags(db: AsyncSession, image_id: int) -> list[FinalTagResponse]:
    """Current final tags of an image with tag names, ordered by tag id."""
    result = await db.execute(
        select(FinalTags, Tags.name)  # type: ignore[call-overload]
        .join(Tags, Tags.id == FinalTags.tag_id)
        .where(FinalTags.image_id == image_id)
        .order_by(FinalTags.tag_id)
    )
    return [
        FinalTagResponse(
            id=final_tag.id,
            tag_id=final_tag.tag_id,
            tag_name=tag_name,
            is_admin_override=final_tag.is_admin_override,
            created_at=final_tag.created_at,
        )
        for final_tag, tag_name in result.all()
    ]


async def has_admin_override(db: AsyncSession, image_id: int) -> bool:
    """True when any current final tag of the image was set by an administrator."""
    result = await db.execute(
        select(FinalTags.id)  # type: ignore[call-overload]
        .where(
            FinalTags.image_id == image_id,
            FinalTags.is_admin_override == True,  # noqa: E712
        )
        .limit(1)
    )
    return result.first() is not None


async def replace_final_tags(
    db: AsyncSession,
    image_id: int,
    tag_ids: list[int] | set[int],
    is_admin_override: bool,
) -> list[FinalTags]:
    """
    Replace the final tag set of an image with ``tag_ids``.

    Every inserted row carries the same ``is_admin_override`` flag and
    timestamp. Commits on success.

    Raises:
        FinalTagPersistenceError: the write failed; the previous set is kept
    """
    unique_ids = sorted(set(tag_ids))

    async with _lock_for(image_id):
        created_at = utc_now()
        rows = [
            FinalTags(
                image_id=image_id,
                tag_id=tag_id,
                is_admin_override=is_admin_override,
                created_at=created_at,
            )
            for tag_id in unique_ids
        ]
        try:
            await db.execute(delete(FinalTags).where(FinalTags.image_id == image_id))  # type: ignore[arg-type]
            db.add_all(rows)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                "final_tags_replace_failed",
                image_id=image_id,
                tag_ids=unique_ids,
                is_admin_override=is_admin_override,
                error=str(e),
            )
            raise FinalTagPersistenceError(image_id) from e

    logger.info(
        "final_tags_replaced",
        image_id=image_id,
        tag_ids=unique_ids,
        is_admin_override=is_admin_override,
    )
    return rows


async def get_tag_statistics(db: AsyncSession, image: Images) -> list[TagStatistic]:
    """Labeler agreement for every tag of the image's group."""
    assert image.id is not None
    group_tags = await get_group_tags(db, image.group_id)
    assignments = await get_image_assignments(db, image.id)
    return compute_tag_statistics(group_tags, assignments)


async def auto_generate_for_image(db: AsyncSession, image_id: int) -> list[FinalTagResponse] | None:
    """
    Derive the final tags of an image from labeler agreement and store them.

    Returns None, leaving stored final tags untouched, when no labeler has
    tagged the image yet. Otherwise the new set replaces whatever was stored,
    an administrator's override included.
    """
    assignments = await get_image_assignments(db, image_id)
    if not assignments:
        logger.info("final_tags_auto_generate_skipped", image_id=image_id, reason="no_assignments")
        return None

    tag_ids = auto_generate_final_tags(assignments)

    if await has_admin_override(db, image_id):
        logger.warning("final_tags_admin_override_cleared", image_id=image_id)

    await replace_final_tags(db, image_id, tag_ids, is_admin_override=False)
    return await get_final_tags(db, image_id)

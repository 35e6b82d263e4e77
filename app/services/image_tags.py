"""Per-labeler tag assignment service."""

from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.image import Images
from app.models.image_tag import ImageTags
from app.models.tag import Tags
from app.services.exceptions import PersistenceError

logger = get_logger(__name__)


async def get_group_tags(db: AsyncSession, group_id: int) -> list[Tags]:
    """Tags of a group ordered by id."""
    result = await db.execute(
        select(Tags).where(Tags.group_id == group_id).order_by(Tags.id)  # type: ignore[arg-type]
    )
    return list(result.scalars().all())


async def get_image_assignments(db: AsyncSession, image_id: int) -> list[ImageTags]:
    """Every labeler's assignments on an image."""
    result = await db.execute(
        select(ImageTags).where(ImageTags.image_id == image_id).order_by(ImageTags.id)  # type: ignore[arg-type]
    )
    return list(result.scalars().all())


async def get_labeler_tags(db: AsyncSession, image_id: int, labeler_id: int) -> list[Tags]:
    """Tags one labeler applied to an image, ordered by tag id."""
    result = await db.execute(
        select(Tags)
        .join(ImageTags, ImageTags.tag_id == Tags.id)  # type: ignore[arg-type]
        .where(
            ImageTags.image_id == image_id,  # type: ignore[arg-type]
            ImageTags.labeler_id == labeler_id,  # type: ignore[arg-type]
        )
        .order_by(Tags.id)  # type: ignore[arg-type]
    )
    return list(result.scalars().all())


async def validate_group_tag_ids(db: AsyncSession, group_id: int, tag_ids: list[int]) -> list[int]:
    """
    Collapse duplicates (first occurrence wins) and check every id belongs to the group.

    Raises:
        HTTPException: 400 listing the ids that are not tags of the group
    """
    unique_ids = list(dict.fromkeys(tag_ids))
    if not unique_ids:
        return []

    result = await db.execute(
        select(Tags.id).where(  # type: ignore[call-overload]
            Tags.group_id == group_id,
            Tags.id.in_(unique_ids),  # type: ignore[union-attr]
        )
    )
    valid_ids = {row[0] for row in result.all()}
    invalid_ids = [tag_id for tag_id in unique_ids if tag_id not in valid_ids]
    if invalid_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tags do not belong to this group: {invalid_ids}",
        )
    return unique_ids


async def replace_labeler_tags(
    db: AsyncSession,
    image: Images,
    labeler_id: int,
    tag_ids: list[int],
) -> list[Tags]:
    """
    Replace a labeler's tag assignments on an image with ``tag_ids``.

    Other labelers' assignments are left alone. An empty list clears the
    labeler's assignments, putting the image back to pending for them.
    """
    assert image.id is not None
    unique_ids = await validate_group_tag_ids(db, image.group_id, tag_ids)

    try:
        await db.execute(
            delete(ImageTags).where(
                ImageTags.image_id == image.id,  # type: ignore[arg-type]
                ImageTags.labeler_id == labeler_id,  # type: ignore[arg-type]
            )
        )
        db.add_all(
            ImageTags(image_id=image.id, labeler_id=labeler_id, tag_id=tag_id) for tag_id in unique_ids
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "labeler_tags_replace_failed",
            image_id=image.id,
            labeler_id=labeler_id,
            error=str(e),
        )
        raise PersistenceError(f"Failed to save tags for image {image.id}") from e

    logger.info(
        "labeler_tags_replaced",
        image_id=image.id,
        labeler_id=labeler_id,
        tag_count=len(unique_ids),
    )
    return await get_labeler_tags(db, image.id, labeler_id)


async def delete_labeler_group_assignments(db: AsyncSession, labeler_id: int, group_id: int) -> int:
    """
    Remove a labeler's assignments on every image of a group.

    Does not commit; the caller owns the transaction. Returns the number of
    rows deleted.
    """
    image_ids = select(Images.id).where(Images.group_id == group_id)  # type: ignore[call-overload]
    result = await db.execute(
        delete(ImageTags).where(
            ImageTags.labeler_id == labeler_id,  # type: ignore[arg-type]
            ImageTags.image_id.in_(image_ids),  # type: ignore[attr-defined]
        )
    )
    return result.rowcount or 0  # type: ignore[attr-defined]

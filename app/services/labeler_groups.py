"""Labeler group membership service."""

from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.group import Groups
from app.models.labeler import Labelers
from app.models.labeler_group import LabelerGroups


async def get_group_ids_for_labelers(db: AsyncSession, labeler_ids: list[int]) -> dict[int, list[int]]:
    """
    Fetch group ids for multiple labelers in a single query.

    Returns:
        Dict mapping labeler_id to sorted group ids.
        Labelers with no groups will not appear in the result.
        Caller should use .get(labeler_id, []) to handle missing labelers.
    """
    if not labeler_ids:
        return {}

    result = await db.execute(
        select(LabelerGroups.labeler_id, LabelerGroups.group_id)  # type: ignore[call-overload]
        .where(LabelerGroups.labeler_id.in_(labeler_ids))  # type: ignore[attr-defined]
        .order_by(LabelerGroups.group_id)
    )

    groups_by_labeler: dict[int, list[int]] = {}
    for labeler_id, group_id in result.fetchall():
        groups_by_labeler.setdefault(labeler_id, []).append(group_id)
    return groups_by_labeler


async def get_groups_for_labeler(db: AsyncSession, labeler_id: int) -> list[Groups]:
    """Groups a labeler belongs to, ordered by id."""
    result = await db.execute(
        select(Groups)
        .join(LabelerGroups, LabelerGroups.group_id == Groups.id)  # type: ignore[arg-type]
        .where(LabelerGroups.labeler_id == labeler_id)  # type: ignore[arg-type]
        .order_by(Groups.id)  # type: ignore[arg-type]
    )
    return list(result.scalars().all())


async def get_labelers_for_group(db: AsyncSession, group_id: int) -> list[Labelers]:
    """Members of a group, ordered by id."""
    result = await db.execute(
        select(Labelers)
        .join(LabelerGroups, LabelerGroups.labeler_id == Labelers.id)  # type: ignore[arg-type]
        .where(LabelerGroups.group_id == group_id)  # type: ignore[arg-type]
        .order_by(Labelers.id)  # type: ignore[arg-type]
    )
    return list(result.scalars().all())


async def is_member(db: AsyncSession, labeler_id: int, group_id: int) -> bool:
    membership = await db.get(LabelerGroups, (labeler_id, group_id))
    return membership is not None


async def require_membership(db: AsyncSession, labeler_id: int, group_id: int) -> None:
    """
    Raises:
        HTTPException: 403 if the labeler is not assigned to the group
    """
    if not await is_member(db, labeler_id, group_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not assigned to this group",
        )


async def ensure_groups_exist(db: AsyncSession, group_ids: list[int]) -> list[int]:
    """
    Collapse duplicates and check every group exists.

    Raises:
        HTTPException: 404 naming the missing group ids
    """
    unique_ids = list(dict.fromkeys(group_ids))
    if not unique_ids:
        return []

    result = await db.execute(
        select(Groups.id).where(Groups.id.in_(unique_ids))  # type: ignore[call-overload,union-attr]
    )
    found = {row[0] for row in result.all()}
    missing = [group_id for group_id in unique_ids if group_id not in found]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Groups not found: {missing}",
        )
    return unique_ids


async def set_labeler_groups(db: AsyncSession, labeler_id: int, group_ids: list[int]) -> list[int]:
    """
    Replace a labeler's memberships with ``group_ids``.

    Does not commit; the caller owns the transaction.
    """
    unique_ids = await ensure_groups_exist(db, group_ids)
    await db.execute(
        delete(LabelerGroups).where(LabelerGroups.labeler_id == labeler_id)  # type: ignore[arg-type]
    )
    db.add_all(LabelerGroups(labeler_id=labeler_id, group_id=group_id) for group_id in unique_ids)
    await db.flush()
    return sorted(unique_ids)

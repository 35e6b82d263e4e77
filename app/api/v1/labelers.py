"""
Admin endpoints for labeler accounts
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AdminUser
from app.core.database import get_db
from app.core.logging import get_logger
from app.core.security import get_password_hash
from app.models.labeler import Labelers
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.labeler import LabelerCreate, LabelerListResponse, LabelerResponse, LabelerUpdate
from app.services.labeler_groups import get_group_ids_for_labelers, set_labeler_groups

router = APIRouter(prefix="/admin/labeler", tags=["admin"])
logger = get_logger(__name__)


async def _get_labeler_or_404(db: AsyncSession, labeler_id: int) -> Labelers:
    labeler = await db.get(Labelers, labeler_id)
    if labeler is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Labeler not found")
    return labeler


async def _ensure_username_free(db: AsyncSession, username: str, exclude_id: int | None = None) -> None:
    query = select(Labelers.id).where(Labelers.username == username)  # type: ignore[call-overload]
    if exclude_id is not None:
        query = query.where(Labelers.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")


async def _to_response(db: AsyncSession, labeler: Labelers) -> LabelerResponse:
    assert labeler.id is not None
    group_ids = await get_group_ids_for_labelers(db, [labeler.id])
    return LabelerResponse(id=labeler.id, username=labeler.username, group_ids=group_ids.get(labeler.id, []))


@router.post("", response_model=ApiResponse[LabelerResponse], status_code=status.HTTP_201_CREATED)
async def create_labeler(
    labeler_data: LabelerCreate,
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LabelerResponse]:
    """
    Create a labeler account, optionally assigning it to groups.

    Returns 409 if the username is taken and 404 if a group does not exist.
    """
    await _ensure_username_free(db, labeler_data.username)

    labeler = Labelers(
        username=labeler_data.username,
        password_hash=get_password_hash(labeler_data.password),
    )
    db.add(labeler)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists") from e

    assert labeler.id is not None
    group_ids = await set_labeler_groups(db, labeler.id, labeler_data.group_ids or [])
    await db.commit()

    logger.info("labeler_created", labeler_id=labeler.id, group_ids=group_ids)
    return ApiResponse(
        message="Labeler created successfully",
        data=LabelerResponse(id=labeler.id, username=labeler.username, group_ids=group_ids),
    )


@router.get("", response_model=ApiResponse[LabelerListResponse])
async def list_labelers(
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LabelerListResponse]:
    """List every labeler with their group ids."""
    result = await db.execute(select(Labelers).order_by(Labelers.id))  # type: ignore[arg-type]
    labelers = result.scalars().all()

    group_ids = await get_group_ids_for_labelers(db, [lab.id for lab in labelers if lab.id is not None])
    items = [
        LabelerResponse(id=lab.id, username=lab.username, group_ids=group_ids.get(lab.id, []))  # type: ignore[arg-type]
        for lab in labelers
    ]
    return ApiResponse(
        message="Labelers retrieved successfully",
        data=LabelerListResponse(labelers=items, total=len(items)),
    )


@router.get("/{labeler_id}", response_model=ApiResponse[LabelerResponse])
async def get_labeler(
    labeler_id: Annotated[int, Path(description="Labeler ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LabelerResponse]:
    """Get one labeler."""
    labeler = await _get_labeler_or_404(db, labeler_id)
    return ApiResponse(message="Labeler retrieved successfully", data=await _to_response(db, labeler))


@router.put("/{labeler_id}", response_model=ApiResponse[LabelerResponse])
async def update_labeler(
    labeler_id: Annotated[int, Path(description="Labeler ID")],
    labeler_data: LabelerUpdate,
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LabelerResponse]:
    """
    Update a labeler's username, password or group memberships.

    Only provided fields change. ``group_ids`` replaces all memberships.
    """
    labeler = await _get_labeler_or_404(db, labeler_id)

    if labeler_data.username is not None and labeler_data.username != labeler.username:
        await _ensure_username_free(db, labeler_data.username, exclude_id=labeler_id)
        labeler.username = labeler_data.username

    if labeler_data.password is not None:
        labeler.password_hash = get_password_hash(labeler_data.password)

    if labeler_data.group_ids is not None:
        await set_labeler_groups(db, labeler_id, labeler_data.group_ids)

    db.add(labeler)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists") from e

    logger.info("labeler_updated", labeler_id=labeler_id)
    return ApiResponse(message="Labeler updated successfully", data=await _to_response(db, labeler))


@router.delete("/{labeler_id}", response_model=MessageResponse)
async def delete_labeler(
    labeler_id: Annotated[int, Path(description="Labeler ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Delete a labeler. Memberships and tag assignments cascade."""
    labeler = await _get_labeler_or_404(db, labeler_id)
    await db.delete(labeler)
    await db.commit()

    logger.info("labeler_deleted", labeler_id=labeler_id)
    return MessageResponse(message="Labeler deleted successfully")

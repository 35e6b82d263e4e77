"""
Admin endpoints for labeling groups, their members and image review
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AdminUser
from app.core.database import get_db
from app.core.logging import get_logger
from app.models.group import Groups
from app.models.image import Images
from app.models.labeler import Labelers
from app.models.labeler_group import LabelerGroups
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.group import (
    AddLabelerToGroupRequest,
    GroupCreate,
    GroupDetailResponse,
    GroupListResponse,
    GroupResponse,
)
from app.schemas.image import AdminImageDetailResponse, ImageDataResponse, ImageResponse
from app.schemas.labeler import SimpleLabelerResponse
from app.schemas.tag import TagResponse
from app.services.final_tags import get_final_tags, get_tag_statistics, has_admin_override
from app.services.image_tags import delete_labeler_group_assignments, get_group_tags
from app.services.labeler_groups import get_labelers_for_group, is_member

router = APIRouter(prefix="/admin/groups", tags=["admin"])
logger = get_logger(__name__)


async def get_group_or_404(db: AsyncSession, group_id: int) -> Groups:
    group = await db.get(Groups, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    return group


@router.get("", response_model=ApiResponse[GroupListResponse])
async def list_groups(
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[GroupListResponse]:
    """List every group."""
    result = await db.execute(select(Groups).order_by(Groups.id))  # type: ignore[arg-type]
    groups = [GroupResponse.model_validate(g) for g in result.scalars().all()]
    return ApiResponse(
        message="Groups retrieved successfully",
        data=GroupListResponse(groups=groups, total=len(groups)),
    )


@router.post("", response_model=ApiResponse[GroupResponse], status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[GroupResponse]:
    """Create a group."""
    group = Groups(name=group_data.name, description=group_data.description)
    db.add(group)
    await db.commit()
    await db.refresh(group)

    logger.info("group_created", group_id=group.id, name=group.name)
    return ApiResponse(message="Group created successfully", data=GroupResponse.model_validate(group))


@router.get("/{group_id}", response_model=ApiResponse[GroupDetailResponse])
async def get_group_details(
    group_id: Annotated[int, Path(description="Group ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[GroupDetailResponse]:
    """Group with its labelers, tags and images (images without payload)."""
    group = await get_group_or_404(db, group_id)

    labelers = await get_labelers_for_group(db, group_id)
    tags = await get_group_tags(db, group_id)
    images_result = await db.execute(
        select(Images).where(Images.group_id == group_id).order_by(Images.id)  # type: ignore[arg-type]
    )

    return ApiResponse(
        message="Group details retrieved successfully",
        data=GroupDetailResponse(
            group=GroupResponse.model_validate(group),
            labelers=[SimpleLabelerResponse.model_validate(lab) for lab in labelers],
            tags=[TagResponse.model_validate(tag) for tag in tags],
            images=[ImageResponse.model_validate(img) for img in images_result.scalars().all()],
        ),
    )


@router.delete("/{group_id}", response_model=MessageResponse)
async def delete_group(
    group_id: Annotated[int, Path(description="Group ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Delete a group with its images, tags, assignments, final tags and memberships."""
    group = await get_group_or_404(db, group_id)
    await db.delete(group)
    await db.commit()

    logger.info("group_deleted", group_id=group_id)
    return MessageResponse(message="Group deleted successfully")


@router.post("/{group_id}/labelers", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def add_labeler_to_group(
    group_id: Annotated[int, Path(description="Group ID")],
    request: AddLabelerToGroupRequest,
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Assign a labeler to a group. Returns 409 if already assigned."""
    await get_group_or_404(db, group_id)
    if await db.get(Labelers, request.labeler_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Labeler not found")

    if await is_member(db, request.labeler_id, group_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Labeler is already assigned to this group",
        )

    db.add(LabelerGroups(labeler_id=request.labeler_id, group_id=group_id))
    await db.commit()

    logger.info("labeler_added_to_group", group_id=group_id, labeler_id=request.labeler_id)
    return MessageResponse(message="Labeler added to group successfully")


@router.delete("/{group_id}/labelers/{labeler_id}", response_model=MessageResponse)
async def remove_labeler_from_group(
    group_id: Annotated[int, Path(description="Group ID")],
    labeler_id: Annotated[int, Path(description="Labeler ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """
    Remove a labeler from a group.

    The labeler's tag assignments on the group's images are deleted too, so
    they stop counting towards the consensus.
    """
    await get_group_or_404(db, group_id)
    membership = await db.get(LabelerGroups, (labeler_id, group_id))
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Labeler is not assigned to this group",
        )

    removed = await delete_labeler_group_assignments(db, labeler_id, group_id)
    await db.delete(membership)
    await db.commit()

    logger.info(
        "labeler_removed_from_group",
        group_id=group_id,
        labeler_id=labeler_id,
        assignments_removed=removed,
    )
    return MessageResponse(message="Labeler removed from group successfully")


@router.get("/{group_id}/image/{image_id}", response_model=ApiResponse[AdminImageDetailResponse])
async def get_image_details(
    group_id: Annotated[int, Path(description="Group ID")],
    image_id: Annotated[int, Path(description="Image ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[AdminImageDetailResponse]:
    """Image payload with labeler agreement statistics and current final tags."""
    image = await db.get(Images, image_id)
    if image is None or image.group_id != group_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found in this group")

    return ApiResponse(
        message="Image details retrieved successfully",
        data=AdminImageDetailResponse(
            image=ImageDataResponse.model_validate(image),
            tag_statistics=await get_tag_statistics(db, image),
            final_tags=await get_final_tags(db, image_id),
            has_admin_override=await has_admin_override(db, image_id),
        ),
    )

"""
Admin endpoints for group tags
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.groups import get_group_or_404
from app.core.auth import AdminUser
from app.core.database import get_db
from app.core.logging import get_logger
from app.models.tag import Tags
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.tag import TagCreate, TagDetailResponse, TagResponse, TagUpdate
from app.services.image_tags import get_group_tags

router = APIRouter(prefix="/admin/tag", tags=["admin"])
logger = get_logger(__name__)


async def _get_tag_or_404(db: AsyncSession, tag_id: int) -> Tags:
    tag = await db.get(Tags, tag_id)
    if tag is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    return tag


async def _ensure_name_free(db: AsyncSession, name: str, group_id: int, exclude_id: int | None = None) -> None:
    query = select(Tags.id).where(Tags.name == name, Tags.group_id == group_id)  # type: ignore[call-overload]
    if exclude_id is not None:
        query = query.where(Tags.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Tag with this name already exists in this group",
        )


@router.post("", response_model=ApiResponse[TagDetailResponse], status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreate,
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[TagDetailResponse]:
    """Create a tag in a group. Names are unique within a group."""
    await get_group_or_404(db, tag_data.group_id)
    await _ensure_name_free(db, tag_data.name, tag_data.group_id)

    tag = Tags(name=tag_data.name, description=tag_data.description, group_id=tag_data.group_id)
    db.add(tag)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Tag with this name already exists in this group",
        ) from e
    await db.refresh(tag)

    logger.info("tag_created", tag_id=tag.id, group_id=tag.group_id, name=tag.name)
    return ApiResponse(message="Tag created successfully", data=TagDetailResponse.model_validate(tag))


@router.get("/group/{group_id}", response_model=ApiResponse[list[TagResponse]])
async def list_group_tags(
    group_id: Annotated[int, Path(description="Group ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[list[TagResponse]]:
    """Tags of a group ordered by id."""
    await get_group_or_404(db, group_id)
    tags = await get_group_tags(db, group_id)
    return ApiResponse(
        message="Tags retrieved successfully",
        data=[TagResponse.model_validate(tag) for tag in tags],
    )


@router.get("/{tag_id}", response_model=ApiResponse[TagDetailResponse])
async def get_tag(
    tag_id: Annotated[int, Path(description="Tag ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[TagDetailResponse]:
    """Get one tag."""
    tag = await _get_tag_or_404(db, tag_id)
    return ApiResponse(message="Tag retrieved successfully", data=TagDetailResponse.model_validate(tag))


@router.put("/{tag_id}", response_model=ApiResponse[TagDetailResponse])
async def update_tag(
    tag_id: Annotated[int, Path(description="Tag ID")],
    tag_data: TagUpdate,
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[TagDetailResponse]:
    """Rename a tag or change its description."""
    tag = await _get_tag_or_404(db, tag_id)

    if tag_data.name is not None and tag_data.name != tag.name:
        await _ensure_name_free(db, tag_data.name, tag.group_id, exclude_id=tag_id)
        tag.name = tag_data.name

    if "description" in tag_data.model_fields_set:
        tag.description = tag_data.description

    db.add(tag)
    await db.commit()
    await db.refresh(tag)

    logger.info("tag_updated", tag_id=tag_id)
    return ApiResponse(message="Tag updated successfully", data=TagDetailResponse.model_validate(tag))


@router.delete("/{tag_id}", response_model=MessageResponse)
async def delete_tag(
    tag_id: Annotated[int, Path(description="Tag ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Delete a tag. Assignments and final tags using it cascade."""
    tag = await _get_tag_or_404(db, tag_id)
    await db.delete(tag)
    await db.commit()

    logger.info("tag_deleted", tag_id=tag_id)
    return MessageResponse(message="Tag deleted successfully")

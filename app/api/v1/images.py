"""
Admin endpoints for image upload and final tags
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.groups import get_group_or_404
from app.core.auth import AdminUser
from app.core.database import get_db
from app.core.logging import bind_context, get_logger
from app.models.image import Images
from app.schemas.common import ApiResponse
from app.schemas.final_tag import FinalTagResponse, UpdateFinalTagsRequest
from app.schemas.image import ImageResponse, ImageUploadRequest
from app.services.final_tags import auto_generate_for_image, get_final_tags, replace_final_tags
from app.services.image_processing import validate_image_upload
from app.services.image_tags import validate_group_tag_ids

router = APIRouter(prefix="/admin/image", tags=["admin"])
logger = get_logger(__name__)


async def _get_image_or_404(db: AsyncSession, image_id: int) -> Images:
    image = await db.get(Images, image_id)
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return image


@router.post("", response_model=ApiResponse[ImageResponse], status_code=status.HTTP_201_CREATED)
async def upload_image(
    upload: ImageUploadRequest,
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ImageResponse]:
    """
    Upload a base64 image into a group.

    The filetype must be allowed and the payload must decode to an image
    PIL can open, within the size limit.
    """
    await get_group_or_404(db, upload.group_id)
    base64_data = validate_image_upload(upload.filetype, upload.base64_data)

    image = Images(
        filename=upload.filename,
        filetype=upload.filetype,
        base64_data=base64_data,
        group_id=upload.group_id,
    )
    db.add(image)
    await db.commit()
    await db.refresh(image)

    logger.info("image_uploaded", image_id=image.id, group_id=image.group_id, filetype=image.filetype)
    return ApiResponse(message="Image uploaded successfully", data=ImageResponse.model_validate(image))


@router.get("/{image_id}/final-tags", response_model=ApiResponse[list[FinalTagResponse]])
async def list_final_tags(
    image_id: Annotated[int, Path(description="Image ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[list[FinalTagResponse]]:
    """Current final tags of an image."""
    await _get_image_or_404(db, image_id)
    return ApiResponse(message="Final tags retrieved successfully", data=await get_final_tags(db, image_id))


@router.put("/{image_id}/final-tags", response_model=ApiResponse[list[FinalTagResponse]])
async def update_final_tags(
    image_id: Annotated[int, Path(description="Image ID")],
    request: UpdateFinalTagsRequest,
    admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[list[FinalTagResponse]]:
    """
    Set the final tags of an image by hand.

    The new set replaces the previous one and is marked as an admin override.
    Every tag must belong to the image's group.
    """
    image = await _get_image_or_404(db, image_id)
    tag_ids = await validate_group_tag_ids(db, image.group_id, request.tag_ids)

    bind_context(image_id=image_id)
    await replace_final_tags(db, image_id, tag_ids, is_admin_override=True)
    logger.info("final_tags_overridden", admin_id=admin.id, tag_count=len(tag_ids))

    return ApiResponse(message="Final tags updated successfully", data=await get_final_tags(db, image_id))


@router.post("/{image_id}/final-tags/auto-generate", response_model=ApiResponse[list[FinalTagResponse]])
async def auto_generate_final_tags(
    image_id: Annotated[int, Path(description="Image ID")],
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[list[FinalTagResponse]]:
    """
    Derive the final tags from labeler agreement.

    A tag becomes final when at least half of the labelers who tagged the
    image chose it. This replaces any admin override. When nobody has tagged
    the image yet, stored final tags are left as they are.
    """
    await _get_image_or_404(db, image_id)

    bind_context(image_id=image_id)
    final_tags = await auto_generate_for_image(db, image_id)
    if final_tags is None:
        return ApiResponse(message="No tags found for this image", data=[])

    return ApiResponse(message="Final tags generated successfully", data=final_tags)

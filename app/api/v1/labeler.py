"""
Labeler workspace endpoints: assigned groups, images and tagging
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import LabelStatus
from app.core.auth import LabelerUser
from app.core.database import get_db
from app.core.logging import get_logger
from app.models.image import Images
from app.models.image_tag import ImageTags
from app.schemas.common import ApiResponse
from app.schemas.group import GroupResponse
from app.schemas.labeler import (
    LabelerImageData,
    LabelerImageDetailResponse,
    LabelerImageItem,
    SuggestTagsRequest,
    SuggestTagsResponse,
    UpdateImageTagsRequest,
    UpdateImageTagsResponse,
)
from app.schemas.tag import TagResponse
from app.services.image_tags import get_group_tags, get_labeler_tags, replace_labeler_tags
from app.services.labeler_groups import get_groups_for_labeler, require_membership
from app.services.tag_suggester import suggest_tags

router = APIRouter(prefix="/labeler", tags=["labeler"])
logger = get_logger(__name__)


async def _get_group_image_or_404(db: AsyncSession, group_id: int, image_id: int) -> Images:
    image = await db.get(Images, image_id)
    if image is None or image.group_id != group_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found in this group")
    return image


@router.get("/groups", response_model=ApiResponse[list[GroupResponse]])
async def list_my_groups(
    labeler: LabelerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[list[GroupResponse]]:
    """Groups the current labeler is assigned to."""
    assert labeler.id is not None
    groups = await get_groups_for_labeler(db, labeler.id)
    return ApiResponse(
        message="Groups retrieved successfully",
        data=[GroupResponse.model_validate(g) for g in groups],
    )


@router.get("/groups/{group_id}/images", response_model=ApiResponse[list[LabelerImageItem]])
async def list_group_images(
    group_id: Annotated[int, Path(description="Group ID")],
    labeler: LabelerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[list[LabelerImageItem]]:
    """
    Images of a group with the current labeler's progress.

    An image is "done" once the labeler has applied at least one tag to it.
    """
    assert labeler.id is not None
    await require_membership(db, labeler.id, group_id)

    images_result = await db.execute(
        select(Images.id, Images.filename)  # type: ignore[call-overload]
        .where(Images.group_id == group_id)
        .order_by(Images.id)
    )
    images = images_result.all()

    done_result = await db.execute(
        select(ImageTags.image_id)  # type: ignore[call-overload]
        .join(Images, Images.id == ImageTags.image_id)
        .where(ImageTags.labeler_id == labeler.id, Images.group_id == group_id)
        .distinct()
    )
    done_ids = {row[0] for row in done_result.all()}

    items = [
        LabelerImageItem(
            id=image_id,
            filename=filename,
            status=LabelStatus.DONE if image_id in done_ids else LabelStatus.PENDING,
        )
        for image_id, filename in images
    ]
    return ApiResponse(message="Images retrieved successfully", data=items)


@router.get("/groups/{group_id}/images/{image_id}", response_model=ApiResponse[LabelerImageDetailResponse])
async def get_image_for_labeling(
    group_id: Annotated[int, Path(description="Group ID")],
    image_id: Annotated[int, Path(description="Image ID")],
    labeler: LabelerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LabelerImageDetailResponse]:
    """Image payload, the group's tags and the tags this labeler already chose."""
    assert labeler.id is not None
    await require_membership(db, labeler.id, group_id)
    image = await _get_group_image_or_404(db, group_id, image_id)

    group_tags = await get_group_tags(db, group_id)
    current_tags = await get_labeler_tags(db, image_id, labeler.id)

    return ApiResponse(
        message="Image retrieved successfully",
        data=LabelerImageDetailResponse(
            image=LabelerImageData(
                id=image_id,
                filename=image.filename,
                filetype=image.filetype,
                base64_data=image.base64_data,
                status=LabelStatus.DONE if current_tags else LabelStatus.PENDING,
            ),
            group_tags=[TagResponse.model_validate(t) for t in group_tags],
            current_tags=[TagResponse.model_validate(t) for t in current_tags],
        ),
    )


@router.put(
    "/groups/{group_id}/images/{image_id}/tags",
    response_model=ApiResponse[UpdateImageTagsResponse],
)
async def update_image_tags(
    group_id: Annotated[int, Path(description="Group ID")],
    image_id: Annotated[int, Path(description="Image ID")],
    request: UpdateImageTagsRequest,
    labeler: LabelerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[UpdateImageTagsResponse]:
    """
    Replace the current labeler's tags on an image.

    Other labelers' choices are not affected. Every tag must belong to the group.
    """
    assert labeler.id is not None
    await require_membership(db, labeler.id, group_id)
    image = await _get_group_image_or_404(db, group_id, image_id)

    tags = await replace_labeler_tags(db, image, labeler.id, request.tag_ids)
    return ApiResponse(
        message="Tags updated successfully",
        data=UpdateImageTagsResponse(
            image_id=image_id,
            tags=[TagResponse.model_validate(t) for t in tags],
        ),
    )


@router.post("/images/{image_id}/suggest-tags", response_model=ApiResponse[SuggestTagsResponse])
async def suggest_image_tags(
    image_id: Annotated[int, Path(description="Image ID")],
    request: SuggestTagsRequest,
    labeler: LabelerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[SuggestTagsResponse]:
    """Suggest tags from the image's group, skipping ``ignored_tags``."""
    assert labeler.id is not None
    image = await db.get(Images, image_id)
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    await require_membership(db, labeler.id, image.group_id)

    group_tags = await get_group_tags(db, image.group_id)
    suggestions = await suggest_tags(
        base64_data=image.base64_data,
        filetype=image.filetype,
        group_tags=[t.name for t in group_tags],
        ignored_tags=request.ignored_tags,
    )

    logger.info("tags_suggested", image_id=image_id, suggestion_count=len(suggestions))
    return ApiResponse(
        message="Tag suggestions generated successfully",
        data=SuggestTagsResponse(suggested_tags=suggestions),
    )

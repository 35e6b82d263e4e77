"""Bulk export of every group, image, final tag set and tag statistic."""

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.final_tag import FinalTags
from app.models.group import Groups
from app.models.image import Images
from app.models.image_tag import ImageTags
from app.models.tag import Tags
from app.schemas.export import ExportData, ExportImageData
from app.services.consensus import compute_tag_statistics

logger = get_logger(__name__)


async def bulk_export(db: AsyncSession) -> ExportData:
    """
    Build the export keyed by group id then image id, both as strings.

    Groups without images appear with an empty mapping. Loads each table once
    and groups rows in memory instead of querying per image.
    """
    groups = (await db.execute(select(Groups).order_by(Groups.id))).scalars().all()  # type: ignore[arg-type]
    images = (await db.execute(select(Images).order_by(Images.id))).scalars().all()  # type: ignore[arg-type]
    tags = (await db.execute(select(Tags).order_by(Tags.id))).scalars().all()  # type: ignore[arg-type]
    assignments = (await db.execute(select(ImageTags))).scalars().all()
    final_tags = (
        (await db.execute(select(FinalTags).order_by(FinalTags.tag_id))).scalars().all()  # type: ignore[arg-type]
    )

    tags_by_group: dict[int, list[Tags]] = defaultdict(list)
    tag_names: dict[int, str] = {}
    for tag in tags:
        tags_by_group[tag.group_id].append(tag)
        tag_names[tag.id] = tag.name  # type: ignore[index]

    assignments_by_image: dict[int, list[ImageTags]] = defaultdict(list)
    for assignment in assignments:
        assignments_by_image[assignment.image_id].append(assignment)

    finals_by_image: dict[int, list[FinalTags]] = defaultdict(list)
    for final_tag in final_tags:
        finals_by_image[final_tag.image_id].append(final_tag)

    export: dict[str, dict[str, ExportImageData]] = {str(group.id): {} for group in groups}
    for image in images:
        image_finals = finals_by_image[image.id]  # type: ignore[index]
        export[str(image.group_id)][str(image.id)] = ExportImageData(
            filename=image.filename,
            filetype=image.filetype,
            base64=image.base64_data,
            uploaded_at=image.uploaded_at,
            final_tags=[tag_names[f.tag_id] for f in image_finals],
            tag_statistics=compute_tag_statistics(
                tags_by_group[image.group_id],
                assignments_by_image[image.id],  # type: ignore[index]
            ),
            has_admin_override=any(f.is_admin_override for f in image_finals),
        )

    logger.info("bulk_export_built", group_count=len(groups), image_count=len(images))
    return ExportData(export)

"""
Admin bulk export endpoint
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AdminUser
from app.core.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.export import ExportData
from app.services.export import bulk_export

router = APIRouter(prefix="/admin/export", tags=["admin"])


@router.get("/bulk", response_model=ApiResponse[ExportData])
async def export_bulk(
    _admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ExportData]:
    """
    Export every group and image with payload, final tags and tag statistics.

    Shape: ``{group_id: {image_id: {...}}}`` with ids as strings.
    """
    return ApiResponse(message="Export completed successfully", data=await bulk_export(db))

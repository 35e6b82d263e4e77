"""
Pydantic schemas for final tags and tag statistics
"""

from pydantic import BaseModel, Field

from app.schemas.base import UTCDatetime


class TagStatistic(BaseModel):
    """How many labelers chose a tag for one image (computed, not stored)"""

    tag_id: int
    tag_name: str
    percentage: float = Field(..., ge=0.0, le=100.0)
    count: int
    total_labelers: int


class FinalTagResponse(BaseModel):
    """A final tag joined with its tag name"""

    id: int
    tag_id: int
    tag_name: str
    is_admin_override: bool
    created_at: UTCDatetime


class UpdateFinalTagsRequest(BaseModel):
    """Request schema for an admin override of the final tags"""

    tag_ids: list[int]

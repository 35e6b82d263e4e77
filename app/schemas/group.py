"""
Pydantic schemas for Group endpoints
"""

from pydantic import BaseModel, field_validator

from app.models.group import GroupBase
from app.schemas.image import ImageResponse
from app.schemas.labeler import SimpleLabelerResponse
from app.schemas.tag import TagResponse


class GroupCreate(GroupBase):
    """Schema for creating a new group"""

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, v: str) -> str:
        """Trim whitespace from name."""
        v = v.strip()
        if not v:
            raise ValueError("Group name cannot be blank")
        return v


class GroupResponse(BaseModel):
    """Schema for group response"""

    id: int
    name: str
    description: str | None = None

    model_config = {"from_attributes": True}


class GroupListResponse(BaseModel):
    """Schema for group list"""

    groups: list[GroupResponse]
    total: int


class GroupDetailResponse(BaseModel):
    """Group with its labelers, possible tags and images"""

    group: GroupResponse
    labelers: list[SimpleLabelerResponse]
    tags: list[TagResponse]
    images: list[ImageResponse]


class AddLabelerToGroupRequest(BaseModel):
    """Request schema for adding a labeler to a group"""

    labeler_id: int

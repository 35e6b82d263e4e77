"""
Pydantic schemas for labeler accounts (admin side) and the labeler workspace
"""

from pydantic import BaseModel, Field, field_validator

from app.models.labeler import LabelerBase
from app.schemas.tag import TagResponse


class LabelerCreate(LabelerBase):
    """Schema for creating a labeler account"""

    password: str = Field(..., min_length=1, max_length=255)
    group_ids: list[int] | None = None

    @field_validator("username")
    @classmethod
    def sanitize_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username cannot be blank")
        return v


class LabelerUpdate(BaseModel):
    """
    Schema for updating a labeler - all fields optional.

    When group_ids is given it replaces the labeler's memberships.
    """

    username: str | None = Field(default=None, min_length=1, max_length=50)
    password: str | None = Field(default=None, min_length=1, max_length=255)
    group_ids: list[int] | None = None

    @field_validator("username")
    @classmethod
    def sanitize_username(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip()


class LabelerResponse(BaseModel):
    """Schema for labeler response (never includes the password hash)"""

    id: int
    username: str
    group_ids: list[int] = Field(default_factory=list)


class LabelerListResponse(BaseModel):
    """Schema for labeler list"""

    labelers: list[LabelerResponse]
    total: int


class SimpleLabelerResponse(BaseModel):
    """Minimal labeler info for embedding in group details"""

    id: int
    username: str

    model_config = {"from_attributes": True}


# =============================================================================
# Labeler workspace
# =============================================================================


class LabelerImageItem(BaseModel):
    """An image in a group with the current labeler's progress"""

    id: int
    filename: str
    status: str  # "done" or "pending"


class LabelerImageData(LabelerImageItem):
    """Image payload shown on the labeling screen"""

    filetype: str
    base64_data: str


class LabelerImageDetailResponse(BaseModel):
    """Everything the labeling screen needs for one image"""

    image: LabelerImageData
    group_tags: list[TagResponse]
    current_tags: list[TagResponse]


class UpdateImageTagsRequest(BaseModel):
    """Request schema for replacing the labeler's tags on an image"""

    tag_ids: list[int]


class UpdateImageTagsResponse(BaseModel):
    """Tags now assigned by the labeler to the image"""

    image_id: int
    tags: list[TagResponse]


class SuggestTagsRequest(BaseModel):
    """Tag names the labeler already chose or wants excluded"""

    ignored_tags: list[str] = Field(default_factory=list)


class SuggestTagsResponse(BaseModel):
    """Suggested tag names"""

    suggested_tags: list[str]

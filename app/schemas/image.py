"""
Pydantic schemas for Image endpoints
"""

from pydantic import BaseModel, Field, field_validator

from app.models.image import ImageBase
from app.schemas.base import UTCDatetime
from app.schemas.final_tag import FinalTagResponse, TagStatistic


class ImageUploadRequest(ImageBase):
    """Schema for uploading an image as base64 text"""

    base64_data: str = Field(..., min_length=1)
    group_id: int

    @field_validator("filetype")
    @classmethod
    def normalize_filetype(cls, v: str) -> str:
        """Lowercase the filetype and drop a leading dot or image/ prefix."""
        v = v.strip().lower()
        if v.startswith("image/"):
            v = v[len("image/") :]
        return v.lstrip(".")


class ImageResponse(BaseModel):
    """Image metadata without payload"""

    id: int
    filename: str
    filetype: str
    uploaded_at: UTCDatetime

    model_config = {"from_attributes": True}


class ImageDataResponse(ImageResponse):
    """Image metadata with base64 payload"""

    base64_data: str


class AdminImageDetailResponse(BaseModel):
    """Image review screen: payload, labeler agreement and final tags"""

    image: ImageDataResponse
    tag_statistics: list[TagStatistic]
    final_tags: list[FinalTagResponse]
    has_admin_override: bool

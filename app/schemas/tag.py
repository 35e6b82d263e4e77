"""
Pydantic schemas for Tag endpoints
"""

from pydantic import BaseModel, Field, field_validator

from app.models.tag import TagBase


class TagCreate(TagBase):
    """Schema for creating a new tag in a group"""

    group_id: int


class TagUpdate(BaseModel):
    """Schema for updating a tag - all fields optional"""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, v: str | None) -> str | None:
        """Trim whitespace from name."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Tag name cannot be blank")
        return v

    @field_validator("description")
    @classmethod
    def sanitize_description(cls, v: str | None) -> str | None:
        """An empty description is stored as NULL."""
        if v is None:
            return v
        return v.strip() or None


class TagResponse(BaseModel):
    """Schema for tag response - what API returns"""

    id: int
    name: str
    description: str | None = None

    # Allow reading from SQLAlchemy model attributes (not just dicts)
    model_config = {"from_attributes": True}


class TagDetailResponse(TagResponse):
    """Tag response including the owning group"""

    group_id: int

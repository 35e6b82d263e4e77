"""
SQLModel-based Image models with inheritance for security

This module defines the Images database model using SQLModel. The inheritance
structure is:

ImageBase (shared public fields)
    ├─> Images (database table, adds the encoded payload)
    └─> ImageUploadRequest/ImageResponse (API schemas, defined in app/schemas)

The image payload is kept as base64 text alongside its metadata so that the
bulk export can emit it without touching any file storage.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKeyConstraint, Index, Text
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class ImageBase(SQLModel):
    """Base model with shared public fields for Images."""

    filename: str = Field(min_length=1, max_length=255)
    filetype: str = Field(min_length=1, max_length=20)


class Images(ImageBase, table=True):
    """
    Database table for images.

    Extends ImageBase with:
    - Primary key and owning group
    - Base64 payload
    - Upload timestamp
    """

    __tablename__ = "images"

    __table_args__ = (
        ForeignKeyConstraint(
            ["group_id"],
            ["labeling_groups.id"],
            ondelete="CASCADE",
            name="fk_images_group_id",
        ),
        Index("fk_images_group_id", "group_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    group_id: int

    base64_data: str = Field(sa_type=Text)
    uploaded_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))  # type: ignore[call-overload]

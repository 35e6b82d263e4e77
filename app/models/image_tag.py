"""
SQLModel-based ImageTags model.

One row per labeler choice: labeler L applied tag T to image I. These rows are
the raw votes the consensus engine counts.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKeyConstraint, Index, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class ImageTags(SQLModel, table=True):
    """
    Database table for per-labeler tag assignments.

    A labeler may apply several tags to one image, but each tag at most once.
    """

    __tablename__ = "image_tags"

    __table_args__ = (
        ForeignKeyConstraint(
            ["image_id"],
            ["images.id"],
            ondelete="CASCADE",
            name="fk_image_tags_image_id",
        ),
        ForeignKeyConstraint(
            ["labeler_id"],
            ["labelers.id"],
            ondelete="CASCADE",
            name="fk_image_tags_labeler_id",
        ),
        ForeignKeyConstraint(
            ["tag_id"],
            ["tags.id"],
            ondelete="CASCADE",
            name="fk_image_tags_tag_id",
        ),
        UniqueConstraint("image_id", "labeler_id", "tag_id", name="uq_image_tags_image_labeler_tag"),
        Index("idx_image_tags_labeler_id", "labeler_id"),
        Index("idx_image_tags_tag_id", "tag_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    image_id: int
    labeler_id: int
    tag_id: int
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))  # type: ignore[call-overload]

"""
SQLModel-based FinalTags model.

The settled tag set of an image. Rows are only ever written as a whole batch:
the previous batch for the image is deleted and the new one inserted, with
every row of a batch sharing the same is_admin_override flag and timestamp.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKeyConstraint, Index, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class FinalTags(SQLModel, table=True):
    """
    Database table for final (consensus or admin-set) tags.

    is_admin_override:
    - True: the batch was written by an administrator
    - False: the batch was derived from labeler agreement
    """

    __tablename__ = "final_tags"

    __table_args__ = (
        ForeignKeyConstraint(
            ["image_id"],
            ["images.id"],
            ondelete="CASCADE",
            name="fk_final_tags_image_id",
        ),
        ForeignKeyConstraint(
            ["tag_id"],
            ["tags.id"],
            ondelete="CASCADE",
            name="fk_final_tags_tag_id",
        ),
        UniqueConstraint("image_id", "tag_id", name="uq_final_tags_image_tag"),
        Index("idx_final_tags_tag_id", "tag_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    image_id: int
    tag_id: int
    is_admin_override: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))  # type: ignore[call-overload]

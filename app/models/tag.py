"""
SQLModel-based Tag models with inheritance for security

This module defines the Tags database model using SQLModel. The inheritance
structure is:

TagBase (shared public fields)
    ├─> Tags (database table, adds owning group)
    └─> TagCreate/TagUpdate/TagResponse (API schemas, defined in app/schemas)

Tags belong to exactly one group; a name is unique within its group.
"""

from pydantic import field_validator
from sqlalchemy import ForeignKeyConstraint, Index, UniqueConstraint
from sqlmodel import Field, SQLModel


class TagBase(SQLModel):
    """
    Base model with shared public fields for Tags.

    These fields are shared between:
    - The database table (Tags)
    - API response schemas (TagResponse)
    - API request schemas (TagCreate)
    """

    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trim surrounding whitespace so "cat" and "cat " do not coexist."""
        v = v.strip()
        if not v:
            raise ValueError("Tag name cannot be blank")
        return v

    @field_validator("description")
    @classmethod
    def blank_description_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class Tags(TagBase, table=True):
    """Database table for tags."""

    __tablename__ = "tags"

    __table_args__ = (
        ForeignKeyConstraint(
            ["group_id"],
            ["labeling_groups.id"],
            ondelete="CASCADE",
            name="fk_tags_group_id",
        ),
        UniqueConstraint("name", "group_id", name="uq_tags_name_group_id"),
        Index("fk_tags_group_id", "group_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    group_id: int

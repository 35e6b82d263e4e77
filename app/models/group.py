"""
SQLModel-based Group models with inheritance for security

A group is a labeling task: it owns images and the set of tags that may be
applied to them, and has labelers assigned to it.

GroupBase (shared public fields)
    ├─> Groups (database table)
    └─> GroupCreate/GroupResponse (API schemas, defined in app/schemas)
"""

from sqlmodel import Field, SQLModel


class GroupBase(SQLModel):
    """Base model with shared public fields for Groups."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class Groups(GroupBase, table=True):
    """
    Database table for labeling groups.

    Deleting a group cascades to its images, tags and memberships.
    """

    # "groups" is a keyword in SQLite window functions
    __tablename__ = "labeling_groups"

    id: int | None = Field(default=None, primary_key=True)

"""
SQLModel-based LabelerGroups junction table.

Records which labelers are assigned to which groups.
"""

from sqlalchemy import ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel


class LabelerGroups(SQLModel, table=True):
    """
    Database table for labeler/group membership.

    Composite primary key (labeler_id, group_id) makes a membership unique.
    """

    __tablename__ = "labeler_groups"

    __table_args__ = (
        ForeignKeyConstraint(
            ["labeler_id"],
            ["labelers.id"],
            ondelete="CASCADE",
            name="fk_labeler_groups_labeler_id",
        ),
        ForeignKeyConstraint(
            ["group_id"],
            ["labeling_groups.id"],
            ondelete="CASCADE",
            name="fk_labeler_groups_group_id",
        ),
        Index("fk_labeler_groups_group_id", "group_id"),
    )

    labeler_id: int = Field(primary_key=True)
    group_id: int = Field(primary_key=True)

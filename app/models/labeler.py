"""
SQLModel-based Labeler models with inheritance for security

This module defines the Labelers database model using SQLModel, which combines
SQLAlchemy and Pydantic functionality. The inheritance structure is:

LabelerBase (shared public fields)
    ├─> Labelers (database table, adds the password hash)
    └─> LabelerCreate/LabelerUpdate/LabelerResponse (API schemas, defined in app/schemas)

This approach keeps the password hash out of every response schema.
"""

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class LabelerBase(SQLModel):
    """
    Base model with shared public fields for Labelers.

    These fields are safe to expose via the API.
    """

    username: str = Field(min_length=1, max_length=50)


class Labelers(LabelerBase, table=True):
    """
    Database table for labeler accounts.

    Group membership lives in LabelerGroups; tag choices live in ImageTags.
    """

    __tablename__ = "labelers"

    __table_args__ = (Index("idx_labelers_username", "username", unique=True),)

    id: int | None = Field(default=None, primary_key=True)

    # Internal fields (never exposed via API)
    password_hash: str = Field(max_length=255)

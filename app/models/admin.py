"""
SQLModel-based Admin model.

Administrators manage groups, images, tags and labeler accounts. They
authenticate with the same JWT flow as labelers but carry the "admin" role.
"""

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class Admins(SQLModel, table=True):
    """Database table for administrator accounts."""

    __tablename__ = "admins"

    __table_args__ = (Index("idx_admins_username", "username", unique=True),)

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(max_length=50)

    # Internal fields (never exposed via API)
    password_hash: str = Field(max_length=255)

"""
SQLModel table models - Database schema models.

Importing this package registers every table on SQLModel.metadata, which is
what app.core.database.create_tables builds the schema from.
"""

# Accounts
from app.models.admin import Admins

# Consensus
from app.models.final_tag import FinalTags

# Labeling task
from app.models.group import Groups
from app.models.image import Images

# Junction/relationship tables
from app.models.image_tag import ImageTags
from app.models.labeler import Labelers
from app.models.labeler_group import LabelerGroups
from app.models.tag import Tags

__all__ = [
    # Accounts
    "Admins",
    "Labelers",
    # Labeling task
    "Groups",
    "Images",
    "Tags",
    # Junction/relationship tables
    "LabelerGroups",
    "ImageTags",
    # Consensus
    "FinalTags",
]

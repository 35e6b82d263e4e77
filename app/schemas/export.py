"""
Pydantic schemas for the bulk export
"""

from pydantic import BaseModel, RootModel

from app.schemas.base import UTCDatetime
from app.schemas.final_tag import TagStatistic


class ExportImageData(BaseModel):
    """One image in the export"""

    filename: str
    filetype: str
    base64: str
    uploaded_at: UTCDatetime
    final_tags: list[str]
    tag_statistics: list[TagStatistic]
    has_admin_override: bool


class ExportData(RootModel[dict[str, dict[str, ExportImageData]]]):
    """Export keyed by group id, then image id (both as strings)"""

"""
Base schema with UTC datetime serialization.

Provides UTCDatetime type annotation that serializes datetime
objects with millisecond precision and a Z suffix indicating UTC.
"""

from datetime import datetime
from typing import Annotated

from pydantic import PlainSerializer

from app.utils.timestamps import format_iso_millis

# Custom datetime type that serializes as 2024-05-01T12:30:00.000Z
# Usage: created_at: UTCDatetime instead of created_at: datetime
UTCDatetime = Annotated[
    datetime,
    PlainSerializer(
        lambda dt: format_iso_millis(dt) if dt else None,
        return_type=str,
    ),
]

"""
Utility functions
"""

from app.utils.timestamps import as_utc, format_iso_millis, utc_now

__all__ = [
    "as_utc",
    "format_iso_millis",
    "utc_now",
]

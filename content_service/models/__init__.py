"""
Data models for the content service.

This package contains the entity models shared by the store backends,
the recommendation engine and the web layer.
"""

from .entities import Article, Interaction, InteractionType, User
from .utils import (
    format_long_date,
    format_long_datetime,
    is_valid_object_id,
    new_object_id,
    unique_strings,
    utc_now,
)

__all__ = [
    "Article",
    "Interaction",
    "InteractionType",
    "User",
    "format_long_date",
    "format_long_datetime",
    "is_valid_object_id",
    "new_object_id",
    "unique_strings",
    "utc_now",
]

"""
Entity models for users, articles and interactions.

This module contains Pydantic models for the three collections owned by
the content store. Interests and tags are kept as de-duplicated lists so
that JSON output stays deterministic while membership checks use sets.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional, Set

from pydantic import AfterValidator, BaseModel, Field, field_validator

from .utils import ensure_aware, is_valid_object_id, new_object_id, unique_strings, utc_now


def _check_object_id(value: str) -> str:
    if not is_valid_object_id(value):
        raise ValueError(f"'{value}' is not a valid identifier")
    return value


ObjectIdStr = Annotated[str, AfterValidator(_check_object_id)]


class InteractionType(Enum):
    """Allowed interaction types between users and articles."""

    VIEW = "view"
    LIKE = "like"

    @classmethod
    def is_valid(cls, interaction_type: str) -> bool:
        """Check if an interaction type string is valid."""
        try:
            cls(interaction_type)
            return True
        except ValueError:
            return False

    @classmethod
    def get_allowed_types(cls) -> set[str]:
        """Get all allowed interaction type strings."""
        return {t.value for t in cls}


class User(BaseModel):
    """A registered reader with declared topic interests."""
    id: ObjectIdStr = Field(default_factory=new_object_id, description="Store identifier")
    username: str = Field(description="Unique account name")
    interests: List[str] = Field(default_factory=list, description="Topics the user follows")
    created_at: datetime = Field(default_factory=utc_now, description="Account creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last profile update")

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username must not be blank")
        return value

    @field_validator("interests", mode="before")
    @classmethod
    def _normalize_interests(cls, value):
        return unique_strings(value if isinstance(value, (list, tuple, set)) else [])

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware_timestamps(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    def interest_set(self) -> Set[str]:
        return set(self.interests)


class Article(BaseModel):
    """A piece of content that can be recommended."""
    id: ObjectIdStr = Field(default_factory=new_object_id, description="Store identifier")
    title: str = Field(description="Headline of the article")
    content: str = Field(description="Full text of the article")
    author: str = Field(description="Name of the author")
    summary: Optional[str] = Field(default=None, description="Optional short excerpt")
    tags: List[str] = Field(default_factory=list, description="Topic tags")
    created_at: datetime = Field(default_factory=utc_now, description="Publication time, the 'newest' ordering key")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update time")

    @field_validator("title", "content", "author")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("field must not be blank")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        return unique_strings(value if isinstance(value, (list, tuple, set)) else [])

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware_timestamps(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    def tag_set(self) -> Set[str]:
        return set(self.tags)

    def to_dict(self) -> dict:
        """Public JSON shape used by the article endpoints."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": self.author,
            "summary": self.summary,
            "tags": self.tags,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class Interaction(BaseModel):
    """A recorded event linking a user to an article."""
    id: ObjectIdStr = Field(default_factory=new_object_id, description="Store identifier")
    user_id: ObjectIdStr = Field(description="Identifier of the interacting user")
    article_id: ObjectIdStr = Field(description="Identifier of the article")
    interaction_type: InteractionType = Field(description="Kind of interaction")
    created_at: datetime = Field(default_factory=utc_now, description="When the interaction happened")

    @field_validator("created_at")
    @classmethod
    def _aware_timestamp(cls, value: datetime) -> datetime:
        return ensure_aware(value)

"""
Interaction recording service.

Interactions are append-only: once recorded they are only read back by
the recommendation engine.
"""
import logging
from typing import Any, Dict

from content_service.errors import InternalError, InvalidInputError, NotFoundError, StoreError
from content_service.models import (
    Interaction,
    InteractionType,
    format_long_datetime,
    is_valid_object_id,
)
from content_service.store import ContentStore

logger = logging.getLogger(__name__)

FIELDS_REQUIRED_MESSAGE = "Please provide user ID, article ID, and interaction type. All fields are required."
REFERENCE_NOT_FOUND_MESSAGE = "The specified user or article was not found. Please check your IDs."
INTERACTION_RECORDED_MESSAGE = "Interaction recorded successfully!"
INTERACTION_FAILED_MESSAGE = "Something went wrong while recording your interaction. Please try again."


class InteractionService:
    """Service for recording user-article interactions."""

    def __init__(self, store: ContentStore):
        self.store = store

    def record_interaction(self, user_id: Any, article_id: Any, interaction_type: Any) -> Dict[str, Any]:
        """Record an interaction and return the response body.

        Args:
            user_id: Identifier of the interacting user
            article_id: Identifier of the article
            interaction_type: One of the InteractionType values

        Returns:
            JSON-ready dictionary describing the recorded interaction
        """
        if not user_id or not article_id or not interaction_type:
            raise InvalidInputError(FIELDS_REQUIRED_MESSAGE)
        if not InteractionType.is_valid(interaction_type):
            allowed = ", ".join(sorted(InteractionType.get_allowed_types()))
            raise InvalidInputError(f"Interaction type must be one of: {allowed}.")
        if not is_valid_object_id(user_id) or not is_valid_object_id(article_id):
            raise NotFoundError(REFERENCE_NOT_FOUND_MESSAGE)

        try:
            user = self.store.find_user_by_id(user_id)
            article = self.store.find_article_by_id(article_id)
            if user is None or article is None:
                raise NotFoundError(REFERENCE_NOT_FOUND_MESSAGE)

            interaction = self.store.create_interaction(Interaction(
                user_id=user.id,
                article_id=article.id,
                interaction_type=InteractionType(interaction_type),
            ))
        except StoreError as e:
            logger.error(f"Error creating interaction for user {user_id}: {e}")
            raise InternalError(INTERACTION_FAILED_MESSAGE) from e

        logger.info(
            f"Recorded {interaction.interaction_type.value} by user {user.id} on article {article.id}"
        )
        return {
            "success": True,
            "message": INTERACTION_RECORDED_MESSAGE,
            "interaction": {
                "id": interaction.id,
                "user": user.username,
                "article": article.title,
                "type": interaction.interaction_type.value,
                "timestamp": format_long_datetime(interaction.created_at),
            },
        }

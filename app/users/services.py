"""
User account services.
"""
import logging
from typing import Any, Dict, Optional

from content_service.errors import (
    ConflictError,
    DuplicateUsernameError,
    InternalError,
    InvalidInputError,
    StoreError,
)
from content_service.models import User, format_long_date
from content_service.store import ContentStore

logger = logging.getLogger(__name__)

USERNAME_REQUIRED_MESSAGE = "Please provide a valid username"
USERNAME_TAKEN_MESSAGE = "This username is already taken. Please choose a different one."
USER_CREATED_MESSAGE = "User created successfully! Welcome aboard!"
USER_CREATE_FAILED_MESSAGE = "Something went wrong while creating your account. Please try again."


class UserService:
    """Service for creating user accounts."""

    def __init__(self, store: ContentStore):
        self.store = store

    def create_user(self, username: Any, interests: Any = None) -> User:
        """Create a new account.

        Args:
            username: Requested username, stripped before use
            interests: List of topics; anything else is treated as no interests

        Raises:
            InvalidInputError: blank username
            ConflictError: username already taken
            InternalError: store failure
        """
        if not isinstance(username, str) or not username.strip():
            raise InvalidInputError(USERNAME_REQUIRED_MESSAGE)
        username = username.strip()

        try:
            if self.store.find_user_by_username(username):
                raise ConflictError(USERNAME_TAKEN_MESSAGE)
            user = User(
                username=username,
                interests=interests if isinstance(interests, list) else [],
            )
            return self.store.create_user(user)
        except DuplicateUsernameError as e:
            raise ConflictError(USERNAME_TAKEN_MESSAGE) from e
        except StoreError as e:
            logger.error(f"Error creating user {username}: {e}")
            raise InternalError(USER_CREATE_FAILED_MESSAGE) from e

    @staticmethod
    def to_response(user: User) -> Dict[str, Optional[Any]]:
        """Build the JSON body returned after account creation."""
        return {
            "success": True,
            "message": USER_CREATED_MESSAGE,
            "user": {
                "id": user.id,
                "username": user.username,
                "interests": user.interests,
                "memberSince": format_long_date(user.created_at),
            },
        }

"""
Article services for creating, listing and fetching articles.
"""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from content_service.errors import InternalError, InvalidInputError, NotFoundError, StoreError
from content_service.models import Article, is_valid_object_id
from content_service.store import ContentStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "title, content and author are required field and must be provided"
ARTICLE_NOT_FOUND_MESSAGE = "Article not found"
ARTICLE_STORE_FAILED_MESSAGE = "Something went wrong while loading articles. Please try again."

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ArticleService:
    """Service for article persistence and retrieval."""

    def __init__(self, store: ContentStore):
        self.store = store

    def create_article(
        self,
        title: Any,
        content: Any,
        author: Any,
        summary: Any = None,
        tags: Any = None,
    ) -> Article:
        """Validate and persist a new article.

        Summary defaults to None and non-list tags are replaced by an empty list.
        """
        if not all(isinstance(v, str) and v.strip() for v in (title, content, author)):
            raise InvalidInputError(REQUIRED_FIELDS_MESSAGE)

        try:
            article = Article(
                title=title,
                content=content,
                author=author,
                summary=summary if isinstance(summary, str) else None,
                tags=tags if isinstance(tags, list) else [],
            )
        except ValidationError as e:
            raise InvalidInputError(REQUIRED_FIELDS_MESSAGE) from e

        try:
            return self.store.create_article(article)
        except StoreError as e:
            logger.error(f"Error creating article: {e}")
            raise InternalError(ARTICLE_STORE_FAILED_MESSAGE) from e

    def list_articles(self, limit: Any = None, offset: Any = None) -> Dict[str, Any]:
        """
        Get a page of articles, newest first.

        Args:
            limit: Page size (default 10, capped at 100)
            offset: Number of articles to skip (default 0)

        Returns:
            Dictionary with items, total, limit and offset
        """
        limit = _parse_int(limit) or DEFAULT_PAGE_SIZE
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(_parse_int(offset) or 0, 0)

        try:
            items = self.store.list_articles(limit=limit, offset=offset)
            total = self.store.count_articles()
        except StoreError as e:
            logger.error(f"Error listing articles: {e}")
            raise InternalError(ARTICLE_STORE_FAILED_MESSAGE) from e

        return {
            "items": [article.to_dict() for article in items],
            "total": total,
            "limit": limit,
            "offset": offset,
        }

    def get_article(self, article_id: str) -> Article:
        """Get a single article; malformed identifiers are reported as not found."""
        if not is_valid_object_id(article_id):
            raise NotFoundError(ARTICLE_NOT_FOUND_MESSAGE)
        try:
            article = self.store.find_article_by_id(article_id)
        except StoreError as e:
            logger.error(f"Error loading article {article_id}: {e}")
            raise InternalError(ARTICLE_STORE_FAILED_MESSAGE) from e
        if article is None:
            raise NotFoundError(ARTICLE_NOT_FOUND_MESSAGE)
        return article

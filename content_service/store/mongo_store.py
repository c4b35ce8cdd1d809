"""
MongoDB content store.

Documents keep the shape used by the original service collections:

- users:        {_id, username, interests, createdAt, updatedAt}
- articles:     {_id, title, content, author, summary, tags, createdAt, updatedAt}
- interactions: {_id, user, article, interactionType, createdAt, updatedAt}
"""

import logging
from functools import wraps
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import (
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    ServerSelectionTimeoutError,
)

from ..errors import DuplicateRecordError, DuplicateUsernameError, StoreError, StoreTimeoutError
from ..models import Article, Interaction, User

logger = logging.getLogger(__name__)


def _is_username_key(error: DuplicateKeyError) -> bool:
    key_pattern = (error.details or {}).get("keyPattern") or {}
    if key_pattern:
        return "username" in key_pattern
    # Older servers only report the index name in the message.
    return "username_1" in str(error)


def _translate_errors(func):
    """Re-raise driver exceptions as store errors."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DuplicateKeyError as e:
            if _is_username_key(e):
                raise DuplicateUsernameError(str(e)) from e
            raise DuplicateRecordError(str(e)) from e
        except (ExecutionTimeout, NetworkTimeout, ServerSelectionTimeoutError) as e:
            raise StoreTimeoutError(str(e)) from e
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    return wrapper


def _oid(value: str) -> ObjectId:
    return ObjectId(value)


def _user_from_doc(doc: Dict[str, Any]) -> User:
    return User(
        id=str(doc["_id"]),
        username=doc["username"],
        interests=doc.get("interests") or [],
        created_at=doc["createdAt"],
        updated_at=doc.get("updatedAt") or doc["createdAt"],
    )


def _article_from_doc(doc: Dict[str, Any]) -> Article:
    return Article(
        id=str(doc["_id"]),
        title=doc["title"],
        content=doc["content"],
        author=doc["author"],
        summary=doc.get("summary"),
        tags=doc.get("tags") or [],
        created_at=doc["createdAt"],
        updated_at=doc.get("updatedAt") or doc["createdAt"],
    )


class MongoContentStore:
    """Content store backed by a MongoDB database."""

    def __init__(self, database, create_indexes: bool = True):
        """
        Initialize MongoContentStore.

        Args:
            database: pymongo Database instance
            create_indexes: Whether to ensure collection indexes on startup
        """
        self.db = database
        self.users = database["users"]
        self.articles = database["articles"]
        self.interactions = database["interactions"]
        if create_indexes:
            self.ensure_indexes()

    @classmethod
    def from_uri(
        cls,
        uri: str,
        db_name: str,
        server_selection_timeout_ms: int = 5000,
    ) -> "MongoContentStore":
        """Connect to MongoDB and build a store for ``db_name``."""
        client = MongoClient(uri, serverSelectionTimeoutMS=server_selection_timeout_ms)
        logger.info(f"Connecting to MongoDB database {db_name}")
        return cls(client[db_name])

    @_translate_errors
    def ensure_indexes(self) -> None:
        self.users.create_index([("username", ASCENDING)], unique=True)
        # Supports the interest-match query.
        self.articles.create_index([("tags", ASCENDING)])
        # Supports the popularity aggregation.
        self.interactions.create_index([("article", ASCENDING)])
        self.interactions.create_index([("user", ASCENDING), ("article", ASCENDING)])

    # Users ------------------------------------------------------------------

    @_translate_errors
    def create_user(self, user: User) -> User:
        self.users.insert_one({
            "_id": _oid(user.id),
            "username": user.username,
            "interests": list(user.interests),
            "createdAt": user.created_at,
            "updatedAt": user.updated_at,
        })
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    @_translate_errors
    def find_user_by_id(self, user_id: str) -> Optional[User]:
        doc = self.users.find_one({"_id": _oid(user_id)})
        return _user_from_doc(doc) if doc else None

    @_translate_errors
    def find_user_by_username(self, username: str) -> Optional[User]:
        doc = self.users.find_one({"username": username})
        return _user_from_doc(doc) if doc else None

    # Articles ---------------------------------------------------------------

    @_translate_errors
    def create_article(self, article: Article) -> Article:
        self.articles.insert_one({
            "_id": _oid(article.id),
            "title": article.title,
            "content": article.content,
            "author": article.author,
            "summary": article.summary,
            "tags": list(article.tags),
            "createdAt": article.created_at,
            "updatedAt": article.updated_at,
        })
        logger.info(f"Created article {article.id}")
        return article

    @_translate_errors
    def find_article_by_id(self, article_id: str) -> Optional[Article]:
        doc = self.articles.find_one({"_id": _oid(article_id)})
        return _article_from_doc(doc) if doc else None

    @_translate_errors
    def list_articles(self, limit: int, offset: int = 0) -> List[Article]:
        cursor = self.articles.find().sort("createdAt", DESCENDING).skip(offset).limit(limit)
        return [_article_from_doc(doc) for doc in cursor]

    @_translate_errors
    def count_articles(self) -> int:
        return self.articles.count_documents({})

    @_translate_errors
    def find_articles_by_tags_excluding(
        self,
        tags: Set[str],
        excluded_ids: Set[str],
        limit: int,
    ) -> List[Article]:
        if not tags or limit <= 0:
            return []
        query = {
            "tags": {"$in": sorted(tags)},
            "_id": {"$nin": [_oid(i) for i in excluded_ids]},
        }
        cursor = self.articles.find(query).sort("createdAt", DESCENDING).limit(limit)
        return [_article_from_doc(doc) for doc in cursor]

    @_translate_errors
    def find_articles_by_ids(self, article_ids: Iterable[str]) -> List[Article]:
        ids = [_oid(i) for i in article_ids]
        if not ids:
            return []
        return [_article_from_doc(doc) for doc in self.articles.find({"_id": {"$in": ids}})]

    # Interactions -----------------------------------------------------------

    @_translate_errors
    def create_interaction(self, interaction: Interaction) -> Interaction:
        self.interactions.insert_one({
            "_id": _oid(interaction.id),
            "user": _oid(interaction.user_id),
            "article": _oid(interaction.article_id),
            "interactionType": interaction.interaction_type.value,
            "createdAt": interaction.created_at,
            "updatedAt": interaction.created_at,
        })
        return interaction

    @_translate_errors
    def distinct_interacted_articles(self, user_id: str) -> Set[str]:
        return {str(a) for a in self.interactions.distinct("article", {"user": _oid(user_id)})}

    @_translate_errors
    def aggregate_interaction_counts_by_article(self, limit: int) -> Sequence[Tuple[str, int]]:
        pipeline = [
            {"$group": {"_id": "$article", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
            {"$limit": limit},
        ]
        return [(str(row["_id"]), row["count"]) for row in self.interactions.aggregate(pipeline)]

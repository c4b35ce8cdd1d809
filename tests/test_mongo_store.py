"""
Tests for the MongoDB content store against mocked collections.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from content_service.errors import (
    DuplicateRecordError,
    DuplicateUsernameError,
    StoreError,
    StoreTimeoutError,
)
from content_service.models import Article, Interaction, InteractionType, User
from content_service.store import MongoContentStore


def _article_doc(title="Doc", tags=None):
    return {
        "_id": ObjectId(),
        "title": title,
        "content": "content",
        "author": "Linus",
        "summary": None,
        "tags": tags or ["tech"],
        "createdAt": datetime(2025, 2, 1, 12, 0),
        "updatedAt": datetime(2025, 2, 1, 12, 0),
    }


class TestMongoContentStore:
    """Test query construction and document mapping."""

    @pytest.fixture
    def db(self):
        return {
            "users": MagicMock(),
            "articles": MagicMock(),
            "interactions": MagicMock(),
        }

    @pytest.fixture
    def store(self, db):
        return MongoContentStore(db)

    def test_indexes_created_on_init(self, db, store):
        db["users"].create_index.assert_called_once_with([("username", 1)], unique=True)
        db["articles"].create_index.assert_called_once_with([("tags", 1)])
        assert db["interactions"].create_index.call_count == 2

    def test_find_user_by_id_maps_document(self, db, store):
        oid = ObjectId()
        db["users"].find_one.return_value = {
            "_id": oid,
            "username": "alice",
            "interests": ["tech"],
            "createdAt": datetime(2025, 1, 1),
            "updatedAt": datetime(2025, 1, 2),
        }

        user = store.find_user_by_id(str(oid))

        db["users"].find_one.assert_called_once_with({"_id": oid})
        assert user.id == str(oid)
        assert user.interests == ["tech"]
        assert user.created_at == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_missing_user_returns_none(self, db, store):
        db["users"].find_one.return_value = None
        assert store.find_user_by_id(str(ObjectId())) is None

    def test_tag_query(self, db, store):
        excluded = ObjectId()
        doc = _article_doc()
        cursor = db["articles"].find.return_value
        cursor.sort.return_value.limit.return_value = [doc]

        result = store.find_articles_by_tags_excluding({"tech", "ai"}, {str(excluded)}, limit=10)

        db["articles"].find.assert_called_once_with({
            "tags": {"$in": ["ai", "tech"]},
            "_id": {"$nin": [excluded]},
        })
        cursor.sort.assert_called_once_with("createdAt", DESCENDING)
        cursor.sort.return_value.limit.assert_called_once_with(10)
        assert [a.id for a in result] == [str(doc["_id"])]

    def test_empty_tags_skip_query(self, db, store):
        assert store.find_articles_by_tags_excluding(set(), set(), limit=10) == []
        db["articles"].find.assert_not_called()

    def test_popularity_aggregation(self, db, store):
        first, second = ObjectId(), ObjectId()
        db["interactions"].aggregate.return_value = [
            {"_id": first, "count": 5},
            {"_id": second, "count": 2},
        ]

        result = store.aggregate_interaction_counts_by_article(limit=20)

        db["interactions"].aggregate.assert_called_once_with([
            {"$group": {"_id": "$article", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
            {"$limit": 20},
        ])
        assert result == [(str(first), 5), (str(second), 2)]

    def test_distinct_interacted_articles(self, db, store):
        user_id, article_id = ObjectId(), ObjectId()
        db["interactions"].distinct.return_value = [article_id]

        assert store.distinct_interacted_articles(str(user_id)) == {str(article_id)}
        db["interactions"].distinct.assert_called_once_with("article", {"user": user_id})

    def test_create_interaction_document_shape(self, db, store):
        interaction = Interaction(
            user_id=str(ObjectId()),
            article_id=str(ObjectId()),
            interaction_type=InteractionType.LIKE,
        )

        store.create_interaction(interaction)

        doc = db["interactions"].insert_one.call_args.args[0]
        assert doc["user"] == ObjectId(interaction.user_id)
        assert doc["article"] == ObjectId(interaction.article_id)
        assert doc["interactionType"] == "like"

    def test_duplicate_username_key_maps_to_duplicate_username(self, db, store):
        db["users"].insert_one.side_effect = DuplicateKeyError(
            "E11000 duplicate key error", 11000,
            {"keyPattern": {"username": 1}, "keyValue": {"username": "taken"}},
        )
        with pytest.raises(DuplicateUsernameError):
            store.create_user(User(username="taken"))

    def test_duplicate_id_is_not_a_username_conflict(self, db, store):
        db["articles"].insert_one.side_effect = DuplicateKeyError(
            "E11000 duplicate key error", 11000, {"keyPattern": {"_id": 1}, "keyValue": {}},
        )
        article = Article(title="Again", content="c", author="a")

        with pytest.raises(DuplicateRecordError) as exc_info:
            store.create_article(article)
        assert not isinstance(exc_info.value, DuplicateUsernameError)

    def test_timeouts_map_to_store_timeout(self, db, store):
        db["users"].find_one.side_effect = ServerSelectionTimeoutError("no servers")
        with pytest.raises(StoreTimeoutError):
            store.find_user_by_id(str(ObjectId()))

    def test_driver_errors_map_to_store_error(self, db, store):
        db["interactions"].aggregate.side_effect = OperationFailure("bad pipeline")
        with pytest.raises(StoreError):
            store.aggregate_interaction_counts_by_article(limit=20)

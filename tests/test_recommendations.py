"""
Tests for the recommendation engine.
"""

import concurrent.futures
import json
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from config_manager import ConfigManager

from content_service.errors import (
    CancelledError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    StoreError,
    StoreTimeoutError,
)
from content_service.models import Article, Interaction, InteractionType, User, new_object_id
from content_service.recommendations import (
    RecommendationEngine,
    RecommendationReason,
    RecommendationResult,
    RecommendedUser,
    build_default_engine,
)
from content_service.store import JsonContentStore

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)
EMPTY_MESSAGE = "No recommendations available right now. Try adding more interests or check back later."


@pytest.fixture
def store(tmp_path):
    return JsonContentStore(tmp_path / "data")


def _user(store, username, interests=None):
    return store.create_user(User(username=username, interests=interests or []))


def _article(store, title, tags=None, days=0):
    return store.create_article(Article(
        title=title,
        content=f"{title} body",
        author="Ada",
        summary=f"{title} summary",
        tags=tags or [],
        created_at=BASE_TIME + timedelta(days=days),
    ))


def _interact(store, user, article, times=1, kind=InteractionType.VIEW):
    for _ in range(times):
        store.create_interaction(Interaction(
            user_id=user.id,
            article_id=article.id,
            interaction_type=kind,
        ))


def _ids(result):
    return [rec.id for rec in result.recommendations]


def _mock_store(user=None):
    mock = MagicMock()
    mock.find_user_by_id.return_value = user
    mock.distinct_interacted_articles.return_value = set()
    mock.find_articles_by_tags_excluding.return_value = []
    mock.aggregate_interaction_counts_by_article.return_value = []
    mock.find_articles_by_ids.return_value = []
    return mock


class TestExampleScenarios:
    """End-to-end scenarios against the JSON store."""

    def test_interest_matches_exclude_viewed_and_are_newest_first(self, store):
        user = _user(store, "u1", ["tech"])
        a1 = _article(store, "A1", ["tech"], days=3)
        a2 = _article(store, "A2", ["tech"], days=2)
        a3 = _article(store, "A3", ["tech"], days=1)
        _interact(store, user, a1)

        result = RecommendationEngine(store).compute_recommendations(user.id)

        assert _ids(result) == [a2.id, a3.id]
        assert all(r.reason is RecommendationReason.INTEREST_MATCH for r in result.recommendations)
        assert result.total == 2
        assert result.message == "Found 2 recommendations for you!"

    def test_user_without_interests_gets_popular_articles_in_count_order(self, store):
        user = _user(store, "u2")
        other = _user(store, "other")
        a4 = _article(store, "A4")
        a5 = _article(store, "A5")
        a6 = _article(store, "A6")
        _interact(store, other, a6, times=1)
        _interact(store, other, a5, times=3, kind=InteractionType.LIKE)
        _interact(store, other, a4, times=5)

        result = RecommendationEngine(store).compute_recommendations(user.id)

        assert _ids(result) == [a4.id, a5.id, a6.id]
        assert all(r.reason is RecommendationReason.POPULAR for r in result.recommendations)
        assert result.total == 3

    def test_more_than_ten_interest_matches_are_capped(self, store):
        user = _user(store, "u3", ["ai"])
        other = _user(store, "other")
        articles = [_article(store, f"ai-{i}", ["ai"], days=i) for i in range(12)]
        popular = _article(store, "popular", ["sports"])
        _interact(store, other, popular, times=10)

        result = RecommendationEngine(store).compute_recommendations(user.id)

        expected = [a.id for a in sorted(articles, key=lambda a: a.created_at, reverse=True)[:10]]
        assert _ids(result) == expected
        assert popular.id not in _ids(result)
        assert all(r.reason is RecommendationReason.INTEREST_MATCH for r in result.recommendations)

    def test_unknown_user_is_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            RecommendationEngine(store).compute_recommendations(new_object_id())
        assert exc_info.value.status_code == 404

    def test_blank_identifier_is_invalid_without_store_access(self):
        mock = _mock_store()
        with pytest.raises(InvalidInputError):
            RecommendationEngine(mock).compute_recommendations("")
        assert mock.method_calls == []

    def test_no_matches_and_no_interactions_yields_empty_result(self, store):
        user = _user(store, "u6", ["gardening"])
        _article(store, "unrelated", ["tech"])

        result = RecommendationEngine(store).compute_recommendations(user.id)

        assert result.recommendations == []
        assert result.total == 0
        assert result.message == EMPTY_MESSAGE
        assert result.to_dict()["success"] is True


class TestEngineProperties:
    """Invariants the engine holds for every user."""

    @pytest.mark.parametrize("user_id", [None, "", "   ", "not-an-id", "123", "g" * 24, 42])
    def test_invalid_identifiers_never_reach_the_store(self, user_id):
        mock = _mock_store()
        with pytest.raises(InvalidInputError):
            RecommendationEngine(mock).compute_recommendations(user_id)
        assert mock.method_calls == []

    def test_blank_and_malformed_identifiers_have_distinct_messages(self):
        engine = RecommendationEngine(_mock_store())
        with pytest.raises(InvalidInputError) as blank:
            engine.compute_recommendations(" ")
        with pytest.raises(InvalidInputError) as malformed:
            engine.compute_recommendations("abc")
        assert blank.value.message == "Please provide a valid user ID"
        assert malformed.value.message == "The user ID format is not valid. Please check and try again."

    def test_padded_identifier_is_malformed(self):
        mock = _mock_store()
        with pytest.raises(InvalidInputError) as exc_info:
            RecommendationEngine(mock).compute_recommendations(f" {new_object_id()} ")
        assert exc_info.value.message == "The user ID format is not valid. Please check and try again."
        assert mock.method_calls == []

    def test_configured_cap_above_ten_still_returns_ten(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"recommendations": {"max_results": 15}}), encoding="utf-8")
        config = ConfigManager(str(config_file)).get_recommendation_config()
        mock = _mock_store(User(username="greedy", interests=["tech"]))
        mock.find_articles_by_tags_excluding.side_effect = lambda tags, excluded, limit: [
            Article(title=f"t{i}", content="c", author="a", tags=["tech"]) for i in range(15)
        ][:limit]

        engine = build_default_engine(mock, config)
        result = engine.compute_recommendations(new_object_id())

        assert engine.max_results == 10
        assert result.total == 10

    def test_engine_rejects_cap_above_ten(self):
        with pytest.raises(ValueError):
            RecommendationEngine(MagicMock(), max_results=11)

    def test_viewed_articles_never_recommended(self, store):
        user = _user(store, "reader", ["tech"])
        other = _user(store, "other")
        seen_match = _article(store, "seen match", ["tech"], days=5)
        seen_popular = _article(store, "seen popular", ["news"])
        fresh = _article(store, "fresh", ["news"])
        _interact(store, user, seen_match)
        _interact(store, user, seen_popular, kind=InteractionType.LIKE)
        _interact(store, other, seen_popular, times=9)
        _interact(store, other, seen_match, times=9)
        _interact(store, other, fresh, times=2)

        result = RecommendationEngine(store).compute_recommendations(user.id)

        assert _ids(result) == [fresh.id]

    def test_output_never_exceeds_ten(self, store):
        user = _user(store, "busy", ["tech"])
        other = _user(store, "other")
        for i in range(4):
            _article(store, f"tech-{i}", ["tech"], days=i)
        for i in range(15):
            _interact(store, other, _article(store, f"pop-{i}"), times=i + 1)

        result = RecommendationEngine(store).compute_recommendations(user.id)

        assert result.total == 10
        reasons = [r.reason for r in result.recommendations]
        assert reasons[:4] == [RecommendationReason.INTEREST_MATCH] * 4
        assert reasons[4:] == [RecommendationReason.POPULAR] * 6

    def test_article_matching_both_strategies_appears_once(self, store):
        user = _user(store, "dup", ["tech"])
        other = _user(store, "other")
        both = _article(store, "both", ["tech"])
        popular_only = _article(store, "popular only", ["sports"])
        _interact(store, other, both, times=5)
        _interact(store, other, popular_only, times=3)

        result = RecommendationEngine(store).compute_recommendations(user.id)

        assert _ids(result) == [both.id, popular_only.id]
        assert result.recommendations[0].reason is RecommendationReason.INTEREST_MATCH
        assert result.recommendations[1].reason is RecommendationReason.POPULAR

    def test_full_interest_list_skips_popularity_when_sequential(self, store):
        user = _user(store, "seq", ["ai"])
        for i in range(10):
            _article(store, f"ai-{i}", ["ai"], days=i)
        spy = MagicMock(wraps=store)

        result = RecommendationEngine(spy, parallel_queries=False).compute_recommendations(user.id)

        assert result.total == 10
        spy.aggregate_interaction_counts_by_article.assert_not_called()
        spy.find_articles_by_ids.assert_not_called()

    def test_user_without_interests_skips_interest_query(self, store):
        user = _user(store, "blank")
        other = _user(store, "other")
        _interact(store, other, _article(store, "hit", ["tech"]), times=2)
        spy = MagicMock(wraps=store)

        result = RecommendationEngine(spy).compute_recommendations(user.id)

        spy.find_articles_by_tags_excluding.assert_not_called()
        assert [r.reason for r in result.recommendations] == [RecommendationReason.POPULAR]

    def test_popularity_order_survives_unordered_materialization(self):
        user = User(username="pop")
        first = Article(title="first", content="c", author="a")
        second = Article(title="second", content="c", author="a")
        mock = _mock_store(user)
        mock.aggregate_interaction_counts_by_article.return_value = [(first.id, 7), (second.id, 2)]
        mock.find_articles_by_ids.return_value = [second, first]

        result = RecommendationEngine(mock).compute_recommendations(user.id)

        assert _ids(result) == [first.id, second.id]
        mock.aggregate_interaction_counts_by_article.assert_called_once_with(20)

    def test_popular_candidates_deleted_since_counting_are_skipped(self):
        user = User(username="gone")
        kept = Article(title="kept", content="c", author="a")
        mock = _mock_store(user)
        mock.aggregate_interaction_counts_by_article.return_value = [(new_object_id(), 9), (kept.id, 1)]
        mock.find_articles_by_ids.return_value = [kept]

        result = RecommendationEngine(mock).compute_recommendations(user.id)

        assert _ids(result) == [kept.id]

    def test_engine_never_writes(self):
        user = User(username="ro", interests=["tech"])
        mock = _mock_store(user)

        RecommendationEngine(mock).compute_recommendations(user.id)

        mock.create_user.assert_not_called()
        mock.create_article.assert_not_called()
        mock.create_interaction.assert_not_called()


class TestEngineFailures:
    """Store failures surface as engine errors without partial results."""

    def test_store_failure_in_user_lookup_is_internal(self):
        mock = _mock_store()
        mock.find_user_by_id.side_effect = StoreError("connection refused")

        with pytest.raises(InternalError) as exc_info:
            RecommendationEngine(mock).compute_recommendations(new_object_id())

        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, StoreError)

    def test_store_failure_in_viewed_set_aborts(self):
        mock = _mock_store(User(username="x", interests=["tech"]))
        mock.distinct_interacted_articles.side_effect = StoreError("boom")

        with pytest.raises(InternalError):
            RecommendationEngine(mock).compute_recommendations(new_object_id())
        mock.find_articles_by_tags_excluding.assert_not_called()

    @pytest.mark.parametrize("parallel", [True, False])
    def test_ranking_query_failure_is_internal(self, parallel):
        mock = _mock_store(User(username="x"))
        mock.aggregate_interaction_counts_by_article.side_effect = StoreTimeoutError("slow")

        with pytest.raises(InternalError):
            RecommendationEngine(mock, parallel_queries=parallel).compute_recommendations(new_object_id())

    def test_speculative_popularity_failure_still_aborts(self):
        user = User(username="x", interests=["tech"])
        mock = _mock_store(user)
        mock.find_articles_by_tags_excluding.return_value = [
            Article(title=f"t{i}", content="c", author="a", tags=["tech"]) for i in range(10)
        ]
        mock.aggregate_interaction_counts_by_article.side_effect = StoreError("down")

        with pytest.raises(InternalError):
            RecommendationEngine(mock).compute_recommendations(user.id)

    def test_cancelled_query_is_reported_as_cancelled(self):
        mock = _mock_store(User(username="x", interests=["tech"]))
        mock.find_articles_by_tags_excluding.side_effect = concurrent.futures.CancelledError()

        with pytest.raises(CancelledError) as exc_info:
            RecommendationEngine(mock).compute_recommendations(new_object_id())
        assert exc_info.value.status_code == 503

    def test_query_timeout_is_reported_as_cancelled(self):
        mock = _mock_store(User(username="x", interests=["tech"]))

        def slow_query(*args, **kwargs):
            time.sleep(0.3)
            return []

        mock.find_articles_by_tags_excluding.side_effect = slow_query

        engine = RecommendationEngine(mock, query_timeout=0.01)
        with pytest.raises(CancelledError):
            engine.compute_recommendations(new_object_id())

    def test_query_timeout_covers_both_queries_together(self):
        mock = _mock_store(User(username="x", interests=["tech"]))

        def interest_query(*args, **kwargs):
            time.sleep(0.2)
            return []

        def popularity_query(*args, **kwargs):
            time.sleep(0.45)
            return []

        mock.find_articles_by_tags_excluding.side_effect = interest_query
        mock.aggregate_interaction_counts_by_article.side_effect = popularity_query

        engine = RecommendationEngine(mock, query_timeout=0.3)
        with pytest.raises(CancelledError):
            engine.compute_recommendations(new_object_id())


class TestResultShape:
    """Output records and response body."""

    def test_to_dict_matches_response_contract(self, store):
        user = _user(store, "shape", ["tech", "science"])
        article = _article(store, "Shape", ["tech"], days=2)

        body = RecommendationEngine(store).compute_recommendations(user.id).to_dict()

        assert body == {
            "success": True,
            "message": "Found 1 recommendations for you!",
            "user": {"username": "shape", "interests": ["tech", "science"]},
            "recommendations": [{
                "id": article.id,
                "title": "Shape",
                "author": "Ada",
                "summary": "Shape summary",
                "tags": ["tech"],
                "publishedAt": "January 3, 2025",
                "reason": "matches your interests",
            }],
            "total": 1,
        }

    def test_empty_result_message(self):
        result = RecommendationResult(user=RecommendedUser(username="nobody"))
        assert result.total == 0
        assert result.message == EMPTY_MESSAGE

    def test_build_default_engine_uses_config(self):
        config = MagicMock(
            max_results=5,
            popular_candidate_limit=30,
            parallel_queries=False,
            query_timeout_seconds=2.0,
        )
        engine = build_default_engine(MagicMock(), config)
        assert engine.max_results == 5
        assert engine.popular_candidate_limit == 30
        assert engine.parallel_queries is False
        assert engine.query_timeout == 2.0

    def test_engine_rejects_non_positive_cap(self):
        with pytest.raises(ValueError):
            RecommendationEngine(MagicMock(), max_results=0)

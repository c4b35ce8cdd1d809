"""
Rule-based article recommendation engine.

This module lives inside content_service/ so it can be shared by the web
application, the management CLI or any batch job without introducing Flask
dependencies. The engine is stateless: every call reads fresh data from the
content store and never writes to it.
"""

from __future__ import annotations

import concurrent.futures
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from ..errors import (
    CancelledError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
)
from ..models import Article, User, format_long_date, is_valid_object_id
from ..store import ContentStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10
DEFAULT_POPULAR_CANDIDATE_LIMIT = 20

MISSING_USER_ID_MESSAGE = "Please provide a valid user ID"
MALFORMED_USER_ID_MESSAGE = "The user ID format is not valid. Please check and try again."
USER_NOT_FOUND_MESSAGE = "We could not find a user with that ID. Please check the ID and try again."
INTERNAL_ERROR_MESSAGE = "Something went wrong while getting your recommendations. Please try again later."
CANCELLED_MESSAGE = "Getting your recommendations took too long and was cancelled. Please try again later."
EMPTY_RESULT_MESSAGE = "No recommendations available right now. Try adding more interests or check back later."


# ---------------------------------------------------------------------------
# Core data structures
# ---------------------------------------------------------------------------


class RecommendationReason(Enum):
    """Why an article was selected."""

    INTEREST_MATCH = "matches your interests"
    POPULAR = "popular with other users"


@dataclass(slots=True)
class Recommendation:
    """A single annotated article summary returned to callers."""

    id: str
    title: str
    author: str
    summary: Optional[str]
    tags: List[str]
    published_at: str
    reason: RecommendationReason

    @classmethod
    def from_article(cls, article: Article, reason: RecommendationReason) -> "Recommendation":
        return cls(
            id=article.id,
            title=article.title,
            author=article.author,
            summary=article.summary,
            tags=list(article.tags),
            published_at=format_long_date(article.created_at),
            reason=reason,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "summary": self.summary,
            "tags": self.tags,
            "publishedAt": self.published_at,
            "reason": self.reason.value,
        }


@dataclass(slots=True)
class RecommendedUser:
    """Public view of the user the recommendations were computed for."""

    username: str
    interests: List[str] = field(default_factory=list)


@dataclass(slots=True)
class RecommendationResult:
    """Container for engine output."""

    user: RecommendedUser
    recommendations: List[Recommendation] = field(default_factory=list)
    success: bool = True

    @property
    def total(self) -> int:
        return len(self.recommendations)

    @property
    def message(self) -> str:
        if self.total > 0:
            return f"Found {self.total} recommendations for you!"
        return EMPTY_RESULT_MESSAGE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "user": {
                "username": self.user.username,
                "interests": self.user.interests,
            },
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "total": self.total,
        }


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class RecommendationEngine:
    """Blends interest matches with a popularity fallback.

    Interest matches (newest first) always rank above popular articles.
    Articles the user already interacted with are never returned, and no
    article appears twice.
    """

    def __init__(
        self,
        store: ContentStore,
        max_results: int = DEFAULT_MAX_RESULTS,
        popular_candidate_limit: int = DEFAULT_POPULAR_CANDIDATE_LIMIT,
        parallel_queries: bool = True,
        query_timeout: Optional[float] = None,
    ):
        if not 0 < max_results <= DEFAULT_MAX_RESULTS:
            raise ValueError(f"max_results must be between 1 and {DEFAULT_MAX_RESULTS}.")
        self.store = store
        self.max_results = max_results
        self.popular_candidate_limit = max(popular_candidate_limit, max_results)
        self.parallel_queries = parallel_queries
        self.query_timeout = query_timeout

    def compute_recommendations(self, user_id: Optional[str]) -> RecommendationResult:
        """
        Compute personalized recommendations for a user.

        Args:
            user_id: Store identifier of the user

        Returns:
            RecommendationResult with at most ``max_results`` entries

        Raises:
            InvalidInputError: blank or malformed identifier (no store access)
            NotFoundError: no such user
            InternalError: unexpected store failure
            CancelledError: a store query was cancelled or exceeded the timeout
        """
        user_id = self._validate_user_id(user_id)

        try:
            user = self.store.find_user_by_id(user_id)
            if user is None:
                raise NotFoundError(USER_NOT_FOUND_MESSAGE)
            result = self._compute(user)
        except ServiceError:
            raise
        except (concurrent.futures.TimeoutError, concurrent.futures.CancelledError) as exc:
            logger.warning(f"Recommendation queries cancelled for user {user_id}: {exc!r}")
            raise CancelledError(CANCELLED_MESSAGE) from exc
        except Exception as exc:
            logger.error(f"Error getting recommendations for user {user_id}: {exc}", exc_info=True)
            raise InternalError(INTERNAL_ERROR_MESSAGE) from exc

        logger.info(f"Computed {result.total} recommendations for user {user_id}")
        return result

    # Internals ----------------------------------------------------------------

    def _validate_user_id(self, user_id: Optional[str]) -> str:
        if user_id is None or not isinstance(user_id, str) or not user_id.strip():
            raise InvalidInputError(MISSING_USER_ID_MESSAGE)
        if not is_valid_object_id(user_id):
            raise InvalidInputError(MALFORMED_USER_ID_MESSAGE)
        return user_id

    def _compute(self, user: User) -> RecommendationResult:
        viewed = set(self.store.distinct_interacted_articles(user.id))
        interests = user.interest_set()

        if self.parallel_queries:
            interest_matches, popular_counts = self._run_parallel(interests, viewed)
        else:
            interest_matches = self._interest_matches(interests, viewed)
            popular_counts = None

        recommendations = [
            Recommendation.from_article(article, RecommendationReason.INTEREST_MATCH)
            for article in interest_matches
        ]

        needed = self.max_results - len(recommendations)
        if needed > 0:
            if popular_counts is None:
                popular_counts = self._popular_counts()
            selected = {rec.id for rec in recommendations}
            recommendations.extend(
                self._popular_fill(popular_counts, viewed | selected, needed)
            )

        return RecommendationResult(
            user=RecommendedUser(username=user.username, interests=list(user.interests)),
            recommendations=recommendations[: self.max_results],
        )

    def _run_parallel(
        self, interests: Set[str], viewed: Set[str]
    ) -> Tuple[List[Article], Sequence[Tuple[str, int]]]:
        """Run the interest query and the popularity aggregation concurrently."""
        pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="recommend")
        # One deadline covers both queries.
        deadline = None if self.query_timeout is None else time.monotonic() + self.query_timeout
        try:
            interest_future = pool.submit(self._interest_matches, interests, viewed)
            popular_future = pool.submit(self._popular_counts)
            interest_matches = interest_future.result(timeout=_remaining(deadline))
            popular_counts = popular_future.result(timeout=_remaining(deadline))
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
        return interest_matches, popular_counts

    def _interest_matches(self, interests: Set[str], viewed: Set[str]) -> List[Article]:
        if not interests:
            return []
        articles = self.store.find_articles_by_tags_excluding(interests, viewed, self.max_results)
        return [a for a in articles if a.id not in viewed][: self.max_results]

    def _popular_counts(self) -> Sequence[Tuple[str, int]]:
        return self.store.aggregate_interaction_counts_by_article(self.popular_candidate_limit)

    def _popular_fill(
        self,
        popular_counts: Sequence[Tuple[str, int]],
        excluded: Set[str],
        needed: int,
    ) -> List[Recommendation]:
        needed_ids: List[str] = []
        for article_id, _count in popular_counts:
            if article_id in excluded or article_id in needed_ids:
                continue
            needed_ids.append(article_id)
            if len(needed_ids) >= needed:
                break
        if not needed_ids:
            return []

        by_id = {a.id: a for a in self.store.find_articles_by_ids(needed_ids)}
        # Popularity order is kept; articles deleted since being counted are skipped.
        return [
            Recommendation.from_article(by_id[article_id], RecommendationReason.POPULAR)
            for article_id in needed_ids
            if article_id in by_id
        ]


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def build_default_engine(store: ContentStore, config=None) -> RecommendationEngine:
    """Factory for the engine used by the web layer and the CLI.

    Args:
        store: Content store to read from
        config: Optional RecommendationConfig from config_manager
    """
    if config is None:
        return RecommendationEngine(store)
    max_results = config.max_results
    if max_results > DEFAULT_MAX_RESULTS:
        logger.warning(
            f"Configured max_results {max_results} exceeds {DEFAULT_MAX_RESULTS}; using {DEFAULT_MAX_RESULTS}"
        )
        max_results = DEFAULT_MAX_RESULTS
    return RecommendationEngine(
        store,
        max_results=max_results,
        popular_candidate_limit=config.popular_candidate_limit,
        parallel_queries=config.parallel_queries,
        query_timeout=config.query_timeout_seconds,
    )

"""
Content store interface.

The recommendation engine and the web services only talk to storage
through this protocol, so backends can be swapped (JSON files, MongoDB,
test doubles) without touching callers.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from ..models import Article, Interaction, User


class ContentStore(Protocol):
    """Typed lookups and aggregation over users, articles and interactions."""

    # Users ------------------------------------------------------------------

    def create_user(self, user: User) -> User:
        """Persist a new user. Raises DuplicateUsernameError if taken."""

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        """Return the user or None. Caller validates the identifier format."""

    def find_user_by_username(self, username: str) -> Optional[User]:
        """Return the user with this exact username or None."""

    # Articles ---------------------------------------------------------------

    def create_article(self, article: Article) -> Article:
        """Persist a new article."""

    def find_article_by_id(self, article_id: str) -> Optional[Article]:
        """Return the article or None."""

    def list_articles(self, limit: int, offset: int = 0) -> List[Article]:
        """Return a page of articles, newest first."""

    def count_articles(self) -> int:
        """Return the total number of articles."""

    def find_articles_by_tags_excluding(
        self,
        tags: Set[str],
        excluded_ids: Set[str],
        limit: int,
    ) -> List[Article]:
        """Articles whose tags intersect ``tags``, minus ``excluded_ids``, newest first.

        An empty tag set yields an empty list, never "all articles".
        """

    def find_articles_by_ids(self, article_ids: Iterable[str]) -> List[Article]:
        """Materialize articles by identifier, in any order."""

    # Interactions -----------------------------------------------------------

    def create_interaction(self, interaction: Interaction) -> Interaction:
        """Append a new interaction record."""

    def distinct_interacted_articles(self, user_id: str) -> Set[str]:
        """Identifiers of every article the user interacted with (any type)."""

    def aggregate_interaction_counts_by_article(self, limit: int) -> Sequence[Tuple[str, int]]:
        """Global (article_id, count) pairs, count descending.

        Order among equal counts is backend-determined.
        """

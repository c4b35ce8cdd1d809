"""
File-backed content store.

Each collection lives in its own JSON file under the data directory
(``users.json``, ``articles.json``, ``interactions.json``). All access is
serialized by a single lock; files are rewritten atomically on change.
"""

import json
import logging
import os
from collections import Counter
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from ..errors import DuplicateRecordError, DuplicateUsernameError, StoreError
from ..models import Article, Interaction, User

logger = logging.getLogger(__name__)

USERS = "users"
ARTICLES = "articles"
INTERACTIONS = "interactions"


class JsonContentStore:
    """Content store persisting every collection as a JSON list."""

    def __init__(self, data_dir: Path):
        """
        Initialize JsonContentStore.

        Args:
            data_dir: Directory holding the collection files
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    def _collection_file(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def _load(self, name: str) -> List[Dict[str, Any]]:
        path = self._collection_file(name)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading collection {name} from {path}: {e}")
            raise StoreError(f"Could not read collection '{name}'") from e
        if not isinstance(data, list):
            raise StoreError(f"Collection '{name}' is not a list")
        return data

    def _save(self, name: str, records: List[Dict[str, Any]]) -> None:
        path = self._collection_file(name)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Error saving collection {name} to {path}: {e}")
            raise StoreError(f"Could not write collection '{name}'") from e

    def _parse(self, model, record: Dict[str, Any]):
        try:
            return model.model_validate(record)
        except ValidationError as e:
            raise StoreError(f"Malformed {model.__name__} record: {record.get('id')}") from e

    def _users(self) -> List[User]:
        return [self._parse(User, r) for r in self._load(USERS)]

    def _articles(self) -> List[Article]:
        return [self._parse(Article, r) for r in self._load(ARTICLES)]

    def _interactions(self) -> List[Interaction]:
        return [self._parse(Interaction, r) for r in self._load(INTERACTIONS)]

    def _append(self, name: str, model) -> None:
        records = self._load(name)
        if any(r.get("id") == model.id for r in records):
            raise DuplicateRecordError(f"Duplicate id {model.id} in collection '{name}'")
        records.append(model.model_dump(mode="json"))
        self._save(name, records)

    # Users ------------------------------------------------------------------

    def create_user(self, user: User) -> User:
        with self._lock:
            if any(u.username == user.username for u in self._users()):
                raise DuplicateUsernameError(user.username)
            self._append(USERS, user)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users() if u.id == user_id), None)

    def find_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users() if u.username == username), None)

    # Articles ---------------------------------------------------------------

    def create_article(self, article: Article) -> Article:
        with self._lock:
            self._append(ARTICLES, article)
        logger.info(f"Created article {article.id}")
        return article

    def find_article_by_id(self, article_id: str) -> Optional[Article]:
        with self._lock:
            return next((a for a in self._articles() if a.id == article_id), None)

    def list_articles(self, limit: int, offset: int = 0) -> List[Article]:
        with self._lock:
            articles = _newest_first(self._articles())
        return articles[offset:offset + limit]

    def count_articles(self) -> int:
        with self._lock:
            return len(self._load(ARTICLES))

    def find_articles_by_tags_excluding(
        self,
        tags: Set[str],
        excluded_ids: Set[str],
        limit: int,
    ) -> List[Article]:
        if not tags or limit <= 0:
            return []
        with self._lock:
            matching = [
                a for a in self._articles()
                if a.id not in excluded_ids and a.tag_set() & tags
            ]
        return _newest_first(matching)[:limit]

    def find_articles_by_ids(self, article_ids: Iterable[str]) -> List[Article]:
        wanted = set(article_ids)
        if not wanted:
            return []
        with self._lock:
            return [a for a in self._articles() if a.id in wanted]

    # Interactions -----------------------------------------------------------

    def create_interaction(self, interaction: Interaction) -> Interaction:
        with self._lock:
            self._append(INTERACTIONS, interaction)
        return interaction

    def distinct_interacted_articles(self, user_id: str) -> Set[str]:
        with self._lock:
            return {i.article_id for i in self._interactions() if i.user_id == user_id}

    def aggregate_interaction_counts_by_article(self, limit: int) -> Sequence[Tuple[str, int]]:
        with self._lock:
            counts = Counter(i.article_id for i in self._interactions())
        # Ties keep first-seen order.
        return counts.most_common(limit)


def _newest_first(articles: List[Article]) -> List[Article]:
    return sorted(articles, key=lambda a: a.created_at, reverse=True)

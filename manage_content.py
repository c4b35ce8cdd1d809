#!/usr/bin/env python3
"""
Content management script:
- seed: load users, articles and interactions from a JSON fixture file
- recommend: print the recommendations computed for a user

Fixture shape:
{
  "users": [{"id": str, "username": str, "interests": [str], "created_at": ISO8601}, ...],
  "articles": [{"id": str, "title": str, "content": str, "author": str,
                "summary": str|null, "tags": [str], "created_at": ISO8601}, ...],
  "interactions": [{"user_id": str, "article_id": str, "interaction_type": "view"|"like",
                    "created_at": ISO8601}, ...]
}
Identifiers and timestamps are optional and generated when missing.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from config_manager import ConfigManager
from content_service.errors import DuplicateRecordError, DuplicateUsernameError, ServiceError
from content_service.models import Article, Interaction, User
from content_service.recommendations import build_default_engine
from content_service.store import ContentStore, create_store

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class ContentSeeder:
    """Loads fixture data into a content store."""

    def __init__(self, store: ContentStore):
        self.store = store

    def seed(self, fixture: Dict[str, Any]) -> Dict[str, int]:
        """Insert every record of the fixture, skipping invalid, duplicate or dangling ones.

        Returns:
            Counts of inserted and skipped records
        """
        stats = {"users": 0, "articles": 0, "interactions": 0, "skipped": 0}

        for record in fixture.get("users", []):
            try:
                self.store.create_user(User.model_validate(record))
                stats["users"] += 1
            except DuplicateUsernameError:
                logger.warning(f"Skipping duplicate username: {record.get('username')}")
                stats["skipped"] += 1
            except DuplicateRecordError:
                logger.warning(f"Skipping user with existing id: {record.get('id')}")
                stats["skipped"] += 1
            except ValidationError as e:
                logger.warning(f"Skipping invalid user record: {e}")
                stats["skipped"] += 1

        for record in fixture.get("articles", []):
            try:
                self.store.create_article(Article.model_validate(record))
                stats["articles"] += 1
            except DuplicateRecordError:
                logger.warning(f"Skipping article with existing id: {record.get('id')}")
                stats["skipped"] += 1
            except ValidationError as e:
                logger.warning(f"Skipping invalid article record: {e}")
                stats["skipped"] += 1

        for record in fixture.get("interactions", []):
            try:
                interaction = Interaction.model_validate(record)
            except ValidationError as e:
                logger.warning(f"Skipping invalid interaction record: {e}")
                stats["skipped"] += 1
                continue
            if (self.store.find_user_by_id(interaction.user_id) is None
                    or self.store.find_article_by_id(interaction.article_id) is None):
                logger.warning(
                    f"Skipping interaction with unknown user {interaction.user_id} "
                    f"or article {interaction.article_id}"
                )
                stats["skipped"] += 1
                continue
            try:
                self.store.create_interaction(interaction)
                stats["interactions"] += 1
            except DuplicateRecordError:
                logger.warning(f"Skipping interaction with existing id: {interaction.id}")
                stats["skipped"] += 1

        logger.info(
            f"Seeded {stats['users']} users, {stats['articles']} articles, "
            f"{stats['interactions']} interactions ({stats['skipped']} skipped)"
        )
        return stats


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Content management script")
    parser.add_argument("--config", type=str, default="content_app_config.json",
                        help="Configuration file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed_parser = subparsers.add_parser("seed", help="Load fixture data into the store")
    seed_parser.add_argument("fixture", type=Path, help="JSON fixture file")

    recommend_parser = subparsers.add_parser("recommend", help="Print recommendations for a user")
    recommend_parser.add_argument("user_id", help="Identifier of the user")

    args = parser.parse_args(argv)

    config_manager = ConfigManager(args.config)
    store = create_store(config_manager.get_storage_config(), base_dir=Path(__file__).parent)

    if args.command == "seed":
        fixture = json.loads(args.fixture.read_text(encoding="utf-8"))
        stats = ContentSeeder(store).seed(fixture)
        print(json.dumps(stats, indent=2, ensure_ascii=False))
        return 0

    engine = build_default_engine(store, config_manager.get_recommendation_config())
    try:
        result = engine.compute_recommendations(args.user_id)
    except ServiceError as e:
        print(json.dumps(e.to_dict(), indent=2, ensure_ascii=False))
        return 1
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

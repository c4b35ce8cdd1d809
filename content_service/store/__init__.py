"""
Storage backends for users, articles and interactions.
"""

import logging
from pathlib import Path

from .base import ContentStore
from .json_store import JsonContentStore
from .mongo_store import MongoContentStore

logger = logging.getLogger(__name__)


def create_store(storage_config, base_dir: Path = None) -> ContentStore:
    """
    Build the content store selected by configuration.

    Args:
        storage_config: StorageConfig from config_manager
        base_dir: Directory relative data paths are resolved against

    Returns:
        A ContentStore implementation
    """
    backend = (storage_config.backend or "json").lower()
    if backend == "mongo":
        return MongoContentStore.from_uri(
            storage_config.mongo_uri,
            storage_config.mongo_db_name,
            server_selection_timeout_ms=storage_config.server_selection_timeout_ms,
        )
    if backend != "json":
        raise ValueError(f"Unknown storage backend: {storage_config.backend}")

    data_dir = Path(storage_config.data_dir)
    if base_dir is not None and not data_dir.is_absolute():
        data_dir = Path(base_dir) / data_dir
    logger.info(f"Using JSON content store at {data_dir}")
    return JsonContentStore(data_dir)


__all__ = ["ContentStore", "JsonContentStore", "MongoContentStore", "create_store"]

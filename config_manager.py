"""
Configuration management for the Content Aggregator.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool


@dataclass
class StorageConfig:
    """Content store configuration settings."""
    backend: str
    data_dir: str
    mongo_uri: str
    mongo_db_name: str
    server_selection_timeout_ms: int


@dataclass
class RecommendationConfig:
    """Recommendation engine configuration settings."""
    max_results: int
    popular_candidate_limit: int
    parallel_queries: bool
    query_timeout_seconds: Optional[float]


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "content_app_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        # Start with default config
        self._config = self._get_default_config()

        # Load base config from file
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    # Merge file config with defaults
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 8005,
                "debug": False
            },
            "storage": {
                "backend": "json",
                "data_dir": "data",
                "mongo_uri": "mongodb://localhost:27017",
                "mongo_db_name": "content_aggregator",
                "server_selection_timeout_ms": 5000
            },
            "recommendations": {
                "max_results": 10,
                "popular_candidate_limit": 20,
                "parallel_queries": True,
                "query_timeout_seconds": None
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config:
                if isinstance(values, dict):
                    self._config[section].update(values)
                else:
                    self._config[section] = values
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        port = os.getenv("APP_PORT") or os.getenv("PORT")
        if port:
            self._config["app"]["port"] = int(port)

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        # Storage settings
        if os.getenv("MONGO_URI"):
            # A configured Mongo URI implies the Mongo backend unless overridden below
            self._config["storage"]["mongo_uri"] = os.getenv("MONGO_URI")
            self._config["storage"]["backend"] = "mongo"

        if os.getenv("STORAGE_BACKEND"):
            self._config["storage"]["backend"] = os.getenv("STORAGE_BACKEND").lower()

        if os.getenv("DATA_DIR"):
            self._config["storage"]["data_dir"] = os.getenv("DATA_DIR")

        if os.getenv("MONGO_DB_NAME"):
            self._config["storage"]["mongo_db_name"] = os.getenv("MONGO_DB_NAME")

        # Recommendation settings
        if os.getenv("RECOMMENDATION_PARALLEL_QUERIES"):
            self._config["recommendations"]["parallel_queries"] = (
                os.getenv("RECOMMENDATION_PARALLEL_QUERIES").lower() == "true"
            )

        if os.getenv("RECOMMENDATION_QUERY_TIMEOUT"):
            self._config["recommendations"]["query_timeout_seconds"] = float(
                os.getenv("RECOMMENDATION_QUERY_TIMEOUT")
            )

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"]
        )

    def get_storage_config(self) -> StorageConfig:
        """Get content store configuration."""
        storage_config = self._config["storage"]
        return StorageConfig(
            backend=storage_config["backend"],
            data_dir=storage_config["data_dir"],
            mongo_uri=storage_config["mongo_uri"],
            mongo_db_name=storage_config["mongo_db_name"],
            server_selection_timeout_ms=storage_config["server_selection_timeout_ms"]
        )

    def get_recommendation_config(self) -> RecommendationConfig:
        """Get recommendation engine configuration."""
        rec_config = self._config["recommendations"]
        return RecommendationConfig(
            max_results=rec_config["max_results"],
            popular_candidate_limit=rec_config["popular_candidate_limit"],
            parallel_queries=rec_config["parallel_queries"],
            query_timeout_seconds=rec_config["query_timeout_seconds"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_storage_config() -> StorageConfig:
    """Get content store configuration."""
    return config_manager.get_storage_config()


def get_recommendation_config() -> RecommendationConfig:
    """Get recommendation engine configuration."""
    return config_manager.get_recommendation_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()

import logging
from pathlib import Path

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from content_service.errors import ServiceError
from content_service.store import create_store

from app.articles.factory import create_articles_module
from app.users.factory import create_users_module
from app.interactions.factory import create_interactions_module
from app.recommendations.factory import create_recommendations_module

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent


def create_app(config_manager: ConfigManager = None, store=None, recommendation_engine=None) -> Flask:
    """Build the Flask application.

    Args:
        config_manager: Configuration source, defaults to ConfigManager()
        store: ContentStore to use instead of the configured backend
        recommendation_engine: Prebuilt engine, mainly for tests

    Returns:
        Configured Flask application
    """
    config_manager = config_manager or ConfigManager()
    recommendation_config = config_manager.get_recommendation_config()

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_proto = 1,     # trust 1 hop for X-Forwarded-Proto
            x_host  = 1,     # trust 1 hop for X-Forwarded-Host
            x_prefix= 1)     # <-- pay attention to X-Forwarded-Prefix

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    if store is None:
        store = create_store(config_manager.get_storage_config(), base_dir=PROJECT_ROOT)

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    articles_module = create_articles_module(store)
    users_module = create_users_module(store)
    interactions_module = create_interactions_module(store)
    recommendations_module = create_recommendations_module(
        store,
        recommendation_config=recommendation_config,
        recommendation_engine=recommendation_engine,
    )

    app.register_blueprint(articles_module["blueprint"])
    app.register_blueprint(users_module["blueprint"])
    app.register_blueprint(interactions_module["blueprint"])
    app.register_blueprint(recommendations_module["blueprint"])

    app.extensions["content_store"] = store
    app.extensions["recommendation_engine"] = recommendations_module["service"]

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.get("/health")
    def health():
        """Health check endpoint for monitoring and load balancers."""
        return jsonify({"ok": True})

    # -------------------------------------------------------------------------
    # Error translation
    # -------------------------------------------------------------------------

    @app.errorhandler(ServiceError)
    def handle_service_error(error: ServiceError):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"success": False, "message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(f"Unhandled error: {error}", exc_info=True)
        return jsonify({"success": False, "message": "Internal Server Error"}), 500

    return app

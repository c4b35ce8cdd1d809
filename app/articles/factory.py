"""
Factory for creating the articles module.
"""
from .services import ArticleService
from .routes import create_article_routes


def create_articles_module(store) -> dict:
    """
    Create the articles module with all its components.

    Args:
        store: ContentStore the articles live in

    Returns:
        Dictionary containing:
            - service: ArticleService instance
            - blueprint: Flask blueprint for routes
    """
    service = ArticleService(store)
    blueprint = create_article_routes(service)

    return {
        "service": service,
        "blueprint": blueprint
    }

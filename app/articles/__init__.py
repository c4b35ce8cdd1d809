"""
Articles module for article creation and retrieval.
"""

from .services import ArticleService
from .routes import create_article_routes
from .factory import create_articles_module

__all__ = ['ArticleService', 'create_article_routes', 'create_articles_module']

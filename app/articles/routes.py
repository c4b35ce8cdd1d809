"""
Article routes for API endpoints.
"""
from flask import Blueprint, jsonify, request

from .services import ArticleService


def create_article_routes(article_service: ArticleService) -> Blueprint:
    """Create article routes blueprint."""
    bp = Blueprint('articles', __name__, url_prefix='/api/articles')

    @bp.route('', methods=['POST'])
    def create_article():
        """Create a new article."""
        data = request.get_json(silent=True) or {}
        article = article_service.create_article(
            title=data.get("title"),
            content=data.get("content"),
            author=data.get("author"),
            summary=data.get("summary"),
            tags=data.get("tags"),
        )
        return jsonify(article.to_dict()), 201

    @bp.route('', methods=['GET'])
    def list_articles():
        """
        Get a page of articles, newest first.

        Query parameters:
            - limit: Page size (default 10, max 100)
            - offset: Articles to skip (default 0)
        """
        page = article_service.list_articles(
            limit=request.args.get('limit'),
            offset=request.args.get('offset'),
        )
        return jsonify(page)

    @bp.route('/<article_id>', methods=['GET'])
    def get_article(article_id):
        """Get a single article by identifier."""
        article = article_service.get_article(article_id)
        return jsonify(article.to_dict())

    return bp

"""
Interaction routes.
"""
from flask import Blueprint, jsonify, request

from .services import InteractionService


def create_interaction_routes(interaction_service: InteractionService) -> Blueprint:
    """Create a Flask blueprint for interaction routes.

    Args:
        interaction_service: Service used to record interactions

    Returns:
        Flask blueprint with interaction routes
    """
    bp = Blueprint('interactions', __name__, url_prefix='/api/interactions')

    @bp.route('', methods=['POST'])
    def create_interaction():
        """Record a user interaction with an article."""
        data = request.get_json(silent=True) or {}
        body = interaction_service.record_interaction(
            user_id=data.get("user_id"),
            article_id=data.get("article_id"),
            interaction_type=data.get("interaction_type"),
        )
        return jsonify(body), 201

    return bp

"""
Recommendation routes.
"""
from flask import Blueprint, jsonify

from content_service.recommendations import RecommendationEngine


def create_recommendation_routes(engine: RecommendationEngine) -> Blueprint:
    """Create recommendation routes blueprint."""
    bp = Blueprint('recommendations', __name__, url_prefix='/api/recommendations')

    @bp.route('/', methods=['GET'])
    @bp.route('/<user_id>', methods=['GET'])
    def get_recommendations(user_id=""):
        """Get personalized article recommendations for a user."""
        result = engine.compute_recommendations(user_id)
        return jsonify(result.to_dict())

    return bp

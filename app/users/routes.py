"""
User routes for account creation.
"""
from flask import Blueprint, jsonify, request

from .services import UserService


def create_user_routes(user_service: UserService) -> Blueprint:
    """Create user routes blueprint."""
    bp = Blueprint('users', __name__, url_prefix='/api/users')

    @bp.route('', methods=['POST'])
    def create_user():
        """Create a new user account."""
        data = request.get_json(silent=True) or {}
        user = user_service.create_user(data.get("username"), data.get("interests"))
        return jsonify(user_service.to_response(user)), 201

    return bp

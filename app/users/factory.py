"""
Factory for creating user module.
"""
from .services import UserService
from .routes import create_user_routes


def create_users_module(store) -> dict:
    """Create user module with service and routes.

    Args:
        store: ContentStore the accounts are persisted in

    Returns:
        Dictionary containing the service and blueprint
    """
    user_service = UserService(store)
    blueprint = create_user_routes(user_service)

    return {
        "service": user_service,
        "blueprint": blueprint
    }

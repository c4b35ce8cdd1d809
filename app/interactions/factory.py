"""
Factory for creating interactions module.
"""
from .services import InteractionService
from .routes import create_interaction_routes


def create_interactions_module(store) -> dict:
    """Create interactions module with service and routes.

    Args:
        store: ContentStore interactions are appended to

    Returns:
        Dictionary containing the service and blueprint
    """
    interaction_service = InteractionService(store)
    blueprint = create_interaction_routes(interaction_service)

    return {
        "service": interaction_service,
        "blueprint": blueprint
    }

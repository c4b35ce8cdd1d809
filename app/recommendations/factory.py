"""
Factory for creating the recommendations module.
"""
from content_service.recommendations import RecommendationEngine, build_default_engine

from .routes import create_recommendation_routes


def create_recommendations_module(
    store,
    recommendation_config=None,
    recommendation_engine: RecommendationEngine = None,
) -> dict:
    """
    Create the recommendations module with all its components.

    Args:
        store: ContentStore the engine reads from
        recommendation_config: Optional RecommendationConfig
        recommendation_engine: Prebuilt engine, mainly for tests

    Returns:
        Dictionary containing:
            - service: RecommendationEngine instance
            - blueprint: Flask blueprint for routes
    """
    engine = recommendation_engine or build_default_engine(store, recommendation_config)
    blueprint = create_recommendation_routes(engine)

    return {
        "service": engine,
        "blueprint": blueprint
    }

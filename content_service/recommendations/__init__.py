"""
Recommendation engine package for personalized article lists.

Provides an engine that can be reused by the web layer, the management
CLI, or any future batch jobs without creating Flask dependencies.
"""

from .engine import (
    Recommendation,
    RecommendationEngine,
    RecommendationReason,
    RecommendationResult,
    RecommendedUser,
    build_default_engine,
)

__all__ = [
    "Recommendation",
    "RecommendationEngine",
    "RecommendationReason",
    "RecommendationResult",
    "RecommendedUser",
    "build_default_engine",
]

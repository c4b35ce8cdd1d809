"""
Interactions Subsystem

Records views and likes linking users to articles.
"""

from .services import InteractionService
from .factory import create_interactions_module

__all__ = ['InteractionService', 'create_interactions_module']

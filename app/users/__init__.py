"""
Users module for account creation.
"""

from .services import UserService
from .routes import create_user_routes
from .factory import create_users_module

__all__ = ['UserService', 'create_user_routes', 'create_users_module']

"""
API Dependencies package.

Cross-cutting concerns like authentication and the acting user.
"""

from .auth import verify_api_key, get_current_user_id, API_AUTH_ENABLED

__all__ = ["verify_api_key", "get_current_user_id", "API_AUTH_ENABLED"]

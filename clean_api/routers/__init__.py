"""
API routers for the catalog API endpoints.
"""

from . import auth, products, users

__all__ = ["auth", "products", "users"]

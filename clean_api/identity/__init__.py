"""Identity subsystem: users, roles, authentication and user administration."""

from .models import Role, User, user_roles

__all__ = ["Role", "User", "user_roles"]

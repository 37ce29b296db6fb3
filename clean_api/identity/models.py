"""
Identity models.

Users, roles and the user/role association table. Credential columns
(password hash, security stamp) are owned by the identity services.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Table
from sqlalchemy.orm import relationship

from ..domain.entities import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named role granting access to protected endpoints."""

    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(256), nullable=False)
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    users = relationship("User", secondary=user_roles, back_populates="roles")

    __table_args__ = (
        Index("ix_roles_name", "name", unique=True),
        Index("ix_roles_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"Role(id={self.id}, name={self.name!r})"


class User(Base):
    """
    Application user.

    Attributes:
        id: UUID string primary key
        email: Unique, stored normalized to lower case
        user_name: Login name, the email for self-registered users
        first_name: Given name
        last_name: Family name
        is_active: Deactivated users cannot sign in
        created_at: Account creation timestamp
        last_login_at: Timestamp of the last successful sign in
        password_hash: bcrypt hash
        security_stamp: Rotated on credential changes and logout
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(256), nullable=False)
    user_name = Column(String(256), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    password_hash = Column(String(255), nullable=True)
    security_stamp = Column(String(64), nullable=True)

    roles = relationship("Role", secondary=user_roles, back_populates="users", lazy="selectin")

    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
        Index("ix_users_name", "first_name", "last_name"),
        Index("ix_users_is_active", "is_active"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def role_names(self) -> List[str]:
        return sorted(role.name for role in self.roles)

    def update_last_login(self) -> None:
        self.last_login_at = _utcnow()

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email!r})"

"""
Seed data for a fresh database.

Seeding is idempotent: existing rows (matched by SKU, role name or email)
are left untouched.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..domain.entities import Product
from ..identity.models import Role, User
from ..logging_config import get_logger
from ..security import generate_security_stamp, hash_password

logger = get_logger(__name__)

# Structure: (name, description)
ROLES_SEED_DATA: List[Tuple[str, str]] = [
    ("Administrator", "System administrator with full access"),
    ("User", "Standard user with limited access"),
    ("Manager", "Manager with elevated access"),
]

# Structure: (sku, name, description, price, stock_quantity)
PRODUCTS_SEED_DATA: List[Tuple[str, str, str, Decimal, int]] = [
    ("SAMPLE-001", "Sample Product 1", "This is a sample product for testing", Decimal("99.99"), 100),
    ("SAMPLE-002", "Sample Product 2", "Another sample product for testing", Decimal("149.99"), 50),
]


async def seed_roles(session: AsyncSession) -> Dict[str, Role]:
    """Ensure the built-in roles exist."""
    role_map: Dict[str, Role] = {}
    for name, description in ROLES_SEED_DATA:
        result = await session.execute(select(Role).where(Role.name == name))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(name=name, description=description, is_active=True)
            session.add(role)
            logger.info("Seeded role", role=name)
        role_map[name] = role
    await session.flush()
    return role_map


async def seed_admin(session: AsyncSession, roles: Dict[str, Role]) -> None:
    """Ensure the administrator account exists."""
    email = settings.ADMIN_EMAIL.lower()
    result = await session.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        return

    admin = User(
        email=email,
        user_name=email,
        first_name="System",
        last_name="Administrator",
        is_active=True,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        security_stamp=generate_security_stamp(),
    )
    admin.roles.append(roles["Administrator"])
    session.add(admin)
    logger.info("Seeded administrator", email=email)


async def seed_products(session: AsyncSession) -> None:
    """Ensure the sample products exist."""
    for sku, name, description, price, stock in PRODUCTS_SEED_DATA:
        result = await session.execute(select(Product).where(Product.sku == sku))
        if result.scalar_one_or_none() is not None:
            continue
        session.add(
            Product(
                name=name,
                description=description,
                price=price,
                stock_quantity=stock,
                sku=sku,
                is_active=True,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Seeded product", sku=sku)


async def run_seeding(session: AsyncSession) -> None:
    """Execute all seeding functions in the given session."""
    roles = await seed_roles(session)
    await seed_admin(session, roles)
    await seed_products(session)

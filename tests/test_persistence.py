"""
Tests for the unit of work, the product repository and audit stamping.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import select

from clean_api.domain.entities import SYSTEM_ACTOR, Product
from clean_api.domain.exceptions import BadRequestError
from clean_api.identity.models import Role, User
from clean_api.persistence.seed import run_seeding


def make_product(sku: str = "W-1", **overrides) -> Product:
    data = {
        "name": "Widget",
        "description": "",
        "price": Decimal("9.99"),
        "stock_quantity": 5,
        "sku": sku,
        "is_active": True,
    }
    data.update(overrides)
    return Product(**data)


async def create(db, product: Product, actor=None) -> int:
    async with db.unit_of_work(actor) as uow:
        await uow.products.create(product)
        return product.id


class TestUnitOfWork:
    async def test_commits_on_clean_exit(self, db):
        product_id = await create(db, make_product())

        async with db.unit_of_work() as uow:
            assert await uow.products.get_by_id(product_id) is not None

    async def test_rolls_back_on_exception(self, db):
        with pytest.raises(RuntimeError):
            async with db.unit_of_work() as uow:
                await uow.products.create(make_product())
                raise RuntimeError("boom")

        async with db.unit_of_work() as uow:
            assert await uow.products.get_all() == []

    async def test_session_unavailable_outside_block(self, db):
        uow = db.unit_of_work()
        with pytest.raises(RuntimeError):
            uow.session

    async def test_default_actor_is_system(self, db):
        assert db.unit_of_work().actor == SYSTEM_ACTOR
        assert db.unit_of_work("user-1").actor == "user-1"


class TestProductRepository:
    async def test_create_assigns_increasing_ids(self, db):
        first = await create(db, make_product("A-1"))
        second = await create(db, make_product("A-2"))
        assert second > first

        async with db.unit_of_work() as uow:
            ids = [product.id for product in await uow.products.get_all()]
        assert ids == [first, second]

    async def test_reads_are_untracked(self, db):
        await create(db, make_product())

        async with db.unit_of_work() as uow:
            products = await uow.products.get_all()
            single = await uow.products.get_by_id(products[0].id)
            assert all(product not in uow.session for product in products)
            assert single not in uow.session

    async def test_get_by_id_missing(self, db):
        async with db.unit_of_work() as uow:
            assert await uow.products.get_by_id(999) is None

    async def test_duplicate_sku_is_bad_request(self, db):
        await create(db, make_product("DUP-1"))

        with pytest.raises(BadRequestError):
            await create(db, make_product("DUP-1"))

    async def test_is_sku_unique(self, db):
        await create(db, make_product("U-1"))

        async with db.unit_of_work() as uow:
            assert await uow.products.is_sku_unique("U-1") is False
            assert await uow.products.is_sku_unique("U-2") is True

    async def test_delete(self, db):
        product_id = await create(db, make_product())

        async with db.unit_of_work() as uow:
            product = await uow.products.get_by_id(product_id)
            await uow.products.delete(product)

        async with db.unit_of_work() as uow:
            assert await uow.products.get_by_id(product_id) is None


class TestAuditStamping:
    async def test_create_stamps_creation_fields(self, db):
        product_id = await create(db, make_product(), actor="alice")

        async with db.unit_of_work() as uow:
            product = await uow.products.get_by_id(product_id)

        assert product.created_by == "alice"
        assert product.date_created is not None
        assert product.modified_by is None
        assert product.date_modified is None

    async def test_create_without_actor_uses_system(self, db):
        product_id = await create(db, make_product())

        async with db.unit_of_work() as uow:
            product = await uow.products.get_by_id(product_id)

        assert product.created_by == SYSTEM_ACTOR

    async def test_update_stamps_modification_and_keeps_creation(self, db):
        product_id = await create(db, make_product(), actor="alice")

        async with db.unit_of_work() as uow:
            original = await uow.products.get_by_id(product_id)

        async with db.unit_of_work("bob") as uow:
            product = await uow.products.get_by_id(product_id)
            product.name = "Renamed"
            product.created_by = "mallory"
            product.date_created = datetime(2000, 1, 1)
            await uow.products.update(product)

        async with db.unit_of_work() as uow:
            product = await uow.products.get_by_id(product_id)

        assert product.name == "Renamed"
        assert product.created_by == "alice"
        assert product.date_created == original.date_created
        assert product.modified_by == "bob"
        assert product.date_modified is not None

    async def test_update_without_changes_still_stamps(self, db):
        product_id = await create(db, make_product())

        async with db.unit_of_work("carol") as uow:
            product = await uow.products.get_by_id(product_id)
            await uow.products.update(product)

        async with db.unit_of_work() as uow:
            product = await uow.products.get_by_id(product_id)

        assert product.modified_by == "carol"


class TestSeeding:
    async def test_seed_is_idempotent(self, db):
        async with db.unit_of_work() as uow:
            await run_seeding(uow.session)
        async with db.unit_of_work() as uow:
            await run_seeding(uow.session)

        async with db.unit_of_work() as uow:
            products = await uow.products.get_all()
            roles = (await uow.session.execute(select(Role))).scalars().all()
            users = (await uow.session.execute(select(User))).scalars().all()

        assert [(p.sku, p.price, p.stock_quantity) for p in products] == [
            ("SAMPLE-001", Decimal("99.99"), 100),
            ("SAMPLE-002", Decimal("149.99"), 50),
        ]
        assert all(p.created_by == SYSTEM_ACTOR for p in products)
        assert sorted(role.name for role in roles) == ["Administrator", "Manager", "User"]
        assert len(users) == 1
        assert users[0].email == "admin@localhost"
        assert users[0].role_names == ["Administrator"]

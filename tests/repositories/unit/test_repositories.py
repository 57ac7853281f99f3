"""
Unit tests for repositories against an in-memory SQLite database.

Covers tier table loading (single and batch), stock overwrites,
low-stock queries and date-bounded order listing.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from enums.order_channel import OrderChannel
from enums.order_status import OrderStatus
from exceptions.product import ProductNotFoundException
from models.category import Category
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from models.price_tier import PriceTier, PriceTierDTO, TieredPricingDTO
from models.product import Product
from models.subcategory import Subcategory
from repositories.order import OrderRepository
from repositories.price_tier import PriceTierRepository
from repositories.product import ProductRepository
from repositories.subcategory import SubcategoryRepository


@pytest.fixture
def catalog(session):
    session.add(Category(id=1, name="Necklaces"))
    session.add_all([
        Subcategory(id=1, name="Kundan", category_id=1, purchase_rate=Decimal("500")),
        Subcategory(id=2, name="Temple", category_id=1),
        Subcategory(id=3, name="Oxidised", category_id=1),
    ])
    session.flush()
    session.add_all([
        PriceTier(subcategory_id=1, audience="retail", min_quantity=10, max_quantity=None, unit_price=Decimal("900")),
        PriceTier(subcategory_id=1, audience="retail", min_quantity=0, max_quantity=9, unit_price=Decimal("1000")),
        PriceTier(subcategory_id=1, audience="wholesale", min_quantity=0, max_quantity=None, unit_price=Decimal("700")),
        PriceTier(subcategory_id=2, audience="retail", min_quantity=0, max_quantity=None, unit_price=Decimal("1500")),
        Product(id=1, category_id=1, subcategory_id=1, product_code="KN-1", name="Kundan Choker", quantity=25),
        Product(id=2, category_id=1, subcategory_id=2, product_code="TP-1", name="Temple Haar", quantity=3),
        Product(
            id=3, category_id=1, subcategory_id=3, product_code="OX-1", name="Oxidised Set", quantity=0,
            variations=[{"color": "Silver", "quantity": 12}, {"color": "Black", "quantity": 2}]
        ),
    ])
    session.commit()


class TestPriceTierRepository:

    @pytest.mark.asyncio
    async def test_get_by_subcategory_splits_audiences(self, session, catalog):
        tiered_pricing = await PriceTierRepository.get_by_subcategory(1, session)

        assert [t.min_quantity for t in tiered_pricing.retail] == [0, 10]
        assert tiered_pricing.retail[1].max_quantity is None
        assert [t.unit_price for t in tiered_pricing.wholesale] == [Decimal("700")]

    @pytest.mark.asyncio
    async def test_get_by_subcategory_without_tiers(self, session, catalog):
        assert await PriceTierRepository.get_by_subcategory(3, session) is None

    @pytest.mark.asyncio
    async def test_get_by_subcategories_batch(self, session, catalog):
        result = await PriceTierRepository.get_by_subcategories([1, 2, 3], session)

        assert set(result) == {1, 2}
        assert result[2].wholesale == []
        assert result[2].retail[0].unit_price == Decimal("1500")

    @pytest.mark.asyncio
    async def test_get_by_subcategories_empty_input(self, session):
        assert await PriceTierRepository.get_by_subcategories([], session) == {}

    @pytest.mark.asyncio
    async def test_replace_for_subcategory(self, session, catalog):
        await PriceTierRepository.replace_for_subcategory(
            2,
            TieredPricingDTO(
                retail=[PriceTierDTO(min_quantity=0, max_quantity="", unit_price=Decimal("1400"))],
                wholesale=[PriceTierDTO(min_quantity=0, max_quantity=None, unit_price=Decimal("1100"))]
            ),
            session
        )
        session.commit()

        tiered_pricing = await PriceTierRepository.get_by_subcategory(2, session)
        assert tiered_pricing.retail == [PriceTierDTO(min_quantity=0, max_quantity=None, unit_price=Decimal("1400"))]
        assert tiered_pricing.wholesale[0].unit_price == Decimal("1100")


class TestProductRepository:

    @pytest.mark.asyncio
    async def test_get_by_category_in_catalog_order(self, session, catalog):
        products = await ProductRepository.get_by_category(1, session)
        assert [p.id for p in products] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_update_stock_overwrites(self, session, catalog):
        await ProductRepository.update_stock(1, 20, session)
        session.commit()

        assert (await ProductRepository.get_by_id(1, session)).quantity == 20

    @pytest.mark.asyncio
    async def test_update_stock_floors_at_zero(self, session, catalog):
        await ProductRepository.update_stock(2, -4, session)
        session.commit()

        assert (await ProductRepository.get_by_id(2, session)).quantity == 0

    @pytest.mark.asyncio
    async def test_update_variation_stock(self, session, catalog):
        await ProductRepository.update_stock(3, 10, session, variation={"color": "Silver"})
        session.commit()

        product = await ProductRepository.get_by_id(3, session)
        assert product.variations == [{"color": "Silver", "quantity": 10}, {"color": "Black", "quantity": 2}]

    @pytest.mark.asyncio
    async def test_update_stock_unknown_product(self, session, catalog):
        with pytest.raises(ProductNotFoundException):
            await ProductRepository.update_stock(99, 1, session)

    @pytest.mark.asyncio
    async def test_update_stock_unknown_variation(self, session, catalog):
        with pytest.raises(ProductNotFoundException):
            await ProductRepository.update_stock(3, 1, session, variation={"color": "Gold"})

    @pytest.mark.asyncio
    async def test_get_low_stock(self, session, catalog):
        low_stock = await ProductRepository.get_low_stock(10, session)

        assert [(p.product_id, p.quantity, p.variation) for p in low_stock] == [
            (2, 3, None),
            (3, 2, {"color": "Black"}),
        ]


class TestSubcategoryRepository:

    @pytest.mark.asyncio
    async def test_get_purchase_rates(self, session, catalog):
        rates = await SubcategoryRepository.get_purchase_rates(session)
        assert rates == {1: Decimal("500"), 2: None, 3: None}


class TestOrderRepository:

    @staticmethod
    def order_dto(created_at: datetime, total: str = "100") -> OrderDTO:
        return OrderDTO(
            user_id="guest",
            channel=OrderChannel.ONLINE,
            status=OrderStatus.PENDING,
            subtotal=Decimal(total),
            shipping_fee=Decimal(0),
            total_amount=Decimal(total),
            buyer_info={"full_name": "Asha Verma"},
            created_at=created_at,
            items=[OrderItemDTO(
                product_id=1, product_code="KN-1", product_name="Kundan Choker", category_id=1,
                subcategory_id=1, quantity=1, unit_price_at_order=Decimal(total), tier_table_ref="abc"
            )]
        )

    @pytest.mark.asyncio
    async def test_create_and_get(self, session):
        order_id = await OrderRepository.create(self.order_dto(datetime(2024, 5, 1, 10, 0)), session)
        session.commit()

        order = await OrderRepository.get_by_id(order_id, session)
        assert order.total_amount == Decimal("100")
        assert order.items[0].product_code == "KN-1"
        assert order.items[0].order_id == order_id

    @pytest.mark.asyncio
    async def test_get_missing(self, session):
        assert await OrderRepository.get_by_id(1, session) is None

    @pytest.mark.asyncio
    async def test_get_created_between(self, session):
        base = datetime(2024, 5, 1, 10, 0)
        for day in range(5):
            await OrderRepository.create(self.order_dto(base + timedelta(days=day)), session)
        session.commit()

        orders = await OrderRepository.get_created_between(
            session, start=base + timedelta(days=1), end=base + timedelta(days=3)
        )
        assert [o.created_at.day for o in orders] == [4, 3, 2]

        page = await OrderRepository.get_created_between(session, limit=2, offset=2)
        assert [o.created_at.day for o in page] == [3, 2]

    @pytest.mark.asyncio
    async def test_update_status(self, session):
        order_id = await OrderRepository.create(self.order_dto(datetime(2024, 5, 1)), session)
        session.commit()

        assert await OrderRepository.update_status(order_id, OrderStatus.DELIVERED, session) is True
        assert await OrderRepository.update_status(order_id + 1, OrderStatus.DELIVERED, session) is False

"""
Unit Tests: ReportService

Profit math, period summaries, CSV export and the low-stock report.
"""

import csv
from datetime import datetime
from decimal import Decimal
from io import StringIO

import pytest

from enums.order_channel import OrderChannel
from enums.order_status import OrderStatus
from models.category import Category
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from models.product import Product
from models.subcategory import Subcategory
from repositories.order import OrderRepository
from services.report import ReportService

NOW = datetime(2024, 6, 15, 18, 30)


def item(subcategory_id=1, quantity=2, unit_price="150"):
    return OrderItemDTO(
        product_id=1, product_code="KN-1", product_name="Kundan Choker", category_id=1,
        subcategory_id=subcategory_id, quantity=quantity,
        unit_price_at_order=Decimal(unit_price) if unit_price is not None else None,
        tier_table_ref="abc"
    )


def order(created_at, items, order_id=1, total="499"):
    return OrderDTO(
        id=order_id,
        user_id="guest",
        channel=OrderChannel.ONLINE,
        status=OrderStatus.PENDING,
        subtotal=Decimal(total),
        shipping_fee=Decimal(0),
        total_amount=Decimal(total),
        buyer_info={"full_name": "Asha Verma"},
        created_at=created_at,
        items=items
    )


PURCHASE_RATES = {1: Decimal("100"), 2: None}


class TestItemProfit:

    def test_margin_times_quantity(self):
        assert ReportService.item_profit(item(), Decimal("100")) == Decimal("100")

    def test_missing_purchase_rate(self):
        assert ReportService.item_profit(item(), None) == Decimal(0)

    def test_missing_price(self):
        assert ReportService.item_profit(item(unit_price=None), Decimal("100")) == Decimal(0)

    def test_selling_below_cost_is_negative(self):
        assert ReportService.item_profit(item(unit_price="80"), Decimal("100")) == Decimal("-40")


class TestProfitSummary:

    def test_order_profit_sums_items(self):
        o = order(NOW, [item(), item(subcategory_id=2), item(quantity=1, unit_price="300")])
        assert ReportService.order_profit(o, PURCHASE_RATES) == Decimal("300")

    def test_periods(self):
        orders = [
            order(datetime(2024, 6, 15, 9, 0), [item()]),               # today: 100
            order(datetime(2024, 6, 2, 12, 0), [item(quantity=4)]),     # this month: 200
            order(datetime(2024, 5, 31, 23, 59), [item(quantity=1)]),   # last month: 50
            order(datetime(2023, 6, 15, 9, 0), [item(quantity=1)]),     # same day last year: 50
        ]

        summary = ReportService.profit_summary(orders, PURCHASE_RATES, now=NOW)

        assert summary.today == Decimal("100")
        assert summary.this_month == Decimal("300")
        assert summary.total == Decimal("400")

    def test_no_orders(self):
        summary = ReportService.profit_summary([], PURCHASE_RATES, now=NOW)
        assert summary.total == summary.today == summary.this_month == Decimal(0)


class TestCsvExport:

    def test_rows(self):
        orders = [order(datetime(2024, 6, 15, 9, 0), [item()], order_id=7)]

        rows = list(csv.reader(StringIO(ReportService.to_csv(orders, PURCHASE_RATES))))

        assert rows[0] == ['order_id', 'created_at', 'channel', 'status', 'customer', 'total_amount', 'profit']
        assert rows[1] == ['7', '2024-06-15 09:00:00', 'ONLINE', 'Pending', 'Asha Verma', '499.00', '100.00']


class TestReportQueries:

    @pytest.fixture
    def catalog(self, session):
        session.add(Category(id=1, name="Necklaces"))
        session.add(Subcategory(id=1, name="Kundan", category_id=1, purchase_rate=Decimal("100")))
        session.flush()
        session.add_all([
            Product(id=1, category_id=1, subcategory_id=1, product_code="KN-1", name="Kundan Choker", quantity=4),
            Product(id=2, category_id=1, subcategory_id=1, product_code="KN-2", name="Kundan Set", quantity=40),
        ])
        session.commit()

    @pytest.mark.asyncio
    async def test_profit_report(self, session, catalog):
        await OrderRepository.create(order(datetime(2024, 6, 15, 9, 0), [item()]).model_copy(update={"id": None}), session)
        await OrderRepository.create(order(datetime(2024, 4, 1, 9, 0), [item(quantity=1)]).model_copy(update={"id": None}), session)
        session.commit()

        report = await ReportService.get_profit_report(session, now=NOW)
        assert report.summary.total == Decimal("150")
        assert report.summary.this_month == Decimal("100")
        assert report.revenue == Decimal("998")
        assert [entry.profit for entry in report.orders] == [Decimal("100"), Decimal("50")]

        ranged = await ReportService.get_profit_report(session, start=datetime(2024, 6, 1), now=NOW)
        assert len(ranged.orders) == 1

    @pytest.mark.asyncio
    async def test_orders_page(self, session, catalog):
        for day in range(1, 4):
            await OrderRepository.create(order(datetime(2024, 6, day), [item()]).model_copy(update={"id": None}), session)
        session.commit()

        first_page = await ReportService.get_orders_page(session, page=0)
        second_page = await ReportService.get_orders_page(session, page=1)

        assert [o.created_at.day for o in first_page] == [3, 2, 1]
        assert second_page == []

    @pytest.mark.asyncio
    async def test_low_stock_report(self, session, catalog):
        report = await ReportService.get_low_stock_report(session)

        assert report.threshold == 10
        assert [p.product_code for p in report.products] == ["KN-1"]

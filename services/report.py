"""
Report Service - profit and stock figures for the admin back-office.

Profit is derived from the price stored on each order item and the current
purchase rate of its subcategory. Orders carry no cost snapshot, so editing a
purchase rate changes the profit of past orders too.
"""

import csv
import logging
from datetime import datetime
from decimal import Decimal
from io import StringIO

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from models.report import ProfitSummaryDTO, OrderProfitDTO, ProfitReportDTO, LowStockReportDTO
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from repositories.subcategory import SubcategoryRepository


class ReportService:

    @staticmethod
    def item_profit(item: OrderItemDTO, purchase_rate: Decimal | None) -> Decimal:
        """
        (unit_price_at_order - purchase_rate) * quantity.

        Items without a purchase rate, price or quantity count as 0.
        """
        if not purchase_rate or not item.unit_price_at_order or not item.quantity:
            return Decimal(0)
        return (Decimal(item.unit_price_at_order) - Decimal(purchase_rate)) * item.quantity

    @staticmethod
    def order_profit(order: OrderDTO, purchase_rates: dict[int, Decimal | None]) -> Decimal:
        return sum(
            (ReportService.item_profit(item, purchase_rates.get(item.subcategory_id)) for item in order.items),
            Decimal(0)
        )

    @staticmethod
    def profit_summary(
        orders: list[OrderDTO],
        purchase_rates: dict[int, Decimal | None],
        now: datetime | None = None
    ) -> ProfitSummaryDTO:
        """
        Total profit, profit of today and profit of the current calendar month.

        Args:
            orders: Orders to aggregate
            purchase_rates: Purchase rate per subcategory id
            now: Reference time (defaults to datetime.now())
        """
        now = now or datetime.now()
        summary = ProfitSummaryDTO()
        for order in orders:
            profit = ReportService.order_profit(order, purchase_rates)
            summary.total += profit
            if order.created_at is None:
                continue
            if order.created_at.year == now.year and order.created_at.month == now.month:
                summary.this_month += profit
                if order.created_at.date() == now.date():
                    summary.today += profit
        return summary

    @staticmethod
    async def get_profit_report(
        session: AsyncSession | Session,
        start: datetime | None = None,
        end: datetime | None = None,
        now: datetime | None = None
    ) -> ProfitReportDTO:
        """
        Profit report over all orders, or the orders created within [start, end].
        """
        orders = await OrderRepository.get_created_between(session, start=start, end=end)
        purchase_rates = await SubcategoryRepository.get_purchase_rates(session)

        report = ProfitReportDTO(
            summary=ReportService.profit_summary(orders, purchase_rates, now),
            orders=[
                OrderProfitDTO(order=order, profit=ReportService.order_profit(order, purchase_rates))
                for order in orders
            ],
            revenue=sum((order.total_amount or Decimal(0) for order in orders), Decimal(0))
        )
        logging.info(
            f"[Report] Profit report: {len(orders)} order(s), profit={report.summary.total} "
            f"(start={start}, end={end})"
        )
        return report

    @staticmethod
    async def get_orders_page(
        session: AsyncSession | Session,
        page: int = 0,
        start: datetime | None = None,
        end: datetime | None = None
    ) -> list[OrderDTO]:
        """Orders newest first, REPORT_PAGE_SIZE per page (page is 0-based)."""
        page_size = config.REPORT_PAGE_SIZE
        return await OrderRepository.get_created_between(
            session, start=start, end=end, limit=page_size, offset=max(page, 0) * page_size
        )

    @staticmethod
    async def get_low_stock_report(session: AsyncSession | Session) -> LowStockReportDTO:
        threshold = config.LOW_STOCK_THRESHOLD
        products = await ProductRepository.get_low_stock(threshold, session)
        if products:
            logging.info(f"[Report] {len(products)} product(s) at or below stock threshold {threshold}")
        return LowStockReportDTO(threshold=threshold, products=products)

    @staticmethod
    def to_csv(orders: list[OrderDTO], purchase_rates: dict[int, Decimal | None]) -> str:
        """
        Export orders as CSV.

        Format:
            order_id,created_at,channel,status,customer,total_amount,profit
        """
        output = StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_ALL)

        writer.writerow(['order_id', 'created_at', 'channel', 'status', 'customer', 'total_amount', 'profit'])

        for order in orders:
            writer.writerow([
                str(order.id),
                order.created_at.isoformat(sep=' ', timespec='seconds') if order.created_at else '',
                order.channel.value if order.channel else '',
                order.status.value if order.status else '',
                (order.buyer_info or {}).get('full_name', ''),
                f"{Decimal(order.total_amount or 0):.2f}",
                f"{ReportService.order_profit(order, purchase_rates):.2f}"
            ])

        return output.getvalue()

from decimal import Decimal

from pydantic import BaseModel, Field

from models.order import OrderDTO
from models.product import LowStockProductDTO


class ProfitSummaryDTO(BaseModel):
    total: Decimal = Decimal(0)
    today: Decimal = Decimal(0)
    this_month: Decimal = Decimal(0)


class OrderProfitDTO(BaseModel):
    order: OrderDTO
    profit: Decimal


class ProfitReportDTO(BaseModel):
    summary: ProfitSummaryDTO
    orders: list[OrderProfitDTO] = Field(default_factory=list)
    revenue: Decimal = Decimal(0)


class LowStockReportDTO(BaseModel):
    threshold: int
    products: list[LowStockProductDTO] = Field(default_factory=list)

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute
from models.subcategory import Subcategory


class SubcategoryRepository:

    @staticmethod
    async def get_purchase_rates(session: Session | AsyncSession) -> dict[int, Decimal | None]:
        """Cost price per unit for every subcategory, keyed by subcategory id."""
        stmt = select(Subcategory.id, Subcategory.purchase_rate)
        result = await session_execute(stmt, session)
        return {row.id: row.purchase_rate for row in result.all()}

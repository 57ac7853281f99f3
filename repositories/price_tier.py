from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from enums.pricing_audience import PricingAudience
from models.price_tier import PriceTier, PriceTierDTO, TieredPricingDTO


class PriceTierRepository:
    """Repository for subcategory tier tables."""

    @staticmethod
    def _to_tiered_pricing(tiers: list[PriceTier]) -> TieredPricingDTO:
        tiered_pricing = TieredPricingDTO()
        for tier in tiers:
            tier_dto = PriceTierDTO.model_validate(tier, from_attributes=True)
            if tier.audience == PricingAudience.WHOLESALER.tier_key:
                tiered_pricing.wholesale.append(tier_dto)
            else:
                tiered_pricing.retail.append(tier_dto)
        return tiered_pricing

    @staticmethod
    async def get_by_subcategory(
        subcategory_id: int,
        session: Session | AsyncSession
    ) -> TieredPricingDTO | None:
        """
        Get the tier table of a subcategory.

        All products of the same subcategory share this table.

        Args:
            subcategory_id: ID of the subcategory
            session: Database session

        Returns:
            TieredPricingDTO with both tier lists sorted by min_quantity ascending,
            or None if the subcategory has no tiers configured
        """
        stmt = (
            select(PriceTier)
            .where(PriceTier.subcategory_id == subcategory_id)
            .order_by(PriceTier.min_quantity.asc())
        )
        result = await session_execute(stmt, session)
        tiers = result.scalars().all()
        if not tiers:
            return None
        return PriceTierRepository._to_tiered_pricing(tiers)

    @staticmethod
    async def get_by_subcategories(
        subcategory_ids: list[int],
        session: Session | AsyncSession
    ) -> dict[int, TieredPricingDTO]:
        """
        Batch-load tier tables for multiple subcategories (prevents N+1 queries).

        Args:
            subcategory_ids: List of subcategory IDs
            session: Database session

        Returns:
            Dict mapping subcategory_id to TieredPricingDTO.
            Subcategories without tiers are absent from the dict.
        """
        if not subcategory_ids:
            return {}

        stmt = (
            select(PriceTier)
            .where(PriceTier.subcategory_id.in_(subcategory_ids))
            .order_by(PriceTier.subcategory_id, PriceTier.min_quantity.asc())
        )
        result = await session_execute(stmt, session)
        all_tiers = result.scalars().all()

        tiers_by_subcategory = {}
        for tier in all_tiers:
            tiers_by_subcategory.setdefault(tier.subcategory_id, []).append(tier)

        return {
            subcategory_id: PriceTierRepository._to_tiered_pricing(tiers)
            for subcategory_id, tiers in tiers_by_subcategory.items()
        }

    @staticmethod
    async def replace_for_subcategory(
        subcategory_id: int,
        tiered_pricing: TieredPricingDTO,
        session: Session | AsyncSession
    ) -> None:
        """
        Overwrite the tier table of a subcategory (admin tier editor).

        Args:
            subcategory_id: ID of the subcategory
            tiered_pricing: New retail and wholesale tier lists
            session: Database session
        """
        await session_execute(delete(PriceTier).where(PriceTier.subcategory_id == subcategory_id), session)
        for audience in PricingAudience:
            for tier in tiered_pricing.for_audience(audience):
                session.add(PriceTier(
                    subcategory_id=subcategory_id,
                    audience=audience.tier_key,
                    min_quantity=tier.min_quantity,
                    max_quantity=tier.max_quantity,
                    unit_price=tier.unit_price
                ))
        await session_flush(session)

import logging
from typing import Any

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from exceptions.product import ProductNotFoundException
from models.product import Product, ProductDTO, LowStockProductDTO


def _same_variation(candidate: dict[str, Any], variation: dict[str, Any]) -> bool:
    """Variations are matched on their attributes (color, size, ...), never on stock."""
    candidate_attrs = {k: v for k, v in candidate.items() if k != "quantity" and v is not None}
    variation_attrs = {k: v for k, v in variation.items() if k != "quantity" and v is not None}
    return candidate_attrs == variation_attrs


class ProductRepository:

    @staticmethod
    async def get_by_id(product_id: int, session: Session | AsyncSession) -> ProductDTO | None:
        stmt = select(Product).where(Product.id == product_id)
        result = await session_execute(stmt, session)
        product = result.scalar()
        if product is None:
            return None
        return ProductDTO.model_validate(product, from_attributes=True)

    @staticmethod
    async def get_by_category(
        category_id: int,
        session: Session | AsyncSession,
        subcategory_id: int | None = None
    ) -> list[ProductDTO]:
        """
        Get the products of a category in catalog order, optionally narrowed to one subcategory.
        """
        stmt = select(Product).where(Product.category_id == category_id)
        if subcategory_id is not None:
            stmt = stmt.where(Product.subcategory_id == subcategory_id)
        stmt = stmt.order_by(Product.id.asc())
        result = await session_execute(stmt, session)
        return [ProductDTO.model_validate(product, from_attributes=True) for product in result.scalars().all()]

    @staticmethod
    async def update_stock(
        product_id: int,
        new_quantity: int,
        session: Session | AsyncSession,
        variation: dict[str, Any] | None = None
    ) -> None:
        """
        Overwrite the stock of a product, or of one of its variations.

        This is a plain overwrite, not a decrement: concurrent checkouts
        can both write a value computed from the same ceiling.

        Args:
            product_id: ID of the product
            new_quantity: New stock value (negative values are stored as 0)
            session: Database session
            variation: Variation attributes when the stock belongs to a variation

        Raises:
            ProductNotFoundException: If the product (or the variation) does not exist
        """
        new_quantity = max(new_quantity, 0)
        stmt = select(Product).where(Product.id == product_id)
        result = await session_execute(stmt, session)
        product = result.scalar()
        if product is None:
            raise ProductNotFoundException(product_id)

        if variation is None:
            product.quantity = new_quantity
        else:
            variations = [dict(v) for v in (product.variations or [])]
            matched = False
            for candidate in variations:
                if _same_variation(candidate, variation):
                    candidate["quantity"] = new_quantity
                    matched = True
                    break
            if not matched:
                raise ProductNotFoundException(product_id)
            # JSON columns are change-tracked by assignment only
            product.variations = variations

        await session_flush(session)
        logging.debug(f"[Stock] Product {product_id} stock set to {new_quantity} (variation={variation})")

    @staticmethod
    async def get_low_stock(threshold: int, session: Session | AsyncSession) -> list[LowStockProductDTO]:
        """
        Get products (and variations) whose stock is at or below the threshold.

        Products with variations are judged by their variations' stock only.
        """
        stmt = (
            select(Product)
            .where(or_(Product.quantity <= threshold, Product.variations.is_not(None)))
            .order_by(Product.id.asc())
        )
        result = await session_execute(stmt, session)

        low_stock = []
        for product in result.scalars().all():
            if product.variations:
                for variation in product.variations:
                    quantity = int(variation.get("quantity") or 0)
                    if quantity <= threshold:
                        low_stock.append(LowStockProductDTO(
                            product_id=product.id,
                            product_code=product.product_code,
                            name=product.name,
                            quantity=quantity,
                            variation={k: v for k, v in variation.items() if k != "quantity"}
                        ))
            elif product.quantity <= threshold:
                low_stock.append(LowStockProductDTO(
                    product_id=product.id,
                    product_code=product.product_code,
                    name=product.name,
                    quantity=product.quantity
                ))
        return low_stock

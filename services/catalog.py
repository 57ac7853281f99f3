import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from enums.pricing_audience import PricingAudience
from enums.product_sort import ProductSort
from exceptions.product import ProductNotFoundException
from models.cart import CartDTO
from models.price_tier import TieredPricingDTO
from models.product import ProductDTO
from repositories.price_tier import PriceTierRepository
from repositories.product import ProductRepository
from services.cart import CartService
from services.pricing import PricingService


class CatalogService:
    """Product listing: the price each product would get now, search and price sorting."""

    @staticmethod
    def listing_price(
        tiered_pricing: TieredPricingDTO | None,
        audience: PricingAudience,
        cart: CartDTO
    ) -> Decimal | None:
        """
        Price shown on a product card.

        Uses the quantity the cart already holds for the product's pricing group,
        so the card shows the tier the shopper has reached.

        Returns:
            Unit price, or None if the product's subcategory has no tiers for the audience
        """
        tiers = tiered_pricing.for_audience(audience) if tiered_pricing else None
        if not tiers:
            return None
        tier_table_id = PricingService.pricing_fingerprint(tiers)
        return PricingService.price_for_quantity(tiers, CartService.pooled_quantity(cart, tier_table_id))

    @staticmethod
    def search(products: list[ProductDTO], term: str | None) -> list[ProductDTO]:
        """Case-insensitive match on product name or code."""
        if not term or not term.strip():
            return list(products)
        needle = term.strip().lower()
        return [
            product for product in products
            if needle in (product.name or "").lower() or needle in (product.product_code or "").lower()
        ]

    @staticmethod
    def sort_products(
        products: list[ProductDTO],
        pricing_by_subcategory: dict[int, TieredPricingDTO],
        audience: PricingAudience,
        cart: CartDTO,
        sort_by: ProductSort = ProductSort.DEFAULT
    ) -> list[ProductDTO]:
        """
        Sort products for the listing. Returns a new list.

        DEFAULT keeps catalog order. Price sorts put products without pricing last
        in both directions; ties keep catalog order.
        """
        if sort_by == ProductSort.DEFAULT:
            return list(products)

        prices = {
            id(product): CatalogService.listing_price(
                pricing_by_subcategory.get(product.subcategory_id), audience, cart
            )
            for product in products
        }
        priced = [product for product in products if prices[id(product)] is not None]
        unpriced = [product for product in products if prices[id(product)] is None]
        priced.sort(key=lambda product: prices[id(product)], reverse=sort_by == ProductSort.PRICE_DESC)
        return priced + unpriced

    @staticmethod
    async def get_listing(
        category_id: int,
        audience: PricingAudience,
        cart: CartDTO,
        session: Session | AsyncSession,
        subcategory_id: int | None = None,
        sort_by: ProductSort = ProductSort.DEFAULT,
        term: str | None = None
    ) -> list[dict]:
        """
        Products of a category with their current listing price.

        Returns:
            list of dicts: {"product": ProductDTO, "price": Decimal | None,
                            "tiered_pricing": TieredPricingDTO | None}
        """
        products = await ProductRepository.get_by_category(category_id, session, subcategory_id)
        subcategory_ids = list({product.subcategory_id for product in products})
        pricing_by_subcategory = await PriceTierRepository.get_by_subcategories(subcategory_ids, session)

        products = CatalogService.search(products, term)
        products = CatalogService.sort_products(products, pricing_by_subcategory, audience, cart, sort_by)
        logging.debug(f"[Catalog] Listing category {category_id}: {len(products)} product(s), sort={sort_by.value}")

        return [
            {
                "product": product,
                "price": CatalogService.listing_price(
                    pricing_by_subcategory.get(product.subcategory_id), audience, cart
                ),
                "tiered_pricing": pricing_by_subcategory.get(product.subcategory_id),
            }
            for product in products
        ]

    @staticmethod
    async def get_product(
        product_id: int,
        session: Session | AsyncSession
    ) -> tuple[ProductDTO, TieredPricingDTO | None]:
        """
        Load a product snapshot with its subcategory's tier table, as CartService.add_line takes them.

        Raises:
            ProductNotFoundException: If the product does not exist
        """
        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)
        tiered_pricing = None
        if product.subcategory_id is not None:
            tiered_pricing = await PriceTierRepository.get_by_subcategory(product.subcategory_id, session)
        return product, tiered_pricing

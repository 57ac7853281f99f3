"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from enums.runtime_environment import RuntimeEnvironment

# Mock config module completely before any imports
config_mock = MagicMock()
config_mock.RUNTIME_ENVIRONMENT = RuntimeEnvironment.TEST
config_mock.DB_NAME = "test.db"
config_mock.WEBAPP_HOST = "127.0.0.1"
config_mock.WEBAPP_PORT = 8000
config_mock.LANGUAGE = "en"  # For Localizator
config_mock.CURRENCY_SYMBOL = "₹"
config_mock.SHIPPING_FEE = Decimal("199")
config_mock.WHOLESALER_MIN_ORDER_VALUE = Decimal("5000")
config_mock.LOW_STOCK_THRESHOLD = 10
config_mock.REPORT_PAGE_SIZE = 50
config_mock.NOTIFY_NEW_ORDERS = True
config_mock.MSG91_AUTH_KEY = "test-msg91-auth-key"
config_mock.MSG91_ENDPOINT = "https://api.msg91.test/api/v5/whatsapp/whatsapp-outbound-message/bulk/"
config_mock.MSG91_INTEGRATED_NUMBER = "919000000000"
config_mock.WHATSAPP_TEMPLATE_NAME = "new_order_alert"
config_mock.WHATSAPP_TEMPLATE_LANGUAGE = "en"
config_mock.WHATSAPP_NOTIFY_NUMBERS = ["919876543210"]
config_mock.LOG_LEVEL = "INFO"
config_mock.LOG_MASK_SECRETS = True
config_mock.LOG_RETENTION_DAYS = 7

sys.modules['config'] = config_mock


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def session():
    """Sync in-memory SQLite session; repositories accept it through the dual-mode helpers."""
    from models.base import Base
    import db  # registers all models on Base.metadata

    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    session = Session(engine)
    yield session
    session.rollback()
    session.close()
    engine.dispose()


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False
    )

    from db import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine):
    """Create async test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


# ============================================================================
# Catalog Fixtures
# ============================================================================

@pytest.fixture
def retail_tiers():
    from models.price_tier import PriceTierDTO
    return [
        PriceTierDTO(min_quantity=0, max_quantity=9, unit_price=Decimal("100")),
        PriceTierDTO(min_quantity=10, max_quantity=None, unit_price=Decimal("90")),
    ]


@pytest.fixture
def tiered_pricing(retail_tiers):
    """Tier table used by most cart tests: retail 0-9 → 100, 10+ → 90; wholesale 0-49 → 70, 50+ → 60."""
    from models.price_tier import PriceTierDTO, TieredPricingDTO
    return TieredPricingDTO(
        retail=retail_tiers,
        wholesale=[
            PriceTierDTO(min_quantity=0, max_quantity=49, unit_price=Decimal("70")),
            PriceTierDTO(min_quantity=50, max_quantity=None, unit_price=Decimal("60")),
        ]
    )


@pytest.fixture
def make_product():
    from models.product import ProductDTO

    def _make(product_id: int, quantity: int | None = 20, subcategory_id: int = 1, variations=None):
        return ProductDTO(
            id=product_id,
            category_id=1,
            subcategory_id=subcategory_id,
            product_code=f"JW-{product_id:03d}",
            name=f"Ring {product_id}",
            quantity=quantity,
            variations=variations
        )
    return _make

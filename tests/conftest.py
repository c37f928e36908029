"""
Shared pytest fixtures for all tests.

This module provides common fixtures for settings, database sessions,
the notification gateway stub and test data.
"""

import os
from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"

from fashop.config.settings import Settings  # noqa: E402
from fashop.core.domain import generate_uuid  # noqa: E402
from fashop.domains.marketplace.domain.entities import Product, Supplier  # noqa: E402
from fashop.domains.marketplace.domain.value_objects import DeliveryAddress  # noqa: E402
from fashop.models.db import Base  # noqa: E402
from tests.factories import RecordingGateway, make_address, make_product, make_supplier  # noqa: E402

# ============================================================================
# SETTINGS
# ============================================================================


@pytest.fixture
def db_url(tmp_path) -> str:
    """File-backed SQLite so every connection sees the same data."""
    return f"sqlite+aiosqlite:///{tmp_path / 'fashop_test.db'}"


@pytest.fixture
def test_settings(db_url: str) -> Settings:
    return Settings(
        DB_URL=db_url,
        ENVIRONMENT="test",
        ADMIN_API_TOKEN="test-admin-token",
        SMS_API_URL=None,
        SMS_API_KEY=None,
        ORDER_DELIVERY_FEE=Decimal("15000"),
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def async_engine(db_url: str):
    """Create the test engine and the schema."""
    engine = create_async_engine(db_url, poolclass=NullPool)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(async_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session per test; whatever is left uncommitted is rolled back."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ============================================================================
# NOTIFICATIONS
# ============================================================================


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


# ============================================================================
# TEST DATA
# ============================================================================


@pytest.fixture
def supplier() -> Supplier:
    return make_supplier(supplier_id=generate_uuid())


@pytest.fixture
def product(supplier: Supplier) -> Product:
    return make_product(supplier, product_id=generate_uuid())


@pytest.fixture
def delivery_address() -> DeliveryAddress:
    return make_address()

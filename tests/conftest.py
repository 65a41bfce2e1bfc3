"""Shared test fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.pa_money.decimal_engine import DecimalConfig, DecimalEngine


@pytest_asyncio.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def engine() -> DecimalEngine:
    """Engine with the production defaults, independent of the cached singleton."""
    return DecimalEngine(DecimalConfig(precision=20, rounding="ROUND_HALF_EVEN"))

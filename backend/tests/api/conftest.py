"""API test infrastructure — async httpx client over an app with a fake-clock monitor."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def app(monitor):
    from app.main import create_app

    # ASGITransport does not run the lifespan, so no timers are started and
    # ticks are driven explicitly by the tests.
    yield create_app(monitor=monitor)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def low_fuel_client(monitor_factory) -> AsyncGenerator[AsyncClient, None]:
    from app.main import create_app

    application = create_app(monitor=monitor_factory(fuel_pct=12.0))
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

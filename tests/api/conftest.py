"""Shared client fixture for API tests."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from parstock.api.main import app


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """ASGI client; dependency overrides are cleared afterwards."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

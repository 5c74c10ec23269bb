"""API fixtures.

The process-wide client dependency is overridden with one built on fake
collaborators, so these tests need no node or wallet. ASGITransport does
not run the lifespan, so the wallet watcher is never started.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.ml_client.dependencies import get_client
from src.ml_client.service import MetaLockedClient


@pytest.fixture
async def client(ml_client: MetaLockedClient) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app, with get_client overridden."""
    app.dependency_overrides[get_client] = lambda: ml_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

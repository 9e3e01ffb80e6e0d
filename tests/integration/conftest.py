"""API test fixtures: the app wired to the per-test SQLite database."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from hrms_payroll.api.app import create_app


@pytest_asyncio.fixture
async def client(session_factory, directory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, sharing the test database and directory."""
    app = create_app(directory=directory, session_factory=session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

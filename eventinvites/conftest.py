import os
import tempfile
from contextlib import asynccontextmanager

import pytest

# Configure before the settings are imported
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'eventinvites_test.db')}"
)
os.environ["RESEND_API_KEY"] = ""
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["INVITATION_DELAY_SECONDS"] = "0"

from httpx import ASGITransport, AsyncClient  # noqa: E402

from eventinvites.config.database import engine  # noqa: E402
from eventinvites.events.repository import orm_models  # noqa: E402,F401
from eventinvites.main import app  # noqa: E402
from eventinvites.models import BaseModel  # noqa: E402


@pytest.fixture
async def database():
    """Create all tables for the test and drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture
async def client():
    """Create a test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_factory():
    """
    Build a test client with dependency overrides.

    Usage:
        async with client_factory({get_write_model: lambda: write_model}) as client:
            ...
    """

    @asynccontextmanager
    async def _factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return _factory

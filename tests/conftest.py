import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.api.deps import get_store, get_today
from app.data.mock_data import MockDataStore
from tests.factories import REFERENCE_DATE


@pytest.fixture
def reference_date():
    """Fixed "today" so recency rules are deterministic."""
    return REFERENCE_DATE


@pytest.fixture
def store():
    """Seeded in-memory data store."""
    return MockDataStore(seed=1234, customer_count=60, order_count=40, today=REFERENCE_DATE)


@pytest_asyncio.fixture
async def client(store: MockDataStore):
    """Create test client with overridden data store and clock."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_today] = lambda: REFERENCE_DATE

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

import os
import tempfile

# settings are read at import time, point them somewhere harmless first
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="backoffice-logs-"))
os.environ.setdefault("SQLITE_DATABASE_URI", "sqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.core.deps import get_db
from backoffice.db.base import Base
from backoffice.main import app
from backoffice.services.storage import Storage
import backoffice.models  # noqa: F401


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def storage(session_factory):
    async with session_factory() as session:
        yield Storage(session)


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Factory:
    """Creates master data through the API"""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def _post(self, url: str, payload: dict) -> dict:
        response = await self.client.post(url, json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    async def vendor(self, name: str = "Green Farms", phone: str = "9000000001", **extra) -> dict:
        return await self._post("/api/vendors", {"name": name, "phone": phone, **extra})

    async def customer(self, name: str = "City Hotel", phone: str = "9000000002", **extra) -> dict:
        return await self._post("/api/customers", {"name": name, "phone": phone, **extra})

    async def vehicle(self, number: str = "KA01AB1234", type: str = "truck", **extra) -> dict:
        return await self._post("/api/vehicles", {"number": number, "type": type, **extra})

    async def product(
        self,
        name: str = "Tomato",
        unit: str = "kg",
        purchase_price: float = 20,
        sale_price: float = 30,
        **extra) -> dict:
        return await self._post("/api/products", {
            "name": name,
            "unit": unit,
            "purchase_price": purchase_price,
            "sale_price": sale_price,
            **extra,
        })

    async def purchase(self, vendor_id: int, items: list, date: str = "2024-12-01", **extra) -> dict:
        return await self._post("/api/purchases", {
            "vendor_id": vendor_id, "date": date, "items": items, **extra
        })

    async def invoice(self, customer_id: int, items: list, date: str = "2024-12-02", **extra) -> dict:
        return await self._post("/api/invoices", {
            "customer_id": customer_id, "date": date, "items": items, **extra
        })


@pytest.fixture
def factory(client):
    return Factory(client)

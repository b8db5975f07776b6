import pytest
from httpx import ASGITransport, AsyncClient

from backoffice.core.deps import get_db
from backoffice.main import app
from backoffice.services.storage import Storage


async def broken_storage(*args, **kwargs):
    raise RuntimeError("database is gone")


@pytest.mark.asyncio
async def test_report_failure_answers_500(client, monkeypatch):
    monkeypatch.setattr(Storage, "get_products", broken_storage)

    response = await client.get("/api/reports/low-stock")
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to generate report"}


@pytest.mark.asyncio
async def test_unhandled_error_answers_500(session_factory, monkeypatch):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    monkeypatch.setattr(Storage, "get_vendor", broken_storage)
    app.dependency_overrides[get_db] = override_get_db
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/vendors/1")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}

import pytest


@pytest.mark.asyncio
async def test_settings_start_empty(client):
    response = await client.get("/api/company-settings")
    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_settings_upsert_keeps_one_row(client):
    response = await client.post("/api/company-settings", json={"name": "Fresh Veg Co", "phone": "080-1234"})
    assert response.status_code == 201
    first = response.json()

    response = await client.post("/api/company-settings", json={"name": "Fresh Veg Company", "gst_number": "29ABCDE"})
    assert response.status_code == 201
    second = response.json()

    assert second["id"] == first["id"]
    stored = (await client.get("/api/company-settings")).json()
    assert stored["name"] == "Fresh Veg Company"
    assert stored["gst_number"] == "29ABCDE"


@pytest.mark.asyncio
async def test_settings_name_required(client):
    for payload in [{}, {"name": ""}, {"name": "   "}]:
        response = await client.post("/api/company-settings", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid company settings data"


@pytest.mark.asyncio
async def test_settings_page_renders_stored_values(client):
    await client.post("/api/company-settings", json={"name": "Fresh Veg Co", "address": "12 Market St"})

    response = await client.get("/settings")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'value="Fresh Veg Co"' in response.text
    assert "12 Market St" in response.text
    assert "/api/company-settings" in response.text


@pytest.mark.asyncio
async def test_settings_page_escapes_values(client):
    await client.post("/api/company-settings", json={"name": "<b>Co</b>"})
    response = await client.get("/settings")
    assert "<b>Co</b>" not in response.text
    assert "&lt;b&gt;Co&lt;/b&gt;" in response.text


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}

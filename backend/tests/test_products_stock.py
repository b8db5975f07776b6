import pytest


@pytest.mark.asyncio
async def test_product_defaults(client, factory):
    product = await factory.product()
    assert product["current_stock"] == 0.0
    assert product["reorder_level"] == 10.0


@pytest.mark.asyncio
async def test_product_validation(client):
    response = await client.post("/api/products", json={
        "name": "Onion", "unit": "kg", "purchase_price": -1, "sale_price": 10
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid product data"


@pytest.mark.asyncio
async def test_product_update_and_list(client, factory):
    product = await factory.product()
    await factory.product(name="Onion")

    response = await client.patch(f"/api/products/{product['id']}", json={"sale_price": 35})
    assert response.status_code == 200
    assert response.json()["sale_price"] == 35.0
    assert response.json()["purchase_price"] == 20.0

    body = (await client.get("/api/products", params={"search": "Oni"})).json()
    assert body["total"] == 1
    assert body["data"][0]["name"] == "Onion"


@pytest.mark.asyncio
async def test_stock_movement_in_and_out(client, factory):
    product = await factory.product()

    response = await client.post("/api/stock-movements", json={
        "product_id": product["id"], "type": "in", "quantity": 15, "reason": "Opening count", "date": "2024-12-01"
    })
    assert response.status_code == 201

    response = await client.post("/api/stock-movements", json={
        "product_id": product["id"], "type": "out", "quantity": 4, "reason": "Spoilage", "date": "2024-12-02"
    })
    assert response.status_code == 201

    stock = (await client.get(f"/api/products/{product['id']}")).json()["current_stock"]
    assert stock == 11.0


@pytest.mark.asyncio
async def test_stock_never_goes_negative(client, factory):
    product = await factory.product(current_stock=3)
    response = await client.post("/api/stock-movements", json={
        "product_id": product["id"], "type": "out", "quantity": 10, "reason": "Write-off", "date": "2024-12-02"
    })
    assert response.status_code == 201
    assert (await client.get(f"/api/products/{product['id']}")).json()["current_stock"] == 0.0


@pytest.mark.asyncio
async def test_stock_movement_validation(client, factory):
    product = await factory.product()
    response = await client.post("/api/stock-movements", json={
        "product_id": product["id"], "type": "sideways", "quantity": 1, "reason": "?", "date": "2024-12-02"
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid stock movement data"

    response = await client.post("/api/stock-movements", json={
        "product_id": 999, "type": "in", "quantity": 1, "reason": "Count", "date": "2024-12-02"
    })
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stock_movement_filters(client, factory):
    tomato = await factory.product()
    onion = await factory.product(name="Onion")
    for product_id, day in [(tomato["id"], "2024-12-01"), (tomato["id"], "2024-12-05"), (onion["id"], "2024-12-03")]:
        await client.post("/api/stock-movements", json={
            "product_id": product_id, "type": "in", "quantity": 1, "reason": "Count", "date": day
        })

    movements = (await client.get("/api/stock-movements")).json()
    assert [m["date"] for m in movements] == ["2024-12-05", "2024-12-03", "2024-12-01"]

    movements = (await client.get("/api/stock-movements", params={"start_date": "2024-12-02"})).json()
    assert len(movements) == 2

    movements = (await client.get("/api/stock-movements", params={"end_date": "2024-12-03"})).json()
    assert len(movements) == 2

    movements = (await client.get("/api/stock-movements", params={
        "start_date": "2024-12-01", "end_date": "2024-12-05", "product_id": tomato["id"]
    })).json()
    assert len(movements) == 2

    response = await client.get("/api/stock-movements", params={"start_date": "yesterday"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_product(client, factory):
    unused = await factory.product(name="Unused")
    assert (await client.delete(f"/api/products/{unused['id']}")).status_code == 204

    used = await factory.product()
    await client.post("/api/stock-movements", json={
        "product_id": used["id"], "type": "in", "quantity": 1, "reason": "Count", "date": "2024-12-01"
    })
    response = await client.delete(f"/api/products/{used['id']}")
    assert response.status_code == 400
    assert "stock movements" in response.json()["detail"]

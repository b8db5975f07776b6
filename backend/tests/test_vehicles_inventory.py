import pytest


@pytest.mark.asyncio
async def test_vehicle_crud(client, factory):
    vehicle = await factory.vehicle(driver_name="Ravi")
    assert vehicle["number"] == "KA01AB1234"

    response = await client.patch(f"/api/vehicles/{vehicle['id']}", json={"capacity": "2 ton"})
    assert response.status_code == 200
    assert response.json()["capacity"] == "2 ton"
    assert response.json()["driver_name"] == "Ravi"

    response = await client.get("/api/vehicles")
    assert response.json()["total"] == 1

    response = await client.post("/api/vehicles", json={"number": "KA02"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid vehicle data"


@pytest.mark.asyncio
async def test_purchase_with_vehicle_loads_inventory(client, factory):
    vendor = await factory.vendor()
    vehicle = await factory.vehicle()
    product = await factory.product()

    purchase = await factory.purchase(
        vendor["id"],
        [{"product_id": product["id"], "quantity": 40, "unit_price": 20}],
        vehicle_id=vehicle["id"],
    )

    inventory = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory")).json()
    assert len(inventory) == 1
    assert inventory[0]["product_id"] == product["id"]
    assert inventory[0]["quantity"] == 40.0

    movements = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory-movements")).json()
    assert movements[0]["type"] == "load"
    assert movements[0]["reference_id"] == purchase["id"]
    assert movements[0]["reference_type"] == "purchase"


@pytest.mark.asyncio
async def test_repeated_product_lines_share_one_inventory_row(client, factory):
    vendor = await factory.vendor()
    vehicle = await factory.vehicle()
    product = await factory.product()

    await factory.purchase(
        vendor["id"],
        [
            {"product_id": product["id"], "quantity": 5, "unit_price": 20},
            {"product_id": product["id"], "quantity": 7, "unit_price": 20},
        ],
        vehicle_id=vehicle["id"],
    )

    inventory = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory")).json()
    assert len(inventory) == 1
    assert inventory[0]["quantity"] == 12.0


@pytest.mark.asyncio
async def test_invoice_deducts_vehicle_inventory(client, factory):
    vendor = await factory.vendor()
    customer = await factory.customer()
    vehicle = await factory.vehicle()
    product = await factory.product()
    await factory.purchase(
        vendor["id"], [{"product_id": product["id"], "quantity": 30, "unit_price": 20}], vehicle_id=vehicle["id"]
    )

    invoice = await factory.invoice(
        customer["id"], [{"product_id": product["id"], "quantity": 12, "unit_price": 30}], vehicle_id=vehicle["id"]
    )

    inventory = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory")).json()
    assert inventory[0]["quantity"] == 18.0

    movements = (await client.get("/api/vehicle-inventory-movements", params={"vehicle_id": vehicle["id"]})).json()
    sale = [m for m in movements if m["type"] == "sale"]
    assert len(sale) == 1
    assert sale[0]["reference_id"] == invoice["id"]
    assert sale[0]["reference_type"] == "invoice"


@pytest.mark.asyncio
async def test_invoice_goes_through_when_vehicle_is_short(client, factory):
    customer = await factory.customer()
    vehicle = await factory.vehicle()
    product = await factory.product(current_stock=50)

    response = await client.post(f"/api/vehicles/{vehicle['id']}/inventory", json={
        "product_id": product["id"], "quantity": 3
    })
    assert response.status_code == 201

    await factory.invoice(
        customer["id"], [{"product_id": product["id"], "quantity": 10, "unit_price": 30}], vehicle_id=vehicle["id"]
    )

    inventory = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory")).json()
    assert inventory[0]["quantity"] == 3.0
    product_after = (await client.get(f"/api/products/{product['id']}")).json()
    assert product_after["current_stock"] == 40.0


@pytest.mark.asyncio
async def test_set_inventory_logs_signed_adjustment(client, factory):
    vehicle = await factory.vehicle()
    product = await factory.product()
    await client.post(f"/api/vehicles/{vehicle['id']}/inventory", json={"product_id": product["id"], "quantity": 10})

    response = await client.patch(
        f"/api/vehicles/{vehicle['id']}/inventory/{product['id']}", json={"quantity": 7, "notes": "Spoiled"}
    )
    assert response.status_code == 200
    assert response.json()["quantity"] == 7.0

    movements = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory-movements")).json()
    adjustment = [m for m in movements if m["type"] == "adjustment"]
    assert adjustment[0]["quantity"] == -3.0
    assert adjustment[0]["notes"] == "Spoiled"


@pytest.mark.asyncio
async def test_set_inventory_without_row_is_404(client, factory):
    vehicle = await factory.vehicle()
    product = await factory.product()
    response = await client.patch(f"/api/vehicles/{vehicle['id']}/inventory/{product['id']}", json={"quantity": 1})
    assert response.status_code == 404

    response = await client.get("/api/vehicles/999/inventory")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_load_rejects_non_positive_quantity(client, factory):
    vehicle = await factory.vehicle()
    product = await factory.product()
    response = await client.post(f"/api/vehicles/{vehicle['id']}/inventory", json={
        "product_id": product["id"], "quantity": 0
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid vehicle inventory data"


@pytest.mark.asyncio
async def test_recorded_movements_apply_to_inventory(client, factory):
    vehicle = await factory.vehicle()
    product = await factory.product()

    async def record(movement_type, quantity):
        return await client.post("/api/vehicle-inventory-movements", json={
            "vehicle_id": vehicle["id"],
            "product_id": product["id"],
            "type": movement_type,
            "quantity": quantity,
        })

    assert (await record("load", 10)).status_code == 201
    assert (await record("sale", 4)).status_code == 201
    assert (await record("adjustment", -2)).status_code == 201

    response = await record("sale", 50)
    assert response.status_code == 400

    inventory = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory")).json()
    assert inventory[0]["quantity"] == 4.0

    assert (await record("adjustment", -100)).status_code == 201
    inventory = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory")).json()
    assert inventory[0]["quantity"] == 0.0

    assert (await record("unload", 1)).status_code == 400


@pytest.mark.asyncio
async def test_all_vehicle_inventories_grouped(client, factory):
    first = await factory.vehicle(number="V1")
    second = await factory.vehicle(number="V2")
    product = await factory.product()
    await client.post(f"/api/vehicles/{first['id']}/inventory", json={"product_id": product["id"], "quantity": 5})

    grouped = (await client.get("/api/vehicle-inventories")).json()
    assert len(grouped[str(first["id"])]) == 1
    assert grouped[str(second["id"])] == []


@pytest.mark.asyncio
async def test_delete_vehicle_removes_inventory(client, factory):
    vehicle = await factory.vehicle()
    product = await factory.product()
    await client.post(f"/api/vehicles/{vehicle['id']}/inventory", json={"product_id": product["id"], "quantity": 5})

    response = await client.delete(f"/api/vehicles/{vehicle['id']}")
    assert response.status_code == 204

    grouped = (await client.get("/api/vehicle-inventories")).json()
    assert str(vehicle["id"]) not in grouped
    movements = (await client.get("/api/vehicle-inventory-movements")).json()
    assert movements == []


@pytest.mark.asyncio
async def test_delete_vehicle_used_by_documents_is_refused(client, factory):
    vendor = await factory.vendor()
    vehicle = await factory.vehicle()
    product = await factory.product()
    await factory.purchase(
        vendor["id"], [{"product_id": product["id"], "quantity": 1, "unit_price": 1}], vehicle_id=vehicle["id"]
    )
    response = await client.delete(f"/api/vehicles/{vehicle['id']}")
    assert response.status_code == 400

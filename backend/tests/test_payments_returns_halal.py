import pytest


@pytest.mark.asyncio
async def test_vendor_payments_listing(client, factory):
    first = await factory.vendor(name="First")
    second = await factory.vendor(name="Second", phone="2")
    for vendor_id, amount, day in [(first["id"], 10, "2024-12-01"), (first["id"], 20, "2024-12-03"), (second["id"], 5, "2024-12-02")]:
        response = await client.post("/api/vendor-payments", json={
            "vendor_id": vendor_id, "amount": amount, "date": day, "payment_method": "bank"
        })
        assert response.status_code == 201

    payments = (await client.get("/api/vendor-payments")).json()
    assert [p["amount"] for p in payments] == [20.0, 5.0, 10.0]

    payments = (await client.get("/api/vendor-payments", params={"vendor_id": first["id"]})).json()
    assert len(payments) == 2


@pytest.mark.asyncio
async def test_vendor_return_side_effects(client, factory):
    vendor = await factory.vendor()
    vehicle = await factory.vehicle()
    product = await factory.product()
    purchase = await factory.purchase(
        vendor["id"], [{"product_id": product["id"], "quantity": 20, "unit_price": 10}], vehicle_id=vehicle["id"]
    )

    response = await client.post("/api/vendor-returns", json={
        "vendor_id": vendor["id"],
        "purchase_id": purchase["id"],
        "vehicle_id": vehicle["id"],
        "date": "2024-12-04",
        "items": [{"product_id": product["id"], "quantity": 5, "unit_price": 10, "reason": "Rotten"}],
    })
    assert response.status_code == 201
    vendor_return = response.json()
    assert vendor_return["return_no"] == "RT20241204001"
    assert vendor_return["total_amount"] == 50.0

    assert (await client.get(f"/api/products/{product['id']}")).json()["current_stock"] == 15.0

    inventory = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory")).json()
    assert inventory[0]["quantity"] == 15.0

    movements = (await client.get(f"/api/vehicles/{vehicle['id']}/inventory-movements")).json()
    returned = [m for m in movements if m["type"] == "return"]
    assert returned[0]["reference_type"] == "vendor_return"

    stock_log = (await client.get("/api/stock-movements", params={"start_date": "2024-12-04"})).json()
    assert stock_log[0]["reason"] == "Vendor return: Rotten"

    items = (await client.get(f"/api/vendor-returns/{vendor_return['id']}/items")).json()
    assert items[0]["reason"] == "Rotten"

    listed = (await client.get("/api/vendor-returns", params={"vendor_id": vendor["id"]})).json()
    assert [r["id"] for r in listed] == [vendor_return["id"]]


@pytest.mark.asyncio
async def test_vendor_return_validation(client, factory):
    vendor = await factory.vendor()
    product = await factory.product()

    response = await client.post("/api/vendor-returns", json={
        "vendor_id": vendor["id"],
        "date": "2024-12-04",
        "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 1}],
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid vendor return data"

    other = await factory.vendor(name="Other", phone="3")
    purchase = await factory.purchase(other["id"], [{"product_id": product["id"], "quantity": 1, "unit_price": 1}])
    response = await client.post("/api/vendor-returns", json={
        "vendor_id": vendor["id"],
        "purchase_id": purchase["id"],
        "date": "2024-12-04",
        "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 1, "reason": "Wrong"}],
    })
    assert response.status_code == 400

    assert (await client.get("/api/vendor-returns/999")).status_code == 404


@pytest.mark.asyncio
async def test_halal_cash_linked_to_invoice(client, factory):
    customer = await factory.customer()
    product = await factory.product(current_stock=10)
    invoice = await factory.invoice(
        customer["id"],
        [{"product_id": product["id"], "quantity": 10, "unit_price": 10}],
        include_halal_charge=True,
        halal_paid_by_cash=True,
    )

    response = await client.post("/api/halal-cash", json={
        "amount": 2, "date": "2024-12-02", "invoice_id": invoice["id"]
    })
    assert response.status_code == 201
    payment = response.json()
    assert payment["payment_method"] == "cash"
    assert payment["invoice_number"] == invoice["invoice_number"]
    assert payment["total_bill_amount"] == 100.0
    assert payment["customer_id"] == customer["id"]


@pytest.mark.asyncio
async def test_halal_cash_direct_entry_and_delete(client):
    response = await client.post("/api/halal-cash", json={"amount": 40, "date": "2024-12-05", "notes": "Market day"})
    assert response.status_code == 201
    payment = response.json()
    assert payment["invoice_id"] is None

    await client.post("/api/halal-cash", json={"amount": 10, "date": "2024-11-05"})

    listed = (await client.get("/api/halal-cash", params={"start_date": "2024-12-01"})).json()
    assert [p["id"] for p in listed] == [payment["id"]]

    assert (await client.delete(f"/api/halal-cash/{payment['id']}")).status_code == 204
    assert (await client.delete(f"/api/halal-cash/{payment['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_halal_cash_validation(client):
    response = await client.post("/api/halal-cash", json={"amount": -1, "date": "2024-12-05"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid halal cash payment data"

    response = await client.post("/api/halal-cash", json={"amount": 1, "date": "2024-12-05", "invoice_id": 999})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_halal_cash_rejects_invoice_of_another_customer(client, factory):
    product = await factory.product()
    hotel = await factory.customer()
    cafe = await factory.customer(name="Corner Cafe", phone="9000000003")
    invoice = await factory.invoice(
        hotel["id"],
        [{"product_id": product["id"], "quantity": 1, "unit_price": 100}],
        include_halal_charge=True,
        halal_paid_by_cash=True,
    )

    response = await client.post("/api/halal-cash", json={
        "amount": 2, "date": "2024-12-05", "invoice_id": invoice["id"], "customer_id": cafe["id"],
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invoice belongs to another customer"

    response = await client.post("/api/halal-cash", json={
        "amount": 2, "date": "2024-12-05", "invoice_id": invoice["id"], "customer_id": hotel["id"],
    })
    assert response.status_code == 201

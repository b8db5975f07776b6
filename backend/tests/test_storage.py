import datetime as dt
from decimal import Decimal

import pytest

from backoffice.schemas.purchase import PurchaseCreate
from backoffice.services.storage import compute_halal_charge, compute_grand_total, line_total


def test_compute_halal_charge():
    assert compute_halal_charge(500, False, 2) == Decimal("0.00")
    assert compute_halal_charge(500, True, 2) == Decimal("10.00")
    assert compute_halal_charge(500, True, 2, rate_per_kg=3, total_kg_weight=12) == Decimal("36.00")
    # defaults come from settings
    assert compute_halal_charge(100, True) == Decimal("2.00")


def test_compute_grand_total():
    assert compute_grand_total(Decimal("100"), Decimal("2"), False) == Decimal("102.00")
    assert compute_grand_total(Decimal("100"), Decimal("2"), True) == Decimal("100.00")


def test_line_total():
    assert line_total(3, 2.5) == Decimal("7.50")
    assert line_total(3, 2.5, 7) == Decimal("7.00")


@pytest.mark.asyncio
async def test_load_then_deduct_vehicle_inventory(storage):
    vehicle = await storage.create_vehicle({"number": "V1", "type": "tempo"})
    product = await storage.create_product({
        "name": "Beans", "unit": "kg", "purchase_price": 10, "sale_price": 15
    })

    await storage.load_vehicle_inventory(vehicle.id, product.id, 8)
    assert await storage.deduct_vehicle_inventory(vehicle.id, product.id, 10) is None

    inventory = await storage.deduct_vehicle_inventory(vehicle.id, product.id, 5, invoice_id=1)
    assert inventory.quantity == Decimal("3")

    movements = await storage.get_vehicle_inventory_movements(vehicle.id)
    assert sorted(m.type for m in movements) == ["load", "sale"]


@pytest.mark.asyncio
async def test_create_purchase_through_storage(storage):
    vendor = await storage.create_vendor({"name": "Farm", "phone": "1"})
    product = await storage.create_product({
        "name": "Beans", "unit": "kg", "purchase_price": 10, "sale_price": 15
    })

    purchase = await storage.create_purchase(PurchaseCreate(
        vendor_id=vendor.id,
        date=dt.date(2024, 12, 1),
        items=[{"product_id": product.id, "quantity": 3, "unit_price": 10}],
    ))

    assert purchase.purchase_no == "PO20241201001"
    assert purchase.total_amount == Decimal("30.00")
    assert (await storage.get_product(product.id)).current_stock == Decimal("3")
    assert await storage.missing_products([product.id, 999]) == [999]
    assert await storage.vendor_references(vendor.id) == {"purchases": 1}

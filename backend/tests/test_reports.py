import datetime as dt
from decimal import Decimal
from types import SimpleNamespace

import pytest

from backoffice.services import reports


def invoice(id, customer_id, day, grand_total, halal=0, include=False, by_cash=False):
    return SimpleNamespace(
        id=id,
        invoice_number=f"INV{id}",
        customer_id=customer_id,
        date=day,
        subtotal=Decimal(str(grand_total)),
        include_halal_charge=include,
        halal_rate_per_kg=Decimal("2"),
        halal_charge_amount=Decimal(str(halal)),
        halal_paid_by_cash=by_cash,
        total_kg_weight=Decimal("0"),
        grand_total=Decimal(str(grand_total)),
    )


def test_product_profit_guards_zero_purchase_price():
    free = SimpleNamespace(id=1, name="Sample", purchase_price=Decimal("0"), sale_price=Decimal("5"))
    row = reports.product_profit(free)
    assert row["margin"] == Decimal("5.00")
    assert row["margin_percent"] == Decimal("0.00")

    tomato = SimpleNamespace(id=2, name="Tomato", purchase_price=Decimal("20"), sale_price=Decimal("30"))
    assert reports.product_profit(tomato)["margin_percent"] == Decimal("50.00")


def test_payment_status():
    assert reports.payment_status(Decimal("0"), Decimal("100")) == "paid"
    assert reports.payment_status(Decimal("-5"), Decimal("105")) == "paid"
    assert reports.payment_status(Decimal("40"), Decimal("60")) == "partial"
    assert reports.payment_status(Decimal("100"), Decimal("0")) == "unpaid"


def test_halal_summary_counts_cash_paid_charge_once():
    invoices = [
        invoice(1, 1, dt.date(2024, 12, 1), 102, halal=2, include=True),
        invoice(2, 1, dt.date(2024, 12, 1), 100, halal=2, include=True, by_cash=True),
        invoice(3, 2, dt.date(2024, 12, 2), 50),
    ]
    cash = [SimpleNamespace(amount=Decimal("2"), date=dt.date(2024, 12, 1))]

    summary = reports.halal_summary(invoices, cash)
    assert summary["invoice_halal_total"] == Decimal("2.00")
    assert summary["direct_cash_halal_total"] == Decimal("2.00")
    assert summary["total_halal_collected"] == Decimal("4.00")
    assert summary["invoices_with_halal"] == 2
    assert summary["invoices_without_halal"] == 1
    assert summary["sales_with_halal"] == Decimal("202.00")
    assert summary["sales_without_halal"] == Decimal("50.00")


def test_customer_summary_halal_matches_billed_charges():
    invoices = [
        invoice(1, 1, dt.date(2024, 12, 1), 102, halal=2, include=True),
        invoice(2, 1, dt.date(2024, 12, 2), 100, halal=2, include=True, by_cash=True),
        invoice(3, 1, dt.date(2024, 12, 3), 40, halal=9),
    ]
    payments = [SimpleNamespace(customer_id=1, amount=Decimal("50"))]

    rows = reports.customer_payment_summary(invoices, payments, {1: "City Hotel"})
    assert len(rows) == 1
    assert rows[0]["total_invoiced"] == Decimal("242.00")
    assert rows[0]["halal_amount"] == Decimal("2.00")
    assert rows[0]["balance"] == Decimal("192.00")
    assert rows[0]["payment_status"] == "partial"

    details = reports.invoice_details(invoices, {1: "City Hotel"})
    assert [d["id"] for d in details] == [3, 2, 1]
    assert details[0]["halal_charge_amount"] == Decimal("0.00")
    assert details[1]["halal_charge_amount"] == Decimal("2")
    assert details[1]["halal_paid_by_cash"] is True


def test_halal_summary_by_period_newest_first():
    invoices = [
        invoice(1, 1, dt.date(2024, 11, 30), 100, halal=2, include=True),
        invoice(2, 1, dt.date(2024, 12, 1), 200, halal=4, include=True),
        invoice(3, 1, dt.date(2024, 12, 1), 50),
    ]
    cash = [SimpleNamespace(amount=Decimal("7"), date=dt.date(2024, 12, 3))]

    daily = reports.halal_summary_by_period(invoices, cash, "daily")
    assert [r["period"] for r in daily] == ["2024-12-03", "2024-12-01", "2024-11-30"]
    assert daily[1]["sales"] == Decimal("250.00")
    assert daily[1]["invoice_count"] == 2
    assert daily[1]["halal_from_invoices"] == Decimal("4.00")
    assert daily[0]["halal_cash"] == Decimal("7.00")
    assert daily[0]["total_halal"] == Decimal("7.00")

    monthly = reports.halal_summary_by_period(invoices, cash, "monthly")
    assert [r["period"] for r in monthly] == ["2024-12", "2024-11"]
    assert monthly[0]["total_halal"] == Decimal("11.00")


def test_low_stock_orders_by_shortfall():
    products = [
        SimpleNamespace(id=1, name="Tomato", unit="kg", current_stock=Decimal("8"), reorder_level=Decimal("10"),
                        is_low_stock=True),
        SimpleNamespace(id=2, name="Onion", unit="kg", current_stock=Decimal("50"), reorder_level=Decimal("10"),
                        is_low_stock=False),
        SimpleNamespace(id=3, name="Chilli", unit="kg", current_stock=Decimal("0"), reorder_level=Decimal("10"),
                        is_low_stock=True),
    ]
    rows = reports.low_stock(products)
    assert [r["name"] for r in rows] == ["Chilli", "Tomato"]
    assert rows[1]["shortfall"] == Decimal("2")


@pytest.mark.asyncio
async def test_profit_loss_report(client, factory):
    vendor = await factory.vendor()
    customer = await factory.customer()
    product = await factory.product(purchase_price=20, sale_price=30)

    await factory.purchase(vendor["id"], [{"product_id": product["id"], "quantity": 10, "unit_price": 20}])
    await client.post("/api/vendor-returns", json={
        "vendor_id": vendor["id"],
        "date": "2024-12-02",
        "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 20, "reason": "Damaged"}],
    })
    invoice = await factory.invoice(
        customer["id"],
        [{"product_id": product["id"], "quantity": 5, "unit_price": 60}],
        include_halal_charge=True,
    )
    await client.post("/api/customer-payments", json={
        "customer_id": customer["id"], "invoice_id": invoice["id"], "amount": 100,
        "date": "2024-12-03", "payment_method": "cash",
    })
    await client.post("/api/halal-cash", json={"amount": 3, "date": "2024-12-03"})

    response = await client.get("/api/reports/profit-loss")
    assert response.status_code == 200
    report = response.json()

    assert report["total_purchases"] == 200.0
    assert report["total_returns"] == 20.0
    assert report["net_purchases"] == 180.0
    assert report["total_sales"] == 306.0
    assert report["gross_profit"] == 126.0

    assert report["product_profits"][0]["margin"] == 10.0
    assert report["product_profits"][0]["margin_percent"] == 50.0

    halal = report["halal_summary"]
    assert halal["invoice_halal_total"] == 6.0
    assert halal["direct_cash_halal_total"] == 3.0
    assert halal["total_halal_collected"] == 9.0

    assert report["invoice_details"][0]["customer_name"] == "City Hotel"
    summary = report["customer_payment_summary"][0]
    assert summary["total_invoiced"] == 306.0
    assert summary["total_paid"] == 100.0
    assert summary["balance"] == 206.0
    assert summary["payment_status"] == "partial"


@pytest.mark.asyncio
async def test_profit_loss_respects_date_range(client, factory):
    customer = await factory.customer()
    product = await factory.product(current_stock=10)
    await factory.invoice(customer["id"], [{"product_id": product["id"], "quantity": 1, "unit_price": 10}], date="2024-11-01")
    await factory.invoice(customer["id"], [{"product_id": product["id"], "quantity": 1, "unit_price": 20}], date="2024-12-01")

    report = (await client.get("/api/reports/profit-loss", params={"start_date": "2024-12-01"})).json()
    assert report["total_sales"] == 20.0
    assert report["start_date"] == "2024-12-01"
    assert report["end_date"] is None


@pytest.mark.asyncio
async def test_balance_reports(client, factory):
    vendor = await factory.vendor()
    await factory.vendor(name="Idle vendor", phone="9")
    customer = await factory.customer()
    product = await factory.product(current_stock=10)
    await factory.purchase(vendor["id"], [{"product_id": product["id"], "quantity": 2, "unit_price": 20}])
    await factory.invoice(customer["id"], [{"product_id": product["id"], "quantity": 1, "unit_price": 70}])

    vendors = (await client.get("/api/reports/vendor-balances")).json()
    by_name = {v["name"]: v for v in vendors}
    assert by_name["Green Farms"]["balance"] == 40.0
    assert by_name["Green Farms"]["phone"] == "9000000001"
    assert by_name["Idle vendor"]["balance"] == 0.0

    customers = (await client.get("/api/reports/customer-balances")).json()
    assert customers[0]["total_invoices"] == 70.0
    assert customers[0]["balance"] == 70.0


@pytest.mark.asyncio
async def test_halal_summary_report(client, factory):
    customer = await factory.customer()
    product = await factory.product(current_stock=10)
    await factory.invoice(
        customer["id"], [{"product_id": product["id"], "quantity": 1, "unit_price": 100}],
        include_halal_charge=True,
    )

    rows = (await client.get("/api/reports/halal-summary", params={"period": "monthly"})).json()
    assert rows == [{
        "period": "2024-12",
        "sales": 102.0,
        "invoice_count": 1,
        "halal_from_invoices": 2.0,
        "halal_cash": 0.0,
        "total_halal": 2.0,
    }]

    response = await client.get("/api/reports/halal-summary", params={"period": "weekly"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_low_stock_report(client, factory):
    await factory.product(name="Tomato", current_stock=4)
    await factory.product(name="Onion", current_stock=40)
    rows = (await client.get("/api/reports/low-stock")).json()
    assert [r["name"] for r in rows] == ["Tomato"]
    assert rows[0]["shortfall"] == 6.0

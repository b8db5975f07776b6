"""
Report aggregation

Plain functions over rows that were already fetched, so they can be
exercised without a database. Figures come back as Decimal and are turned
into floats by the report schemas.

A halal charge that the customer paid in cash is not part of the bill, it
is counted once through the halal cash payment that records it.
"""

import datetime as dt
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from backoffice.services.storage import money, to_decimal

ZERO = Decimal("0.00")


def _total(values: Iterable) -> Decimal:
    return money(sum((to_decimal(v) for v in values), Decimal("0")))


def invoice_halal_on_bill(invoice) -> Decimal:
    """Halal charge carried by the invoice total"""
    if not invoice.include_halal_charge or invoice.halal_paid_by_cash:
        return ZERO
    return to_decimal(invoice.halal_charge_amount)


def product_profit(product) -> Dict:
    purchase_price = to_decimal(product.purchase_price)
    sale_price = to_decimal(product.sale_price)
    margin = sale_price - purchase_price
    if purchase_price > 0:
        margin_percent = money(margin / purchase_price * 100)
    else:
        margin_percent = ZERO
    return {
        "id": product.id,
        "name": product.name,
        "purchase_price": purchase_price,
        "sale_price": sale_price,
        "margin": money(margin),
        "margin_percent": margin_percent,
    }


def halal_summary(invoices: List, halal_cash: List) -> Dict:
    with_halal = [i for i in invoices if i.include_halal_charge]
    without_halal = [i for i in invoices if not i.include_halal_charge]

    invoice_halal_total = _total(invoice_halal_on_bill(i) for i in invoices)
    direct_cash_halal_total = _total(p.amount for p in halal_cash)

    return {
        "invoice_halal_total": invoice_halal_total,
        "direct_cash_halal_total": direct_cash_halal_total,
        "total_halal_collected": invoice_halal_total + direct_cash_halal_total,
        "invoices_with_halal": len(with_halal),
        "invoices_without_halal": len(without_halal),
        "sales_with_halal": _total(i.grand_total for i in with_halal),
        "sales_without_halal": _total(i.grand_total for i in without_halal),
    }


def payment_status(balance: Decimal, paid: Decimal) -> str:
    if balance <= 0:
        return "paid"
    if paid > 0:
        return "partial"
    return "unpaid"


def customer_payment_summary(invoices: List, payments: List, customer_names: Dict[int, str]) -> List[Dict]:
    """One row per customer that was invoiced"""
    invoiced = defaultdict(lambda: Decimal("0"))
    halal = defaultdict(lambda: Decimal("0"))
    paid = defaultdict(lambda: Decimal("0"))

    for invoice in invoices:
        invoiced[invoice.customer_id] += to_decimal(invoice.grand_total)
        halal[invoice.customer_id] += invoice_halal_on_bill(invoice)
    for payment in payments:
        paid[payment.customer_id] += to_decimal(payment.amount)

    rows = []
    for customer_id in sorted(invoiced, key=lambda cid: (customer_names.get(cid, ""), cid)):
        total_invoiced = money(invoiced[customer_id])
        total_paid = money(paid.get(customer_id, ZERO))
        balance = total_invoiced - total_paid
        rows.append({
            "customer_id": customer_id,
            "customer_name": customer_names.get(customer_id, ""),
            "total_invoiced": total_invoiced,
            "total_paid": total_paid,
            "balance": balance,
            "halal_amount": money(halal[customer_id]),
            "payment_status": payment_status(balance, total_paid),
        })
    return rows


def invoice_details(invoices: List, customer_names: Dict[int, str]) -> List[Dict]:
    """Newest first"""
    ordered = sorted(invoices, key=lambda i: (i.date, i.id), reverse=True)
    return [
        {
            "id": i.id,
            "invoice_number": i.invoice_number,
            "date": i.date.isoformat(),
            "customer_id": i.customer_id,
            "customer_name": customer_names.get(i.customer_id, ""),
            "subtotal": to_decimal(i.subtotal),
            "include_halal_charge": bool(i.include_halal_charge),
            "halal_rate_per_kg": to_decimal(i.halal_rate_per_kg),
            "halal_charge_amount": to_decimal(i.halal_charge_amount) if i.include_halal_charge else ZERO,
            "halal_paid_by_cash": bool(i.halal_paid_by_cash),
            "total_kg_weight": to_decimal(i.total_kg_weight),
            "grand_total": to_decimal(i.grand_total),
        }
        for i in ordered
    ]


def profit_loss(
    purchases: List,
    returns: List,
    invoices: List,
    products: List,
    halal_cash: List,
    customer_payments: List,
    customers: List,
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None) -> Dict:
    """
    Profit and loss over the given rows

    net purchases = purchases - vendor returns
    gross profit = sales (invoice grand totals) - net purchases
    """
    customer_names = {c.id: c.name for c in customers}

    total_purchases = _total(p.total_amount for p in purchases)
    total_returns = _total(r.total_amount for r in returns)
    net_purchases = total_purchases - total_returns
    total_sales = _total(i.grand_total for i in invoices)

    return {
        "total_purchases": total_purchases,
        "total_returns": total_returns,
        "net_purchases": net_purchases,
        "total_sales": total_sales,
        "gross_profit": total_sales - net_purchases,
        "product_profits": [product_profit(p) for p in products],
        "halal_summary": halal_summary(invoices, halal_cash),
        "invoice_details": invoice_details(invoices, customer_names),
        "customer_payment_summary": customer_payment_summary(invoices, customer_payments, customer_names),
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
    }


def vendor_balances(vendors: List, purchases: List, payments: List, returns: List) -> List[Dict]:
    """Every vendor merged with its balance"""
    bought = defaultdict(lambda: Decimal("0"))
    paid = defaultdict(lambda: Decimal("0"))
    returned = defaultdict(lambda: Decimal("0"))
    for p in purchases:
        bought[p.vendor_id] += to_decimal(p.total_amount)
    for p in payments:
        paid[p.vendor_id] += to_decimal(p.amount)
    for r in returns:
        returned[r.vendor_id] += to_decimal(r.total_amount)

    rows = []
    for vendor in vendors:
        total_purchases = money(bought[vendor.id])
        total_payments = money(paid[vendor.id])
        total_returns = money(returned[vendor.id])
        rows.append({
            "id": vendor.id,
            "name": vendor.name,
            "phone": vendor.phone,
            "address": vendor.address,
            "email": vendor.email,
            "created_at": vendor.created_at,
            "updated_at": vendor.updated_at,
            "total_purchases": total_purchases,
            "total_payments": total_payments,
            "total_returns": total_returns,
            "balance": total_purchases - total_payments - total_returns,
        })
    return rows


def customer_balances(customers: List, invoices: List, payments: List) -> List[Dict]:
    """Every customer merged with its balance"""
    invoiced = defaultdict(lambda: Decimal("0"))
    paid = defaultdict(lambda: Decimal("0"))
    for i in invoices:
        invoiced[i.customer_id] += to_decimal(i.grand_total)
    for p in payments:
        paid[p.customer_id] += to_decimal(p.amount)

    rows = []
    for customer in customers:
        total_invoices = money(invoiced[customer.id])
        total_payments = money(paid[customer.id])
        rows.append({
            "id": customer.id,
            "name": customer.name,
            "phone": customer.phone,
            "address": customer.address,
            "email": customer.email,
            "created_at": customer.created_at,
            "updated_at": customer.updated_at,
            "total_invoices": total_invoices,
            "total_payments": total_payments,
            "balance": total_invoices - total_payments,
        })
    return rows


def period_key(day: dt.date, period: str) -> str:
    if period == "monthly":
        return day.strftime("%Y-%m")
    return day.isoformat()


def halal_summary_by_period(invoices: List, halal_cash: List, period: str = "daily") -> List[Dict]:
    """Sales and halal collected per day or month, newest first"""
    buckets: Dict[str, Dict] = {}

    def bucket(key: str) -> Dict:
        if key not in buckets:
            buckets[key] = {
                "period": key,
                "sales": Decimal("0"),
                "invoice_count": 0,
                "halal_from_invoices": Decimal("0"),
                "halal_cash": Decimal("0"),
            }
        return buckets[key]

    for invoice in invoices:
        row = bucket(period_key(invoice.date, period))
        row["sales"] += to_decimal(invoice.grand_total)
        row["invoice_count"] += 1
        row["halal_from_invoices"] += invoice_halal_on_bill(invoice)

    for payment in halal_cash:
        row = bucket(period_key(payment.date, period))
        row["halal_cash"] += to_decimal(payment.amount)

    rows = []
    for key in sorted(buckets, reverse=True):
        row = buckets[key]
        row["sales"] = money(row["sales"])
        row["halal_from_invoices"] = money(row["halal_from_invoices"])
        row["halal_cash"] = money(row["halal_cash"])
        row["total_halal"] = row["halal_from_invoices"] + row["halal_cash"]
        rows.append(row)
    return rows


def low_stock(products: List) -> List[Dict]:
    """Products at or below their reorder level, biggest shortfall first"""
    rows = []
    for product in products:
        if not product.is_low_stock:
            continue
        current = to_decimal(product.current_stock)
        reorder = to_decimal(product.reorder_level)
        rows.append({
            "id": product.id,
            "name": product.name,
            "unit": product.unit,
            "current_stock": current,
            "reorder_level": reorder,
            "shortfall": max(ZERO, reorder - current),
        })
    rows.sort(key=lambda r: (-r["shortfall"], r["name"]))
    return rows

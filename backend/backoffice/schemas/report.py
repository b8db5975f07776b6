"""Report schemas"""

from typing import List, Optional
from pydantic import BaseModel

from backoffice.schemas.common import Amount


# ==================== Profit & loss ====================

class ProductProfit(BaseModel):
    """Per product margin at list prices"""
    id: int
    name: str
    purchase_price: Amount
    sale_price: Amount
    margin: Amount
    margin_percent: Amount  # 0 when the purchase price is 0


class HalalSummary(BaseModel):
    """Halal charge collected"""
    invoice_halal_total: Amount = 0
    direct_cash_halal_total: Amount = 0
    total_halal_collected: Amount = 0
    invoices_with_halal: int = 0
    invoices_without_halal: int = 0
    sales_with_halal: Amount = 0
    sales_without_halal: Amount = 0


class InvoiceDetail(BaseModel):
    id: int
    invoice_number: str
    date: str
    customer_id: int
    customer_name: str = ""
    subtotal: Amount
    include_halal_charge: bool
    halal_rate_per_kg: Amount = 0
    halal_charge_amount: Amount = 0  # charged amount, whether on the bill or paid in cash
    halal_paid_by_cash: bool = False
    total_kg_weight: Amount = 0
    grand_total: Amount


class CustomerPaymentSummary(BaseModel):
    customer_id: int
    customer_name: str = ""
    total_invoiced: Amount = 0
    total_paid: Amount = 0
    balance: Amount = 0
    halal_amount: Amount = 0  # charges carried on the bills only
    payment_status: str = "unpaid"  # paid / partial / unpaid


class ProfitLossReport(BaseModel):
    total_purchases: Amount = 0
    total_returns: Amount = 0
    net_purchases: Amount = 0   # purchases - returns
    total_sales: Amount = 0
    gross_profit: Amount = 0    # sales - net purchases
    product_profits: List[ProductProfit] = []
    halal_summary: HalalSummary = HalalSummary()
    invoice_details: List[InvoiceDetail] = []
    customer_payment_summary: List[CustomerPaymentSummary] = []
    start_date: Optional[str] = None
    end_date: Optional[str] = None


# ==================== Halal by period ====================

class HalalPeriodSummary(BaseModel):
    """One day or one month"""
    period: str  # 2024-12-03 or 2024-12
    sales: Amount = 0
    invoice_count: int = 0
    halal_from_invoices: Amount = 0
    halal_cash: Amount = 0
    total_halal: Amount = 0


# ==================== Low stock ====================

class LowStockItem(BaseModel):
    id: int
    name: str
    unit: str
    current_stock: Amount
    reorder_level: Amount
    shortfall: Amount  # reorder_level - current_stock, never negative

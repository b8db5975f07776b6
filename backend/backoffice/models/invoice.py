"""
Sales invoices

Halal charge:
- percentage of the subtotal (halal_charge_percent), or
- rate per kg times the weight sold (halal_rate_per_kg * total_kg_weight)
When halal_paid_by_cash is set the charge is collected outside the
invoice and grand_total does not include it.
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, DECIMAL
from backoffice.db.base import Base


class Invoice(Base):
    """Sales invoice header"""
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)

    # Given by the client or generated, format: INV20241203001
    invoice_number = Column(String(50), nullable=False, index=True, comment="Invoice number")

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), index=True, comment="Vehicle sold from")

    date = Column(Date, nullable=False, index=True, comment="Business date")
    subtotal = Column(DECIMAL(12, 2), nullable=False, comment="Goods total")

    # Halal charge
    include_halal_charge = Column(Boolean, nullable=False, default=False, comment="Halal charge applied")
    halal_charge_percent = Column(DECIMAL(6, 2), default=Decimal("2.00"), comment="Halal charge percent")
    halal_charge_amount = Column(DECIMAL(12, 2), default=Decimal("0.00"), comment="Halal charge amount")
    halal_rate_per_kg = Column(DECIMAL(10, 2), default=Decimal("2.00"), comment="Halal rate per kg")
    halal_paid_by_cash = Column(Boolean, default=False, comment="Halal charge collected in cash")
    total_kg_weight = Column(DECIMAL(12, 2), default=Decimal("0.00"), comment="Total weight in kg")

    grand_total = Column(DECIMAL(12, 2), nullable=False, comment="Amount billed")
    status = Column(String(20), nullable=False, default="pending", comment="Status")
    notes = Column(Text, comment="Notes")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Invoice {self.invoice_number}: customer {self.customer_id} {self.grand_total}>"


class InvoiceItem(Base):
    """Invoice line"""
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(DECIMAL(12, 2), nullable=False, comment="Quantity")
    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="Unit price")
    total = Column(DECIMAL(12, 2), nullable=False, comment="Line total")

    def __repr__(self):
        return f"<InvoiceItem {self.invoice_id}:{self.product_id} x{self.quantity}>"

"""
Payment records - actual money movements

- VendorPayment: we pay a vendor, reduces the vendor balance
- CustomerPayment: a customer pays us, reduces the customer balance
- HalalCashPayment: halal charge collected in cash outside the invoice total

Payments are historical records, they are never edited.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, DECIMAL
from backoffice.db.base import Base


class VendorPayment(Base):
    """Payment to a vendor"""
    __tablename__ = "vendor_payments"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), index=True, comment="Purchase settled")
    amount = Column(DECIMAL(12, 2), nullable=False, comment="Amount")
    date = Column(Date, nullable=False, index=True, comment="Payment date")
    # cash, bank, upi, cheque, ...
    payment_method = Column(String(30), nullable=False, comment="Payment method")
    notes = Column(Text, comment="Notes")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<VendorPayment {self.id}: vendor {self.vendor_id} {self.amount}>"


class CustomerPayment(Base):
    """Payment received from a customer"""
    __tablename__ = "customer_payments"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), index=True, comment="Invoice settled")
    amount = Column(DECIMAL(12, 2), nullable=False, comment="Amount")
    date = Column(Date, nullable=False, index=True, comment="Payment date")
    payment_method = Column(String(30), nullable=False, comment="Payment method")
    notes = Column(Text, comment="Notes")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<CustomerPayment {self.id}: customer {self.customer_id} {self.amount}>"


class HalalCashPayment(Base):
    """Halal charge paid directly in cash

    invoice_number and total_bill_amount are snapshots of the linked
    invoice, manual entries leave them empty.
    """
    __tablename__ = "halal_cash_payments"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(DECIMAL(12, 2), nullable=False, comment="Amount")
    date = Column(Date, nullable=False, index=True, comment="Payment date")
    payment_method = Column(String(30), nullable=False, default="cash", comment="Payment method")
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), index=True)
    invoice_number = Column(String(50), comment="Invoice number snapshot")
    total_bill_amount = Column(DECIMAL(12, 2), comment="Invoice total snapshot")
    notes = Column(Text, comment="Notes")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<HalalCashPayment {self.id}: {self.amount}>"

"""
Vendor returns - goods sent back to the supplier

The return total is deducted from what we owe the vendor.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, DECIMAL
from backoffice.db.base import Base


class VendorReturn(Base):
    """Vendor return header"""
    __tablename__ = "vendor_returns"

    id = Column(Integer, primary_key=True, index=True)

    # Format: RT20241203001
    return_no = Column(String(30), unique=True, nullable=False, index=True, comment="Return number")

    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), index=True, comment="Original purchase")
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), index=True, comment="Vehicle the goods left from")

    date = Column(Date, nullable=False, index=True, comment="Business date")
    total_amount = Column(DECIMAL(12, 2), nullable=False, comment="Total amount")
    status = Column(String(20), nullable=False, default="completed", comment="Status")
    notes = Column(Text, comment="Notes")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<VendorReturn {self.return_no}: vendor {self.vendor_id} {self.total_amount}>"


class VendorReturnItem(Base):
    """Vendor return line"""
    __tablename__ = "vendor_return_items"

    id = Column(Integer, primary_key=True, index=True)
    return_id = Column(Integer, ForeignKey("vendor_returns.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(DECIMAL(12, 2), nullable=False, comment="Quantity")
    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="Unit price")
    total = Column(DECIMAL(12, 2), nullable=False, comment="Line total")
    reason = Column(Text, nullable=False, comment="Reason for return")

    def __repr__(self):
        return f"<VendorReturnItem {self.return_id}:{self.product_id} x{self.quantity}>"

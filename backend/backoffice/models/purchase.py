"""
Purchase documents - buying from vendors

A purchase is written once with its lines and never edited afterwards,
stock and vehicle inventory are updated when it is created.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, DECIMAL
from backoffice.db.base import Base


class Purchase(Base):
    """Purchase order header"""
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)

    # Format: PO20241203001
    purchase_no = Column(String(30), unique=True, nullable=False, index=True, comment="Purchase number")

    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), index=True, comment="Vehicle the goods were loaded on")

    date = Column(Date, nullable=False, index=True, comment="Business date")
    total_amount = Column(DECIMAL(12, 2), nullable=False, comment="Total amount")
    status = Column(String(20), nullable=False, default="completed", comment="Status")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Purchase {self.purchase_no}: vendor {self.vendor_id} {self.total_amount}>"


class PurchaseItem(Base):
    """Purchase line"""
    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(DECIMAL(12, 2), nullable=False, comment="Quantity")
    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="Unit price")
    total = Column(DECIMAL(12, 2), nullable=False, comment="Line total")

    def __repr__(self):
        return f"<PurchaseItem {self.purchase_id}:{self.product_id} x{self.quantity}>"

"""
Product and warehouse stock ledger
- Product keeps its running stock level in current_stock
- StockMovement is the in/out log every document writes to
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, DECIMAL
from backoffice.db.base import Base


class Product(Base):
    """Product (vegetable or other item)"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name")
    unit = Column(String(20), nullable=False, comment="Unit (kg, bag, box, ...)")

    purchase_price = Column(DECIMAL(12, 2), nullable=False, comment="Purchase price")
    sale_price = Column(DECIMAL(12, 2), nullable=False, comment="Sale price")

    current_stock = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Stock on hand")
    reorder_level = Column(DECIMAL(12, 2), default=Decimal("10.00"), comment="Low stock threshold")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Product {self.id}: {self.name} - {self.unit}>"

    @property
    def is_low_stock(self) -> bool:
        """At or below the reorder level"""
        return (self.current_stock or Decimal("0")) <= (self.reorder_level or Decimal("0"))


class StockMovement(Base):
    """Stock movement

    type:
    - in: purchase or manual receipt
    - out: invoice, vendor return or manual issue
    """
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    type = Column(String(10), nullable=False, comment="in / out")
    quantity = Column(DECIMAL(12, 2), nullable=False, comment="Quantity")
    reason = Column(Text, nullable=False, comment="Reason")
    date = Column(Date, nullable=False, index=True, comment="Business date")
    reference_id = Column(Integer, comment="Source document id")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<StockMovement {self.type} {self.product_id} {self.quantity}>"

"""
Trading parties
- Vendor: supplier/farmer the produce is bought from
- Customer: buyer the invoices are issued to

Both carry the same contact fields but live in separate tables,
balances are derived from their documents and payments.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from backoffice.db.base import Base


class Vendor(Base):
    """Supplier"""
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name")
    phone = Column(String(30), nullable=False, comment="Phone")
    address = Column(Text, comment="Address")
    email = Column(String(100), comment="Email")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Vendor {self.id}: {self.name}>"


class Customer(Base):
    """Buyer"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name")
    phone = Column(String(30), nullable=False, comment="Phone")
    address = Column(Text, comment="Address")
    email = Column(String(100), comment="Email")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Customer {self.id}: {self.name}>"

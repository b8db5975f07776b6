"""
Company settings - branding printed on invoices
Single row table
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from backoffice.db.base import Base


class CompanySettings(Base):
    """Company details"""
    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, comment="Company name")
    address = Column(Text, comment="Address")
    phone = Column(String(50), comment="Phone")
    email = Column(String(100), comment="Email")
    gst_number = Column(String(50), comment="GST number")
    bank_details = Column(Text, comment="Bank details")

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<CompanySettings {self.name}>"

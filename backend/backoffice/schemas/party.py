"""Vendor / customer schemas"""
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime

from backoffice.schemas.common import Amount


class PartyBase(BaseModel):
    """Shared contact fields"""
    name: str = Field(..., min_length=1, max_length=100, description="Name")
    phone: str = Field(..., min_length=1, max_length=30, description="Phone")
    address: Optional[str] = Field(None, description="Address")
    email: Optional[str] = Field(None, max_length=100, description="Email")


class PartyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    address: Optional[str] = None
    email: Optional[str] = Field(None, max_length=100)


class VendorCreate(PartyBase):
    """Create vendor"""
    pass


class VendorUpdate(PartyUpdate):
    """Update vendor"""
    pass


class VendorResponse(PartyBase):
    """Vendor"""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VendorListResponse(BaseModel):
    data: List[VendorResponse]
    total: int
    page: int
    limit: int


class VendorBalance(BaseModel):
    """What we still owe a vendor"""
    total_purchases: Amount = 0
    total_payments: Amount = 0
    total_returns: Amount = 0
    balance: Amount = 0  # purchases - payments - returns


class VendorBalanceRow(VendorResponse, VendorBalance):
    """Vendor merged with its balance (report row)"""
    pass


class CustomerCreate(PartyBase):
    """Create customer"""
    pass


class CustomerUpdate(PartyUpdate):
    """Update customer"""
    pass


class CustomerResponse(PartyBase):
    """Customer"""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerListResponse(BaseModel):
    data: List[CustomerResponse]
    total: int
    page: int
    limit: int


class CustomerBalance(BaseModel):
    """What a customer still owes us"""
    total_invoices: Amount = 0
    total_payments: Amount = 0
    balance: Amount = 0  # invoices - payments


class CustomerBalanceRow(CustomerResponse, CustomerBalance):
    """Customer merged with its balance (report row)"""
    pass

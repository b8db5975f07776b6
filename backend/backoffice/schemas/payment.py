"""Payment schemas"""

import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field

from backoffice.schemas.common import Amount


class VendorPaymentCreate(BaseModel):
    """Pay a vendor"""
    vendor_id: int
    purchase_id: Optional[int] = None
    amount: float = Field(..., gt=0)
    date: dt.date
    payment_method: str = Field(..., min_length=1, max_length=30)
    notes: Optional[str] = None


class VendorPaymentResponse(BaseModel):
    id: int
    vendor_id: int
    purchase_id: Optional[int] = None
    amount: Amount
    date: dt.date
    payment_method: str
    notes: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class CustomerPaymentCreate(BaseModel):
    """Receive from a customer"""
    customer_id: int
    invoice_id: Optional[int] = None
    amount: float = Field(..., gt=0)
    date: dt.date
    payment_method: str = Field(..., min_length=1, max_length=30)
    notes: Optional[str] = None


class CustomerPaymentResponse(BaseModel):
    id: int
    customer_id: int
    invoice_id: Optional[int] = None
    amount: Amount
    date: dt.date
    payment_method: str
    notes: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class HalalCashPaymentCreate(BaseModel):
    """Halal charge collected in cash"""
    amount: float = Field(..., gt=0)
    date: dt.date
    payment_method: str = Field(default="cash", min_length=1, max_length=30)
    customer_id: Optional[int] = None
    invoice_id: Optional[int] = None
    invoice_number: Optional[str] = Field(None, max_length=50)
    total_bill_amount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class HalalCashPaymentResponse(BaseModel):
    id: int
    amount: Amount
    date: dt.date
    payment_method: str
    customer_id: Optional[int] = None
    invoice_id: Optional[int] = None
    invoice_number: Optional[str] = None
    total_bill_amount: Optional[Amount] = None
    notes: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True

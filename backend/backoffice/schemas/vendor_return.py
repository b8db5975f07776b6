"""Vendor return schemas"""
import datetime as dt
from typing import Optional, List
from pydantic import BaseModel, Field

from backoffice.schemas.common import Amount


class VendorReturnItemCreate(BaseModel):
    """Returned line"""
    product_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    total: Optional[float] = Field(None, ge=0, description="Defaults to quantity * unit_price")
    reason: str = Field(..., min_length=1, description="Why the goods go back")


class VendorReturnCreate(BaseModel):
    """Create vendor return with its lines"""
    vendor_id: int
    purchase_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    date: dt.date
    total_amount: Optional[float] = Field(None, ge=0, description="Defaults to the sum of line totals")
    status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    items: List[VendorReturnItemCreate] = Field(..., min_length=1)


class VendorReturnItemResponse(BaseModel):
    id: int
    return_id: int
    product_id: int
    quantity: Amount
    unit_price: Amount
    total: Amount
    reason: str

    class Config:
        from_attributes = True


class VendorReturnResponse(BaseModel):
    """Vendor return"""
    id: int
    return_no: str
    vendor_id: int
    purchase_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    date: dt.date
    total_amount: Amount
    status: str
    notes: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True

"""Purchase schemas"""
import datetime as dt
from typing import Optional, List
from pydantic import BaseModel, Field

from backoffice.schemas.common import Amount


class PurchaseItemCreate(BaseModel):
    """Purchase line"""
    product_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    total: Optional[float] = Field(None, ge=0, description="Defaults to quantity * unit_price")


class PurchaseCreate(BaseModel):
    """Create purchase with its lines"""
    vendor_id: int
    vehicle_id: Optional[int] = None
    date: dt.date
    total_amount: Optional[float] = Field(None, ge=0, description="Defaults to the sum of line totals")
    status: Optional[str] = Field(None, max_length=20)
    items: List[PurchaseItemCreate] = Field(..., min_length=1)


class PurchaseItemResponse(BaseModel):
    id: int
    purchase_id: int
    product_id: int
    quantity: Amount
    unit_price: Amount
    total: Amount

    class Config:
        from_attributes = True


class PurchaseResponse(BaseModel):
    """Purchase"""
    id: int
    purchase_no: str
    vendor_id: int
    vehicle_id: Optional[int] = None
    date: dt.date
    total_amount: Amount
    status: str
    created_at: dt.datetime

    class Config:
        from_attributes = True


class PurchaseListResponse(BaseModel):
    data: List[PurchaseResponse]
    total: int
    page: int
    limit: int

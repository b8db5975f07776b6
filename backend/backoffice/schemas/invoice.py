"""Invoice schemas"""
import datetime as dt
from typing import Optional, List
from pydantic import BaseModel, Field

from backoffice.schemas.common import Amount


class InvoiceItemCreate(BaseModel):
    """Invoice line"""
    product_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    total: Optional[float] = Field(None, ge=0, description="Defaults to quantity * unit_price")


class InvoiceCreate(BaseModel):
    """Create invoice with its lines

    Omitted figures are derived on the server:
    subtotal from the lines, halal_charge_amount from percent or
    rate per kg, grand_total from subtotal and halal charge.
    """
    customer_id: int
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=50)
    vehicle_id: Optional[int] = None
    date: dt.date
    subtotal: Optional[float] = Field(None, ge=0)
    include_halal_charge: bool = False
    halal_charge_percent: Optional[float] = Field(None, ge=0, le=100)
    halal_charge_amount: Optional[float] = Field(None, ge=0)
    halal_rate_per_kg: Optional[float] = Field(None, ge=0)
    halal_paid_by_cash: bool = False
    total_kg_weight: float = Field(default=0, ge=0)
    grand_total: Optional[float] = Field(None, ge=0)
    status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    items: List[InvoiceItemCreate] = Field(..., min_length=1)


class InvoiceUpdate(BaseModel):
    """Update invoice header (lines keep their quantities)"""
    date: Optional[dt.date] = None
    subtotal: Optional[float] = Field(None, ge=0)
    include_halal_charge: Optional[bool] = None
    halal_charge_percent: Optional[float] = Field(None, ge=0, le=100)
    halal_charge_amount: Optional[float] = Field(None, ge=0)
    halal_rate_per_kg: Optional[float] = Field(None, ge=0)
    halal_paid_by_cash: Optional[bool] = None
    total_kg_weight: Optional[float] = Field(None, ge=0)
    grand_total: Optional[float] = Field(None, ge=0)
    status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None


class InvoiceItemUpdate(BaseModel):
    """Re-price an invoice line"""
    unit_price: float = Field(..., ge=0)
    total: Optional[float] = Field(None, ge=0, description="Defaults to quantity * unit_price")


class InvoiceItemResponse(BaseModel):
    id: int
    invoice_id: int
    product_id: int
    quantity: Amount
    unit_price: Amount
    total: Amount

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    """Invoice"""
    id: int
    invoice_number: str
    customer_id: int
    vehicle_id: Optional[int] = None
    date: dt.date
    subtotal: Amount
    include_halal_charge: bool
    halal_charge_percent: Optional[Amount] = None
    halal_charge_amount: Optional[Amount] = None
    halal_rate_per_kg: Optional[Amount] = None
    halal_paid_by_cash: Optional[bool] = False
    total_kg_weight: Optional[Amount] = None
    grand_total: Amount
    status: str
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class InvoiceListResponse(BaseModel):
    data: List[InvoiceResponse]
    total: int
    page: int
    limit: int

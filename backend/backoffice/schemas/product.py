"""Product and stock movement schemas"""
from typing import Optional, List
from pydantic import BaseModel, Field
import datetime as dt

from backoffice.schemas.common import Amount


class ProductBase(BaseModel):
    """Product fields"""
    name: str = Field(..., min_length=1, max_length=100, description="Name")
    unit: str = Field(..., min_length=1, max_length=20, description="Unit")
    purchase_price: float = Field(..., ge=0, description="Purchase price")
    sale_price: float = Field(..., ge=0, description="Sale price")


class ProductCreate(ProductBase):
    """Create product"""
    current_stock: float = Field(default=0, ge=0, description="Opening stock")
    reorder_level: Optional[float] = Field(None, ge=0, description="Low stock threshold, defaults from settings")


class ProductUpdate(BaseModel):
    """Update product"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    unit: Optional[str] = Field(None, min_length=1, max_length=20)
    purchase_price: Optional[float] = Field(None, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    current_stock: Optional[float] = Field(None, ge=0)
    reorder_level: Optional[float] = Field(None, ge=0)


class ProductResponse(BaseModel):
    """Product"""
    id: int
    name: str
    unit: str
    purchase_price: Amount
    sale_price: Amount
    current_stock: Amount
    reorder_level: Optional[Amount] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class ProductListResponse(BaseModel):
    """Product list"""
    data: List[ProductResponse]
    total: int
    page: int
    limit: int


# ==================== Stock movements ====================

class StockMovementCreate(BaseModel):
    """Manual stock receipt / issue"""
    product_id: int
    type: str = Field(..., pattern="^(in|out)$")
    quantity: float = Field(..., gt=0)
    reason: str = Field(..., min_length=1)
    date: dt.date
    reference_id: Optional[int] = None


class StockMovementResponse(BaseModel):
    id: int
    product_id: int
    type: str
    quantity: Amount
    reason: str
    date: dt.date
    reference_id: Optional[int] = None

    class Config:
        from_attributes = True

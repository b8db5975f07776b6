"""
Vehicle and vehicle inventory schemas
"""
import datetime as dt
from typing import Optional, List
from pydantic import BaseModel, Field

from backoffice.schemas.common import Amount


class VehicleBase(BaseModel):
    """Vehicle fields"""
    number: str = Field(..., min_length=1, max_length=30, description="Registration number")
    type: str = Field(..., min_length=1, max_length=50, description="Vehicle type")
    capacity: Optional[str] = Field(None, max_length=50, description="Capacity")
    driver_name: Optional[str] = Field(None, max_length=100, description="Driver name")
    driver_phone: Optional[str] = Field(None, max_length=30, description="Driver phone")


class VehicleCreate(VehicleBase):
    """Create vehicle"""
    pass


class VehicleUpdate(BaseModel):
    """Update vehicle"""
    number: Optional[str] = Field(None, min_length=1, max_length=30)
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    capacity: Optional[str] = Field(None, max_length=50)
    driver_name: Optional[str] = Field(None, max_length=100)
    driver_phone: Optional[str] = Field(None, max_length=30)


class VehicleResponse(VehicleBase):
    """Vehicle"""
    id: int
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class VehicleListResponse(BaseModel):
    """Vehicle list"""
    data: List[VehicleResponse]
    total: int
    page: int
    limit: int


# ==================== Vehicle inventory ====================

class VehicleInventoryLoad(BaseModel):
    """Load stock onto a vehicle"""
    product_id: int
    quantity: float = Field(..., gt=0, description="Quantity loaded")
    purchase_id: Optional[int] = Field(None, description="Purchase the goods came from")
    date: Optional[dt.date] = Field(None, description="Defaults to today")
    notes: Optional[str] = None


class VehicleInventorySet(BaseModel):
    """Overwrite the quantity on board"""
    quantity: float = Field(..., ge=0)
    notes: Optional[str] = None


class VehicleInventoryResponse(BaseModel):
    id: int
    vehicle_id: int
    product_id: int
    quantity: Amount
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class VehicleInventoryMovementCreate(BaseModel):
    """Record and apply a vehicle stock movement"""
    vehicle_id: int
    product_id: int
    type: str = Field(..., pattern="^(load|sale|return|adjustment)$")
    quantity: float = Field(..., description="Positive, signed only for adjustment")
    reference_id: Optional[int] = None
    reference_type: Optional[str] = Field(None, pattern="^(purchase|invoice|vendor_return)$")
    date: Optional[dt.date] = Field(None, description="Defaults to today")
    notes: Optional[str] = None


class VehicleInventoryMovementResponse(BaseModel):
    id: int
    vehicle_id: int
    product_id: int
    type: str
    quantity: Amount
    reference_id: Optional[int] = None
    reference_type: Optional[str] = None
    date: dt.date
    notes: Optional[str] = None

    class Config:
        from_attributes = True

"""Vendor return API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.services.storage import Storage
from backoffice.schemas.vendor_return import (
    VendorReturnCreate, VendorReturnResponse, VendorReturnItemResponse
)

router = APIRouter(route_class=invalid_data_route("Invalid vendor return data"))


@router.get("", response_model=List[VendorReturnResponse])
async def list_vendor_returns(
    *,
    storage: Storage = Depends(get_storage),
    vendor_id: Optional[int] = Query(None, description="Only this vendor")) -> Any:
    return await storage.get_vendor_returns(vendor_id)


@router.get("/{return_id}", response_model=VendorReturnResponse)
async def get_vendor_return(
    *,
    storage: Storage = Depends(get_storage),
    return_id: int) -> Any:
    vendor_return = await storage.get_vendor_return(return_id)
    if not vendor_return:
        raise HTTPException(status_code=404, detail="Vendor return not found")
    return vendor_return


@router.get("/{return_id}/items", response_model=List[VendorReturnItemResponse])
async def get_vendor_return_items(
    *,
    storage: Storage = Depends(get_storage),
    return_id: int) -> Any:
    if not await storage.get_vendor_return(return_id):
        raise HTTPException(status_code=404, detail="Vendor return not found")
    return await storage.get_vendor_return_items(return_id)


@router.post("", response_model=VendorReturnResponse, status_code=201)
async def create_vendor_return(
    *,
    storage: Storage = Depends(get_storage),
    return_in: VendorReturnCreate) -> Any:
    """Send goods back to a vendor"""
    if not await storage.get_vendor(return_in.vendor_id):
        raise HTTPException(status_code=404, detail="Vendor not found")
    if return_in.vehicle_id and not await storage.get_vehicle(return_in.vehicle_id):
        raise HTTPException(status_code=404, detail="Vehicle not found")
    if return_in.purchase_id:
        purchase = await storage.get_purchase(return_in.purchase_id)
        if not purchase:
            raise HTTPException(status_code=404, detail="Purchase not found")
        if purchase.vendor_id != return_in.vendor_id:
            raise HTTPException(status_code=400, detail="Purchase belongs to another vendor")

    missing = await storage.missing_products([i.product_id for i in return_in.items])
    if missing:
        raise HTTPException(status_code=404, detail=f"Product not found: {missing[0]}")

    return await storage.create_vendor_return(return_in)

"""
Purchase API

A purchase brings goods in from a vendor: every line raises the product
stock and, when a vehicle carried the goods, loads that vehicle.
"""
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.services.storage import Storage
from backoffice.schemas.purchase import (
    PurchaseCreate, PurchaseResponse, PurchaseListResponse, PurchaseItemResponse
)

router = APIRouter(route_class=invalid_data_route("Invalid purchase data"))


@router.get("", response_model=PurchaseListResponse)
async def list_purchases(
    *,
    storage: Storage = Depends(get_storage),
    vendor_id: Optional[int] = Query(None, description="Only this vendor"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500)) -> Any:
    """Purchases, newest first"""
    purchases, total = await storage.list_purchases(vendor_id, page, limit)
    return PurchaseListResponse(
        data=[PurchaseResponse.model_validate(p) for p in purchases],
        total=total,
        page=page,
        limit=limit
    )


@router.get("/{purchase_id}", response_model=PurchaseResponse)
async def get_purchase(
    *,
    storage: Storage = Depends(get_storage),
    purchase_id: int) -> Any:
    purchase = await storage.get_purchase(purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return purchase


@router.get("/{purchase_id}/items", response_model=List[PurchaseItemResponse])
async def get_purchase_items(
    *,
    storage: Storage = Depends(get_storage),
    purchase_id: int) -> Any:
    if not await storage.get_purchase(purchase_id):
        raise HTTPException(status_code=404, detail="Purchase not found")
    return await storage.get_purchase_items(purchase_id)


@router.post("", response_model=PurchaseResponse, status_code=201)
async def create_purchase(
    *,
    storage: Storage = Depends(get_storage),
    purchase_in: PurchaseCreate) -> Any:
    """Create purchase with its lines"""
    if not await storage.get_vendor(purchase_in.vendor_id):
        raise HTTPException(status_code=404, detail="Vendor not found")
    if purchase_in.vehicle_id and not await storage.get_vehicle(purchase_in.vehicle_id):
        raise HTTPException(status_code=404, detail="Vehicle not found")

    missing = await storage.missing_products([i.product_id for i in purchase_in.items])
    if missing:
        raise HTTPException(status_code=404, detail=f"Product not found: {missing[0]}")

    return await storage.create_purchase(purchase_in)

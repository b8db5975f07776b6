"""Vendor API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.party import (
    VendorCreate, VendorUpdate, VendorResponse, VendorListResponse, VendorBalance
)

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid vendor data"))


@router.get("", response_model=VendorListResponse)
async def list_vendors(
    *,
    storage: Storage = Depends(get_storage),
    search: Optional[str] = Query(None, description="Name or phone contains"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500)) -> Any:
    """List vendors"""
    vendors, total = await storage.list_vendors(search, page, limit)
    return VendorListResponse(
        data=[VendorResponse.model_validate(v) for v in vendors],
        total=total,
        page=page,
        limit=limit
    )


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor(
    *,
    storage: Storage = Depends(get_storage),
    vendor_id: int) -> Any:
    vendor = await storage.get_vendor(vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor


@router.get("/{vendor_id}/balance", response_model=VendorBalance)
async def get_vendor_balance(
    *,
    storage: Storage = Depends(get_storage),
    vendor_id: int) -> Any:
    """Purchases - payments - returns"""
    if not await storage.get_vendor(vendor_id):
        raise HTTPException(status_code=404, detail="Vendor not found")
    return VendorBalance(**await storage.get_vendor_balance(vendor_id))


@router.post("", response_model=VendorResponse, status_code=201)
async def create_vendor(
    *,
    storage: Storage = Depends(get_storage),
    vendor_in: VendorCreate) -> Any:
    vendor = await storage.create_vendor(vendor_in.model_dump())
    logger.info(f"Vendor created: {vendor.id} {vendor.name}")
    return vendor


@router.patch("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    *,
    storage: Storage = Depends(get_storage),
    vendor_id: int,
    vendor_in: VendorUpdate) -> Any:
    vendor = await storage.update_vendor(vendor_id, vendor_in.model_dump(exclude_unset=True, exclude_none=True))
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor


@router.delete("/{vendor_id}", status_code=204)
async def delete_vendor(
    *,
    storage: Storage = Depends(get_storage),
    vendor_id: int) -> Response:
    """Refused while documents or payments still point at the vendor"""
    if not await storage.get_vendor(vendor_id):
        raise HTTPException(status_code=404, detail="Vendor not found")

    references = await storage.vendor_references(vendor_id)
    if references:
        used_by = ", ".join(f"{count} {label}" for label, count in references.items())
        raise HTTPException(status_code=400, detail=f"Vendor is still referenced by {used_by}")

    await storage.delete_vendor(vendor_id)
    logger.info(f"Vendor deleted: {vendor_id}")
    return Response(status_code=204)

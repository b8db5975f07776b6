"""
Invoice API

Selling takes stock out of the warehouse and, when the invoice names a
vehicle, off that vehicle. The halal charge is worked out here when the
client does not send it.
"""
import datetime as dt
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.invoice import (
    InvoiceCreate,
    InvoiceUpdate,
    InvoiceItemUpdate,
    InvoiceResponse,
    InvoiceListResponse,
    InvoiceItemResponse)

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid invoice data"))
item_router = APIRouter(route_class=invalid_data_route("Invalid invoice item data"))


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    *,
    storage: Storage = Depends(get_storage),
    customer_id: Optional[int] = Query(None, description="Only this customer"),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500)) -> Any:
    """Invoices, newest first"""
    invoices, total = await storage.list_invoices(customer_id, start_date, end_date, page, limit)
    return InvoiceListResponse(
        data=[InvoiceResponse.model_validate(i) for i in invoices],
        total=total,
        page=page,
        limit=limit
    )


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    *,
    storage: Storage = Depends(get_storage),
    invoice_id: int) -> Any:
    invoice = await storage.get_invoice(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.get("/{invoice_id}/items", response_model=List[InvoiceItemResponse])
async def get_invoice_items(
    *,
    storage: Storage = Depends(get_storage),
    invoice_id: int) -> Any:
    if not await storage.get_invoice(invoice_id):
        raise HTTPException(status_code=404, detail="Invoice not found")
    return await storage.get_invoice_items(invoice_id)


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    *,
    storage: Storage = Depends(get_storage),
    invoice_in: InvoiceCreate) -> Any:
    """Create invoice with its lines"""
    if not await storage.get_customer(invoice_in.customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    if invoice_in.vehicle_id and not await storage.get_vehicle(invoice_in.vehicle_id):
        raise HTTPException(status_code=404, detail="Vehicle not found")

    missing = await storage.missing_products([i.product_id for i in invoice_in.items])
    if missing:
        raise HTTPException(status_code=404, detail=f"Product not found: {missing[0]}")

    return await storage.create_invoice(invoice_in)


@router.patch("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    *,
    storage: Storage = Depends(get_storage),
    invoice_id: int,
    invoice_in: InvoiceUpdate) -> Any:
    """Header figures, status and notes; lines are not touched"""
    invoice = await storage.update_invoice(invoice_id, invoice_in.model_dump(exclude_unset=True, exclude_none=True))
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    logger.info(f"Invoice updated: {invoice.invoice_number}")
    return invoice


@item_router.patch("/{item_id}", response_model=InvoiceItemResponse)
async def update_invoice_item(
    *,
    storage: Storage = Depends(get_storage),
    item_id: int,
    item_in: InvoiceItemUpdate) -> Any:
    """Re-price a line, total follows quantity * unit price unless given"""
    item = await storage.update_invoice_item(item_id, item_in.unit_price, item_in.total)
    if not item:
        raise HTTPException(status_code=404, detail="Invoice item not found")
    return item

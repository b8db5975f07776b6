"""Customer API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.party import (
    CustomerCreate, CustomerUpdate, CustomerResponse, CustomerListResponse, CustomerBalance
)
from backoffice.schemas.invoice import InvoiceResponse

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid customer data"))


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    *,
    storage: Storage = Depends(get_storage),
    search: Optional[str] = Query(None, description="Name or phone contains"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500)) -> Any:
    """List customers"""
    customers, total = await storage.list_customers(search, page, limit)
    return CustomerListResponse(
        data=[CustomerResponse.model_validate(c) for c in customers],
        total=total,
        page=page,
        limit=limit
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    *,
    storage: Storage = Depends(get_storage),
    customer_id: int) -> Any:
    customer = await storage.get_customer(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.get("/{customer_id}/balance", response_model=CustomerBalance)
async def get_customer_balance(
    *,
    storage: Storage = Depends(get_storage),
    customer_id: int) -> Any:
    """Invoices - payments"""
    if not await storage.get_customer(customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    return CustomerBalance(**await storage.get_customer_balance(customer_id))


@router.get("/{customer_id}/invoices", response_model=List[InvoiceResponse])
async def get_customer_invoices(
    *,
    storage: Storage = Depends(get_storage),
    customer_id: int) -> Any:
    if not await storage.get_customer(customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    invoices = await storage.get_invoices(customer_id=customer_id)
    return sorted(invoices, key=lambda i: (i.date, i.id), reverse=True)


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    *,
    storage: Storage = Depends(get_storage),
    customer_in: CustomerCreate) -> Any:
    customer = await storage.create_customer(customer_in.model_dump())
    logger.info(f"Customer created: {customer.id} {customer.name}")
    return customer


@router.patch("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    *,
    storage: Storage = Depends(get_storage),
    customer_id: int,
    customer_in: CustomerUpdate) -> Any:
    customer = await storage.update_customer(customer_id, customer_in.model_dump(exclude_unset=True, exclude_none=True))
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(
    *,
    storage: Storage = Depends(get_storage),
    customer_id: int) -> Response:
    """Refused while invoices or payments still point at the customer"""
    if not await storage.get_customer(customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")

    references = await storage.customer_references(customer_id)
    if references:
        used_by = ", ".join(f"{count} {label}" for label, count in references.items())
        raise HTTPException(status_code=400, detail=f"Customer is still referenced by {used_by}")

    await storage.delete_customer(customer_id)
    logger.info(f"Customer deleted: {customer_id}")
    return Response(status_code=204)

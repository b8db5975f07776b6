"""
Payment API

- vendor payments: money we pay out, lowers what we owe the vendor
- customer payments: money received, lowers what the customer owes

Payments are never edited once recorded.
"""
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.services.storage import Storage
from backoffice.schemas.payment import (
    VendorPaymentCreate, VendorPaymentResponse,
    CustomerPaymentCreate, CustomerPaymentResponse
)

vendor_router = APIRouter(route_class=invalid_data_route("Invalid payment data"))
customer_router = APIRouter(route_class=invalid_data_route("Invalid payment data"))


@vendor_router.get("", response_model=List[VendorPaymentResponse])
async def list_vendor_payments(
    *,
    storage: Storage = Depends(get_storage),
    vendor_id: Optional[int] = Query(None, description="Only this vendor")) -> Any:
    return await storage.get_vendor_payments(vendor_id)


@vendor_router.post("", response_model=VendorPaymentResponse, status_code=201)
async def create_vendor_payment(
    *,
    storage: Storage = Depends(get_storage),
    payment_in: VendorPaymentCreate) -> Any:
    """Pay a vendor, optionally against one purchase"""
    if not await storage.get_vendor(payment_in.vendor_id):
        raise HTTPException(status_code=404, detail="Vendor not found")

    if payment_in.purchase_id:
        purchase = await storage.get_purchase(payment_in.purchase_id)
        if not purchase:
            raise HTTPException(status_code=404, detail="Purchase not found")
        if purchase.vendor_id != payment_in.vendor_id:
            raise HTTPException(status_code=400, detail="Purchase belongs to another vendor")

    return await storage.create_vendor_payment(payment_in.model_dump())


@customer_router.get("", response_model=List[CustomerPaymentResponse])
async def list_customer_payments(
    *,
    storage: Storage = Depends(get_storage),
    customer_id: Optional[int] = Query(None, description="Only this customer")) -> Any:
    return await storage.get_customer_payments(customer_id)


@customer_router.post("", response_model=CustomerPaymentResponse, status_code=201)
async def create_customer_payment(
    *,
    storage: Storage = Depends(get_storage),
    payment_in: CustomerPaymentCreate) -> Any:
    """Receive money from a customer, optionally against one invoice"""
    if not await storage.get_customer(payment_in.customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")

    if payment_in.invoice_id:
        invoice = await storage.get_invoice(payment_in.invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        if invoice.customer_id != payment_in.customer_id:
            raise HTTPException(status_code=400, detail="Invoice belongs to another customer")

    return await storage.create_customer_payment(payment_in.model_dump())

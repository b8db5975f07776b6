"""Halal cash payment API - halal charge collected in cash"""

import datetime as dt
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.payment import HalalCashPaymentCreate, HalalCashPaymentResponse

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid halal cash payment data"))


@router.get("", response_model=List[HalalCashPaymentResponse])
async def list_halal_cash_payments(
    *,
    storage: Storage = Depends(get_storage),
    start_date: Optional[dt.date] = Query(None, description="From (inclusive)"),
    end_date: Optional[dt.date] = Query(None, description="To (inclusive)")) -> Any:
    return await storage.get_halal_cash_payments(start_date, end_date)


@router.post("", response_model=HalalCashPaymentResponse, status_code=201)
async def create_halal_cash_payment(
    *,
    storage: Storage = Depends(get_storage),
    payment_in: HalalCashPaymentCreate) -> Any:
    """Record halal charge received in cash, optionally for one invoice"""
    invoice = None
    if payment_in.invoice_id:
        invoice = await storage.get_invoice(payment_in.invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
    if payment_in.customer_id and not await storage.get_customer(payment_in.customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    if invoice and payment_in.customer_id and invoice.customer_id != payment_in.customer_id:
        raise HTTPException(status_code=400, detail="Invoice belongs to another customer")

    payment = await storage.create_halal_cash_payment(payment_in.model_dump(), invoice)
    logger.info(f"Halal cash payment {payment.id}: {payment.amount} ({payment.invoice_number or 'direct'})")
    return payment


@router.delete("/{payment_id}", status_code=204)
async def delete_halal_cash_payment(
    *,
    storage: Storage = Depends(get_storage),
    payment_id: int) -> Response:
    if not await storage.delete_halal_cash_payment(payment_id):
        raise HTTPException(status_code=404, detail="Halal cash payment not found")
    logger.info(f"Halal cash payment deleted: {payment_id}")
    return Response(status_code=204)

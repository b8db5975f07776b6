"""
Report API

Figures are aggregated in backoffice.services.reports from rows fetched
here. Any failure answers 500 "Failed to generate report".
"""
import datetime as dt
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services import reports
from backoffice.services.storage import Storage
from backoffice.schemas.party import VendorBalanceRow, CustomerBalanceRow
from backoffice.schemas.report import ProfitLossReport, HalalPeriodSummary, LowStockItem

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid report parameters"))

REPORT_FAILED = "Failed to generate report"


@router.get("/profit-loss", response_model=ProfitLossReport)
async def profit_loss(
    *,
    storage: Storage = Depends(get_storage),
    start_date: Optional[dt.date] = Query(None, description="From (inclusive)"),
    end_date: Optional[dt.date] = Query(None, description="To (inclusive)")) -> Any:
    """Purchases, returns, sales and margins for the period"""
    try:
        payments = await storage.get_customer_payments()
        if start_date:
            payments = [p for p in payments if p.date >= start_date]
        if end_date:
            payments = [p for p in payments if p.date <= end_date]

        return reports.profit_loss(
            purchases=await storage.get_purchases(start_date, end_date),
            returns=await storage.get_vendor_returns(start_date=start_date, end_date=end_date),
            invoices=await storage.get_invoices(start_date=start_date, end_date=end_date),
            products=await storage.get_products(),
            halal_cash=await storage.get_halal_cash_payments(start_date, end_date),
            customer_payments=payments,
            customers=await storage.get_customers(),
            start_date=start_date,
            end_date=end_date
        )
    except Exception as e:
        logger.error(f"Profit and loss report failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=REPORT_FAILED)


@router.get("/vendor-balances", response_model=List[VendorBalanceRow])
async def vendor_balances(
    *,
    storage: Storage = Depends(get_storage)) -> Any:
    """Every vendor with what we still owe"""
    try:
        return reports.vendor_balances(
            await storage.get_vendors(),
            await storage.get_purchases(),
            await storage.get_vendor_payments(),
            await storage.get_vendor_returns()
        )
    except Exception as e:
        logger.error(f"Vendor balance report failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=REPORT_FAILED)


@router.get("/customer-balances", response_model=List[CustomerBalanceRow])
async def customer_balances(
    *,
    storage: Storage = Depends(get_storage)) -> Any:
    """Every customer with what they still owe"""
    try:
        return reports.customer_balances(
            await storage.get_customers(),
            await storage.get_invoices(),
            await storage.get_customer_payments()
        )
    except Exception as e:
        logger.error(f"Customer balance report failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=REPORT_FAILED)


@router.get("/halal-summary", response_model=List[HalalPeriodSummary])
async def halal_summary(
    *,
    storage: Storage = Depends(get_storage),
    period: str = Query("daily", pattern="^(daily|monthly)$"),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None)) -> Any:
    """Halal charge collected per day or month, newest first"""
    try:
        return reports.halal_summary_by_period(
            await storage.get_invoices(start_date=start_date, end_date=end_date),
            await storage.get_halal_cash_payments(start_date, end_date),
            period
        )
    except Exception as e:
        logger.error(f"Halal summary report failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=REPORT_FAILED)


@router.get("/low-stock", response_model=List[LowStockItem])
async def low_stock(
    *,
    storage: Storage = Depends(get_storage)) -> Any:
    """Products at or below their reorder level"""
    try:
        return reports.low_stock(await storage.get_products())
    except Exception as e:
        logger.error(f"Low stock report failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=REPORT_FAILED)

"""Warehouse stock movement API"""

import datetime as dt
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.product import StockMovementCreate, StockMovementResponse

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid stock movement data"))


@router.get("", response_model=List[StockMovementResponse])
async def list_stock_movements(
    *,
    storage: Storage = Depends(get_storage),
    start_date: Optional[dt.date] = Query(None, description="From (inclusive)"),
    end_date: Optional[dt.date] = Query(None, description="To (inclusive)"),
    product_id: Optional[int] = Query(None)) -> Any:
    """Movements, newest first"""
    return await storage.get_stock_movements(start_date, end_date, product_id)


@router.post("", response_model=StockMovementResponse, status_code=201)
async def create_stock_movement(
    *,
    storage: Storage = Depends(get_storage),
    movement_in: StockMovementCreate) -> Any:
    """Manual receipt or issue, applied to the product stock"""
    if not await storage.get_product(movement_in.product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    movement = await storage.create_stock_movement(movement_in.model_dump())
    logger.info(f"Stock {movement.type} {movement.quantity} for product {movement.product_id}: {movement.reason}")
    return movement

"""
Vehicle inventory API

Stock carried on each vehicle. Purchases load it, invoices and vendor
returns take it off, the endpoints below cover manual loads, corrections
and the movement log.
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.vehicle import (
    VehicleInventoryLoad,
    VehicleInventorySet,
    VehicleInventoryResponse,
    VehicleInventoryMovementCreate,
    VehicleInventoryMovementResponse)

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid vehicle inventory data"))


async def _require_vehicle(storage: Storage, vehicle_id: int) -> None:
    if not await storage.get_vehicle(vehicle_id):
        raise HTTPException(status_code=404, detail="Vehicle not found")


async def _require_product(storage: Storage, product_id: int) -> None:
    if not await storage.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")


@router.get("/vehicles/{vehicle_id}/inventory", response_model=List[VehicleInventoryResponse])
async def get_vehicle_inventory(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: int) -> Any:
    await _require_vehicle(storage, vehicle_id)
    return await storage.get_vehicle_inventory(vehicle_id)


@router.post("/vehicles/{vehicle_id}/inventory", response_model=VehicleInventoryResponse, status_code=201)
async def load_vehicle_inventory(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: int,
    load_in: VehicleInventoryLoad) -> Any:
    """Load goods onto a vehicle"""
    await _require_vehicle(storage, vehicle_id)
    await _require_product(storage, load_in.product_id)
    if load_in.purchase_id and not await storage.get_purchase(load_in.purchase_id):
        raise HTTPException(status_code=404, detail="Purchase not found")

    inventory = await storage.load_vehicle_inventory(
        vehicle_id,
        load_in.product_id,
        load_in.quantity,
        purchase_id=load_in.purchase_id,
        movement_date=load_in.date,
        notes=load_in.notes
    )
    logger.info(f"Vehicle {vehicle_id} loaded with {load_in.quantity} of product {load_in.product_id}")
    return inventory


@router.patch("/vehicles/{vehicle_id}/inventory/{product_id}", response_model=VehicleInventoryResponse)
async def set_vehicle_inventory(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: int,
    product_id: int,
    set_in: VehicleInventorySet) -> Any:
    """Correct the quantity on board"""
    await _require_vehicle(storage, vehicle_id)
    inventory = await storage.set_vehicle_inventory(vehicle_id, product_id, set_in.quantity, set_in.notes)
    if not inventory:
        raise HTTPException(status_code=404, detail="Product is not on this vehicle")
    return inventory


@router.get("/vehicles/{vehicle_id}/inventory-movements", response_model=List[VehicleInventoryMovementResponse])
async def get_vehicle_movements(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: int) -> Any:
    await _require_vehicle(storage, vehicle_id)
    return await storage.get_vehicle_inventory_movements(vehicle_id)


@router.get("/vehicle-inventory-movements", response_model=List[VehicleInventoryMovementResponse])
async def list_vehicle_movements(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: Optional[int] = Query(None, description="Only this vehicle")) -> Any:
    return await storage.get_vehicle_inventory_movements(vehicle_id)


@router.post("/vehicle-inventory-movements", response_model=VehicleInventoryMovementResponse, status_code=201)
async def create_vehicle_movement(
    *,
    storage: Storage = Depends(get_storage),
    movement_in: VehicleInventoryMovementCreate) -> Any:
    """Record a movement and apply it to the vehicle stock"""
    await _require_vehicle(storage, movement_in.vehicle_id)
    await _require_product(storage, movement_in.product_id)

    if movement_in.type != "adjustment" and movement_in.quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be positive")

    movement = await storage.record_vehicle_movement(movement_in.model_dump())
    if not movement:
        raise HTTPException(status_code=400, detail="Insufficient stock on vehicle")
    return movement


@router.get("/vehicle-inventories", response_model=Dict[int, List[VehicleInventoryResponse]])
async def list_all_vehicle_inventories(
    *,
    storage: Storage = Depends(get_storage)) -> Any:
    """Inventory of every vehicle, keyed by vehicle id"""
    return await storage.get_all_vehicle_inventories()

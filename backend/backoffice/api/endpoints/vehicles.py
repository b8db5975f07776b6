"""
Vehicle API
"""
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.vehicle import (
    VehicleCreate,
    VehicleUpdate,
    VehicleResponse,
    VehicleListResponse)

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid vehicle data"))


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    *,
    storage: Storage = Depends(get_storage),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500)) -> Any:
    """List vehicles by registration number"""
    vehicles, total = await storage.list_vehicles(page, limit)
    return VehicleListResponse(
        data=[VehicleResponse.model_validate(v) for v in vehicles],
        total=total,
        page=page,
        limit=limit
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: int) -> Any:
    vehicle = await storage.get_vehicle(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.post("", response_model=VehicleResponse, status_code=201)
async def create_vehicle(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_in: VehicleCreate) -> Any:
    vehicle = await storage.create_vehicle(vehicle_in.model_dump())
    logger.info(f"Vehicle created: {vehicle.id} {vehicle.number}")
    return vehicle


@router.patch("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: int,
    vehicle_in: VehicleUpdate) -> Any:
    vehicle = await storage.update_vehicle(vehicle_id, vehicle_in.model_dump(exclude_unset=True, exclude_none=True))
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.delete("/{vehicle_id}", status_code=204)
async def delete_vehicle(
    *,
    storage: Storage = Depends(get_storage),
    vehicle_id: int) -> Response:
    """Delete vehicle, its inventory and movement log go with it"""
    if not await storage.get_vehicle(vehicle_id):
        raise HTTPException(status_code=404, detail="Vehicle not found")

    references = await storage.vehicle_references(vehicle_id)
    if references:
        used_by = ", ".join(f"{count} {label}" for label, count in references.items())
        raise HTTPException(status_code=400, detail=f"Vehicle is still referenced by {used_by}")

    await storage.delete_vehicle(vehicle_id)
    logger.info(f"Vehicle deleted: {vehicle_id}")
    return Response(status_code=204)

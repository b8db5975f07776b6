"""Product API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.product import (
    ProductCreate, ProductUpdate, ProductResponse, ProductListResponse
)

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid product data"))


@router.get("", response_model=ProductListResponse)
async def list_products(
    *,
    storage: Storage = Depends(get_storage),
    search: Optional[str] = Query(None, description="Name contains"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500)) -> Any:
    """List products"""
    products, total = await storage.list_products(search, page, limit)
    return ProductListResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        limit=limit
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    *,
    storage: Storage = Depends(get_storage),
    product_id: int) -> Any:
    product = await storage.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    *,
    storage: Storage = Depends(get_storage),
    product_in: ProductCreate) -> Any:
    """Create product, stock starts at 0 unless given"""
    product = await storage.create_product(product_in.model_dump())
    logger.info(f"Product created: {product.id} {product.name}")
    return product


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    *,
    storage: Storage = Depends(get_storage),
    product_id: int,
    product_in: ProductUpdate) -> Any:
    product = await storage.update_product(product_id, product_in.model_dump(exclude_unset=True, exclude_none=True))
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    *,
    storage: Storage = Depends(get_storage),
    product_id: int) -> Response:
    """Refused while any document line or stock movement uses the product"""
    if not await storage.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    references = await storage.product_references(product_id)
    if references:
        used_by = ", ".join(f"{count} {label}" for label, count in references.items())
        raise HTTPException(status_code=400, detail=f"Product is still referenced by {used_by}")

    await storage.delete_product(product_id)
    logger.info(f"Product deleted: {product_id}")
    return Response(status_code=204)

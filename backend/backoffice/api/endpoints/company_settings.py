"""Company settings API - one row holding the letterhead details"""

from typing import Any, Optional
from fastapi import APIRouter, Depends

from backoffice.api.routing import invalid_data_route
from backoffice.core.deps import get_storage
from backoffice.core.logging_config import get_logger
from backoffice.services.storage import Storage
from backoffice.schemas.company_settings import CompanySettingsSave, CompanySettingsResponse

logger = get_logger(__name__)

router = APIRouter(route_class=invalid_data_route("Invalid company settings data"))


@router.get("", response_model=Optional[CompanySettingsResponse])
async def get_company_settings(
    *,
    storage: Storage = Depends(get_storage)) -> Any:
    """The settings, or null before the first save"""
    return await storage.get_company_settings()


@router.post("", response_model=CompanySettingsResponse, status_code=201)
async def save_company_settings(
    *,
    storage: Storage = Depends(get_storage),
    settings_in: CompanySettingsSave) -> Any:
    """Create or replace the settings"""
    company = await storage.upsert_company_settings(settings_in.model_dump())
    logger.info(f"Company settings saved: {company.name}")
    return company

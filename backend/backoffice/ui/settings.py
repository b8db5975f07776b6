"""
Settings page

Server-rendered form for the company details. The page posts JSON to the
company settings API, so the API stays the only place that writes them.
"""
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from backoffice.core.config import settings
from backoffice.core.deps import get_storage
from backoffice.services.storage import Storage

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()

FIELDS = ["name", "address", "phone", "email", "gst_number", "bank_details"]


@router.get("/settings", response_class=HTMLResponse)
async def settings_page(
    request: Request,
    storage: Storage = Depends(get_storage)) -> HTMLResponse:
    company = await storage.get_company_settings()
    values = {field: (getattr(company, field) or "") if company else "" for field in FIELDS}
    return templates.TemplateResponse(
        request,
        "settings.html",
        {
            "title": settings.PROJECT_NAME,
            "company": values,
            "save_url": f"{settings.API_PREFIX}/company-settings",
        }
    )

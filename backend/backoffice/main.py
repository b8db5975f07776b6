from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backoffice.api.api import api_router
from backoffice.core.config import settings
from backoffice.core.logging_config import setup_logging, get_logger
from backoffice.db.session import SessionLocal
from backoffice.db.migrations import run_migrations
from backoffice.db.init_db import ensure_tables_exist
from backoffice.ui.settings import router as settings_page_router

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables and columns before serving"""
    logger.info("Starting up...")

    await ensure_tables_exist()
    logger.info("Database tables ready")

    async with SessionLocal() as db:
        result = await run_migrations(db)

    if result.get("columns_added"):
        logger.info(f"Schema updated: {len(result['columns_added'])} columns added")
        for col in result["columns_added"]:
            logger.info(f"   + {col}")
    if result.get("old_version") != result.get("new_version"):
        logger.info(f"Database version: {result.get('old_version') or 'initial'} -> {result.get('new_version')}")

    yield
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    description="Back office for purchases, sales, stock and vehicle inventory",
    lifespan=lifespan
)

if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"CORS origins: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Routes without their own message"""
    logger.warning(f"{request.method} {request.url.path}: invalid request {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": "Invalid request data"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(settings_page_router)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME, "settings_page": "/settings"}


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")

"""
Asset admin API application.

Mounts the import/export and label routers under ``API_V1_STR`` and adds the
root and health endpoints.
"""

import json
import logging
from datetime import datetime

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware

from asset_admin.api.api import api_router
from asset_admin.core.config import settings
from asset_admin.core.exceptions import AssetAdminException, EntityNotFoundException
from asset_admin.db.session import get_db, init_db

# --- Logging ---
LOG_LEVEL = getattr(logging, settings.LOG_LEVEL, logging.INFO)

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("asset_admin")
logger.setLevel(LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Back-office API for asset import, export and label printing",
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
)

# --- CORS ---
origins = [str(origin) for origin in settings.BACKEND_CORS_ORIGINS if origin]
if origins:
    logger.info(f"Allowing CORS origins: {origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
        max_age=86400,
    )
else:
    logger.warning("No CORS origins configured")


# --- Exception handlers ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        f"Invalid request {request.method} {request.url.path}:\n{json.dumps(errors, indent=2)}"
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": errors})


@app.exception_handler(AssetAdminException)
async def asset_admin_exception_handler(request: Request, exc: AssetAdminException):
    if isinstance(exc, EntityNotFoundException):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    logger.error(f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content=jsonable_encoder(exc.to_dict()))


# --- Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = datetime.now()
    try:
        response = await call_next(request)
    except Exception as e:
        elapsed = (datetime.now() - started).total_seconds()
        logger.exception(f"{request.method} {request.url.path} failed after {elapsed:.3f}s: {e}")
        raise
    elapsed = (datetime.now() - started).total_seconds()
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.3f}s)")
    return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.method == "OPTIONS":
            return response
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.PRODUCTION and request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


app.add_middleware(SecurityHeadersMiddleware)


@app.on_event("startup")
async def create_tables():
    if not init_db():
        logger.error("Database initialization failed")


app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/", tags=["Root"])
def read_root():
    """Service name, version and documentation links."""
    return {
        "project_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "docs_url": app.docs_url,
        "openapi_url": app.openapi_url,
    }


@app.get("/health", tags=["Health"])
def health_check(db: Session = Depends(get_db)):
    """Report whether the database answers; 503 when it does not."""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.error(f"Health check query failed: {e}")
        database = "unavailable"

    healthy = database == "ok"
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if healthy else "degraded",
            "database": database,
            "timestamp": datetime.now().isoformat(),
        },
    )

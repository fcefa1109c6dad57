# File: asset_admin/api/api.py

from fastapi import APIRouter

from asset_admin.api.endpoints import imports, labels

api_router = APIRouter()

api_router.include_router(imports.router, prefix="/import", tags=["Import / Export"])
api_router.include_router(labels.router, prefix="/labels", tags=["Labels"])

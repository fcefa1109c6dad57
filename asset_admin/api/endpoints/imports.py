# File: asset_admin/api/endpoints/imports.py
"""
Asset import and export API endpoints.

This module provides the administrative spreadsheet routes: downloading the
import template, uploading a spreadsheet or CSV file to create and update
assets, and exporting every asset to a workbook. All routes require a
superuser.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from fastapi.responses import JSONResponse

from asset_admin.api.deps import (
    get_asset_import_service,
    get_current_active_superuser,
    get_workbook_service,
)
from asset_admin.core.exceptions import BatchInputException
from asset_admin.schemas.import_result import ImportResultResponse
from asset_admin.services.asset_import_service import AssetImportService, ConflictPolicy
from asset_admin.services.workbook_service import (
    TEMPLATE_FILENAME,
    XLSX_MEDIA_TYPE,
    WorkbookService,
    export_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _attachment(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/template")
def download_template(
        *,
        current_user=Depends(get_current_active_superuser),
        service: WorkbookService = Depends(get_workbook_service),
) -> Response:
    """
    Download the asset import template.

    The workbook lists the current manufacturers, categories, suppliers and
    locations as dropdown values alongside the fixed status and condition
    labels.
    """
    try:
        content = service.build_template()
    except Exception as e:
        logger.error(f"Template error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to generate template"},
        )
    return _attachment(content, TEMPLATE_FILENAME)


@router.post("/assets", response_model=ImportResultResponse)
def import_assets(
        *,
        file: Optional[UploadFile] = File(None),
        skip_duplicates: bool = Query(False, alias="skipDuplicates"),
        update_existing: bool = Query(False, alias="updateExisting"),
        current_user=Depends(get_current_active_superuser),
        service: AssetImportService = Depends(get_asset_import_service),
):
    """
    Import assets from an uploaded ``.xlsx`` or ``.csv`` file.

    Args:
        file: Uploaded file (multipart field ``file``)
        skip_duplicates: Skip rows whose item number already exists
        update_existing: Update assets whose item number already exists;
            takes precedence over ``skip_duplicates``
        current_user: Currently authenticated superuser
        service: Import service

    Returns:
        Counts of created, updated and skipped rows and the per-row errors
    """
    if file is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": "No file uploaded"}
        )

    policy = ConflictPolicy(skip_duplicates=skip_duplicates, update_existing=update_existing)
    try:
        content = file.file.read()
        result = service.import_file(content, file.filename, file.content_type, policy)
    except BatchInputException as e:
        logger.info(f"Rejected import of '{file.filename}': {e.message}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})
    except Exception as e:
        logger.error(f"Import error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"Failed to import assets: {e}"},
        )
    finally:
        file.file.close()

    logger.info(f"User {current_user.id} imported '{file.filename}': {result!r}")
    return result.to_dict()


@router.get("/export")
def export_assets(
        *,
        current_user=Depends(get_current_active_superuser),
        service: WorkbookService = Depends(get_workbook_service),
) -> Response:
    """
    Export every asset to a workbook, ordered by item number.
    """
    try:
        content = service.build_export()
    except Exception as e:
        logger.error(f"Export error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to export assets"},
        )
    return _attachment(content, export_filename())

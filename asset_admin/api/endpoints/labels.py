# File: asset_admin/api/endpoints/labels.py
"""
Asset label API endpoints.

Labels can be previewed as PNG, downloaded as PDF (singly or as a multi-page
batch) and sent to the configured label printer. Label display preferences
are stored server-side and can be overridden per request.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from fastapi.responses import JSONResponse

from asset_admin.api.deps import (
    get_current_active_user,
    get_label_service,
    get_label_settings_service,
)
from asset_admin.core.exceptions import EntityNotFoundException, LabelException
from asset_admin.schemas.label import (
    LabelBatchPrintRequest,
    LabelBatchPrintResponse,
    LabelOverrides,
    LabelPrintRequest,
    LabelPrintResponse,
    LabelSettings,
    LabelSettingsUpdate,
)
from asset_admin.services.label_service import LabelService
from asset_admin.services.label_settings_service import LabelSettingsService

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _pdf_attachment(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def get_query_overrides(
        show_assigned_to: Optional[bool] = Query(None, alias="showAssignedTo"),
        show_hostname: Optional[bool] = Query(None, alias="showHostname"),
        show_model: Optional[bool] = Query(None, alias="showModel"),
        show_serial_number: Optional[bool] = Query(None, alias="showSerialNumber"),
) -> LabelOverrides:
    """Display flag overrides taken from the query string."""
    return LabelOverrides(
        show_assigned_to=show_assigned_to,
        show_hostname=show_hostname,
        show_model=show_model,
        show_serial_number=show_serial_number,
    )


def parse_asset_ids(raw: str) -> List[int]:
    """Parse a comma-separated id list, ignoring blank entries."""
    return [int(part) for part in raw.split(",") if part.strip()]


@router.get("/preview/{asset_id}")
def preview_label(
        *,
        asset_id: int = Path(..., ge=1, description="The ID of the asset"),
        overrides: LabelOverrides = Depends(get_query_overrides),
        current_user=Depends(get_current_active_user),
        service: LabelService = Depends(get_label_service),
) -> Response:
    """
    Render the label of an asset as a PNG image.
    """
    try:
        content = service.preview_png(asset_id, overrides)
    except EntityNotFoundException:
        return _error(status.HTTP_404_NOT_FOUND, "Asset not found")
    except LabelException as e:
        logger.error(f"Label preview error: {e.message}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate preview", e.message)
    return Response(content=content, media_type="image/png")


@router.post("/print/{asset_id}", response_model=LabelPrintResponse)
def print_label(
        *,
        asset_id: int = Path(..., ge=1, description="The ID of the asset"),
        request: Optional[LabelPrintRequest] = None,
        current_user=Depends(get_current_active_user),
        service: LabelService = Depends(get_label_service),
):
    """
    Print labels for an asset on the configured printer.

    Args:
        asset_id: ID of the asset
        request: Number of copies and optional display flag overrides
        current_user: Currently authenticated user
        service: Label service

    Returns:
        Success flag and message
    """
    request = request or LabelPrintRequest()
    try:
        return service.print_label(asset_id, request)
    except EntityNotFoundException:
        return _error(status.HTTP_404_NOT_FOUND, "Asset not found")
    except LabelException as e:
        logger.error(f"Label print error: {e.message}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to print label", e.message)


@router.post("/print-batch", response_model=LabelBatchPrintResponse, response_model_exclude_none=True)
def print_label_batch(
        *,
        request: LabelBatchPrintRequest,
        current_user=Depends(get_current_active_user),
        service: LabelService = Depends(get_label_service),
):
    """
    Print labels for several assets.

    Per-asset failures are collected rather than aborting the batch; ids that
    match no asset are counted as failures.
    """
    if not request.asset_ids:
        return _error(status.HTTP_400_BAD_REQUEST, "assetIds array is required")
    return service.print_batch(request)


@router.get("/download/{asset_id}")
def download_label(
        *,
        asset_id: int = Path(..., ge=1, description="The ID of the asset"),
        overrides: LabelOverrides = Depends(get_query_overrides),
        current_user=Depends(get_current_active_user),
        service: LabelService = Depends(get_label_service),
) -> Response:
    """
    Download the label of an asset as a single-page PDF for manual printing.
    """
    try:
        filename, content = service.download_pdf(asset_id, overrides)
    except EntityNotFoundException:
        return _error(status.HTTP_404_NOT_FOUND, "Asset not found")
    except LabelException as e:
        logger.error(f"Label download error: {e.message}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate label", e.message)
    return _pdf_attachment(content, filename)


@router.get("/download-batch")
def download_label_batch(
        *,
        asset_ids: Optional[str] = Query(None, alias="assetIds", description="Comma-separated asset IDs"),
        overrides: LabelOverrides = Depends(get_query_overrides),
        current_user=Depends(get_current_active_user),
        service: LabelService = Depends(get_label_service),
) -> Response:
    """
    Download the labels of several assets as one PDF, one page per label.
    """
    if not asset_ids:
        return _error(status.HTTP_400_BAD_REQUEST, "assetIds parameter is required")
    try:
        ids = parse_asset_ids(asset_ids)
    except ValueError:
        return _error(status.HTTP_400_BAD_REQUEST, "assetIds must be a comma-separated list of IDs")

    try:
        filename, content = service.download_batch_pdf(ids, overrides)
    except EntityNotFoundException:
        return _error(status.HTTP_404_NOT_FOUND, "No assets found")
    except LabelException as e:
        logger.error(f"Batch download error: {e.message}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate batch PDF", e.message)
    return _pdf_attachment(content, filename)


@router.get("/printers", response_model=List[str])
def list_printers(
        *,
        current_user=Depends(get_current_active_user),
        service: LabelService = Depends(get_label_service),
):
    """
    List the printer queues known to the print spooler.
    """
    return service.list_printers()


@router.get("/settings", response_model=LabelSettings)
def get_label_settings(
        *,
        current_user=Depends(get_current_active_user),
        service: LabelSettingsService = Depends(get_label_settings_service),
):
    """
    Get the stored label preferences.
    """
    return service.get_settings()


@router.put("/settings", response_model=LabelSettings)
def update_label_settings(
        *,
        update: LabelSettingsUpdate,
        current_user=Depends(get_current_active_user),
        service: LabelSettingsService = Depends(get_label_settings_service),
):
    """
    Update label preferences; omitted fields keep their stored value.
    """
    return service.update_settings(update)

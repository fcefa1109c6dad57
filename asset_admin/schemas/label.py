# File: asset_admin/schemas/label.py
"""
Schemas for label preview, printing and label preferences.

Wire names are camelCase; every model also accepts the snake_case field names.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LabelOverrides(BaseModel):
    """Per-request display flags overriding the stored label settings."""

    model_config = ConfigDict(populate_by_name=True)

    show_assigned_to: Optional[bool] = Field(None, alias="showAssignedTo")
    show_hostname: Optional[bool] = Field(None, alias="showHostname")
    show_model: Optional[bool] = Field(None, alias="showModel")
    show_serial_number: Optional[bool] = Field(None, alias="showSerialNumber")


class LabelPrintRequest(LabelOverrides):
    """Body of a single-label print request."""

    copies: int = Field(1, ge=1, le=100, description="Number of print jobs to submit")


class LabelBatchPrintRequest(LabelPrintRequest):
    """Body of a batch print request."""

    asset_ids: List[int] = Field(default_factory=list, alias="assetIds")


class LabelPrintResponse(BaseModel):
    success: bool
    message: str


class LabelBatchPrintResponse(BaseModel):
    """Outcome of a batch print; ``errors`` is omitted when empty."""

    success: bool
    printed: int
    failed: int
    errors: Optional[List[str]] = None


class LabelSettings(BaseModel):
    """Stored label preferences."""

    model_config = ConfigDict(populate_by_name=True)

    printer_name: str = Field(..., alias="printerName")
    show_assigned_to: bool = Field(True, alias="showAssignedTo")
    show_model: bool = Field(True, alias="showModel")
    show_hostname: bool = Field(True, alias="showHostname")
    show_serial_number: bool = Field(True, alias="showSerialNumber")


class LabelSettingsUpdate(BaseModel):
    """Partial update of label preferences; unset fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    printer_name: Optional[str] = Field(None, alias="printerName")
    show_assigned_to: Optional[bool] = Field(None, alias="showAssignedTo")
    show_model: Optional[bool] = Field(None, alias="showModel")
    show_hostname: Optional[bool] = Field(None, alias="showHostname")
    show_serial_number: Optional[bool] = Field(None, alias="showSerialNumber")

    @field_validator("printer_name")
    @classmethod
    def strip_printer_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("printerName must not be empty")
        return v

# File: asset_admin/schemas/import_result.py

from typing import List

from pydantic import BaseModel, Field


class ImportRowError(BaseModel):
    row: int = Field(..., description="Spreadsheet row number, the header being row 1")
    message: str


class ImportResultResponse(BaseModel):
    """Schema for the result of an asset import."""

    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[ImportRowError] = Field(default_factory=list)

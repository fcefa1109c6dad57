# File: asset_admin/core/exceptions.py

from typing import Dict, Any, List, Optional
from datetime import datetime


class AssetAdminException(Exception):
    """Base exception for all asset admin errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            message: Text shown to the API caller
            code: Stable error code, e.g. IMPORT_002
            details: Extra context echoed in the response body
        """
        self.message = message
        self.code = code or "GENERIC_ERROR"
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Response body for the domain exception handler."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "timestamp": datetime.now().isoformat(),
        }


# --- Entity lookups ---
class DomainException(AssetAdminException):
    """Base exception for domain-related errors."""

    CODE_PREFIX = "DOMAIN_"


class EntityNotFoundException(DomainException):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            f"{self.CODE_PREFIX}001",
            {"entity_type": entity_type, "entity_id": entity_id},
        )


# Import-related exceptions
class ImportException(AssetAdminException):
    """Base exception for asset import errors."""

    CODE_PREFIX = "IMPORT_"


class RowValidationException(ImportException):
    """Raised when a single import row fails validation."""


class MissingKeyException(RowValidationException):
    """Raised when an import row has no item number."""

    def __init__(self, field_label: str = "Item Number"):
        super().__init__(
            f"{field_label} is required",
            f"{self.CODE_PREFIX}001",
            {"field": field_label},
        )


class InvalidEnumException(RowValidationException):
    """Raised when a status or condition value is outside its fixed set."""

    def __init__(self, field: str, value: Any, valid_values: List[str]):
        super().__init__(
            f'Invalid {field} "{value}". Must be one of: {", ".join(valid_values)}',
            f"{self.CODE_PREFIX}002",
            {"field": field, "value": value, "valid_values": list(valid_values)},
        )


class DuplicateKeyException(ImportException):
    """Raised when an imported item number already exists under the default policy."""

    def __init__(self, item_number: str):
        super().__init__(
            f'Asset with Item Number "{item_number}" already exists',
            f"{self.CODE_PREFIX}003",
            {"item_number": item_number},
        )


class BatchInputException(ImportException):
    """Raised when an upload cannot produce any rows to import."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, f"{self.CODE_PREFIX}004", details)


# Label-related exceptions
class LabelException(AssetAdminException):
    """Base exception for label rendering and printing errors."""

    CODE_PREFIX = "LABEL_"


class LabelRenderException(LabelException):
    """Raised when a label image or document cannot be produced."""

    def __init__(self, message: str, item_number: Optional[str] = None):
        super().__init__(
            message,
            f"{self.CODE_PREFIX}001",
            {"item_number": item_number} if item_number else {},
        )


class PrintException(LabelException):
    """Raised when the print spooler rejects or fails a job."""

    def __init__(self, message: str, printer_name: Optional[str] = None):
        super().__init__(
            message,
            f"{self.CODE_PREFIX}002",
            {"printer_name": printer_name} if printer_name else {},
        )


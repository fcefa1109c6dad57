# File: asset_admin/db/models/enums.py
"""
Enumerations for the asset inventory schema.

Status and condition are stored as their display labels; the enums are the
single source of truth for the allowed values and their order.
"""

from enum import Enum
from typing import List


class AssetStatus(str, Enum):
    """Lifecycle status of an asset."""

    IN_USE = "In Use"
    IN_USE_INFRASTRUCTURE = "In Use - Infrastructure"
    IN_USE_LOANED_TO_STUDENT = "In Use - Loaned to student"
    IN_USE_LOANED_TO_STAFF = "In Use - Loaned to staff"
    AWAITING_ALLOCATION = "Awaiting allocation"
    AWAITING_DELIVERY = "Awaiting delivery"
    AWAITING_COLLECTION = "Awaiting collection"
    DECOMMISSIONED = "Decommissioned"
    DECOMMISSIONED_BEYOND_SERVICE_AGE = "Decommissioned - Beyond service age"
    DECOMMISSIONED_DAMAGED = "Decommissioned - Damaged"
    DECOMMISSIONED_STOLEN = "Decommissioned - Stolen"
    DECOMMISSIONED_IN_STORAGE = "Decommissioned - In storage"
    DECOMMISSIONED_USER_LEFT = "Decommissioned - User left"
    DECOMMISSIONED_WRITTEN_OFF = "Decommissioned - Written Off"
    DECOMMISSIONED_UNRETURNED = "Decommissioned - Unreturned"

    @classmethod
    def labels(cls) -> List[str]:
        return [member.value for member in cls]


class AssetCondition(str, Enum):
    """Physical condition of an asset."""

    NEW = "NEW"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    DAMAGED = "DAMAGED"

    @classmethod
    def labels(cls) -> List[str]:
        return [member.value for member in cls]


DEFAULT_STATUS = AssetStatus.IN_USE
DEFAULT_CONDITION = AssetCondition.GOOD

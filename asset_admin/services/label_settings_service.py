# File: asset_admin/services/label_settings_service.py
"""
Label preferences stored in the key/value settings table.

Values are strings under the ``label.`` prefix. A display flag reads as true
unless it is stored as exactly ``"false"``, so missing keys mean "show".
"""

import logging
from typing import Dict, Mapping, Optional

from sqlalchemy.orm import Session

from asset_admin.core.config import settings
from asset_admin.repositories import SettingsRepository
from asset_admin.schemas.label import LabelOverrides, LabelSettings, LabelSettingsUpdate

logger = logging.getLogger(__name__)

LABEL_PREFIX = "label."
ORGANIZATION_KEY = "organization"

# Schema field -> stored key
SETTING_KEYS = {
    "printer_name": "label.printerName",
    "show_assigned_to": "label.showAssignedTo",
    "show_model": "label.showModel",
    "show_hostname": "label.showHostname",
    "show_serial_number": "label.showSerialNumber",
}

FLAG_FIELDS = ("show_assigned_to", "show_model", "show_hostname", "show_serial_number")


def parse_settings(values: Mapping[str, str]) -> LabelSettings:
    """
    Build label settings from stored key/value pairs.

    Args:
        values: Stored settings keyed by full key (``label.showModel``)

    Returns:
        Parsed settings with defaults applied
    """
    parsed = {
        "printer_name": values.get(SETTING_KEYS["printer_name"]) or settings.LABEL_DEFAULT_PRINTER
    }
    for field in FLAG_FIELDS:
        parsed[field] = values.get(SETTING_KEYS[field]) != "false"
    return LabelSettings(**parsed)


def settings_to_key_value(update: LabelSettingsUpdate) -> Dict[str, str]:
    """
    Convert the provided fields of an update into stored key/value pairs.

    Booleans are stored as ``"true"``/``"false"``; unset fields are omitted.
    """
    result: Dict[str, str] = {}
    for field, value in update.model_dump(exclude_none=True).items():
        key = SETTING_KEYS[field]
        result[key] = str(value).lower() if isinstance(value, bool) else str(value)
    return result


def apply_overrides(base: LabelSettings, overrides: Optional[LabelOverrides]) -> LabelSettings:
    """Return ``base`` with any explicitly given display flags replaced."""
    if overrides is None:
        return base
    changes = overrides.model_dump(include=set(LabelOverrides.model_fields), exclude_none=True)
    return base.model_copy(update=changes)


class LabelSettingsService:
    """
    Service reading and writing label preferences.
    """

    def __init__(self, session: Session):
        self.session = session
        self.repository = SettingsRepository(session)

    def _stored_values(self) -> Dict[str, str]:
        return {s.key: s.value for s in self.repository.get_by_prefix(LABEL_PREFIX)}

    def get_settings(self) -> LabelSettings:
        return parse_settings(self._stored_values())

    def get_organization_name(self) -> Optional[str]:
        return self.repository.get_value(ORGANIZATION_KEY) or None

    def update_settings(self, update: LabelSettingsUpdate) -> LabelSettings:
        """
        Store the provided label preferences.

        Args:
            update: Fields to change

        Returns:
            The settings after the update
        """
        values = settings_to_key_value(update)
        if values:
            self.repository.upsert_many(values)
            logger.info(f"Updated label settings: {sorted(values)}")
        return self.get_settings()

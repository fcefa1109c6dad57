# File: asset_admin/services/row_validator.py
"""
Validation and normalization of a single import row.

``RowValidator.validate`` turns a raw mapping produced by a source adapter into
a ``NormalizedRow`` or raises a ``RowValidationException`` subclass. Nothing in
this module touches the database.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from openpyxl.utils.datetime import from_excel

from asset_admin.core.exceptions import InvalidEnumException, MissingKeyException
from asset_admin.db.models.enums import AssetCondition, AssetStatus
from asset_admin.services.asset_columns import DATE_FIELDS, LOOKUP_FIELDS

logger = logging.getLogger(__name__)

# Plain text columns copied onto the asset (trimmed, blank -> None)
TEXT_FIELDS = (
    "serial_number",
    "model",
    "description",
    "order_number",
    "hostname",
    "device_username",
    "device_password",
    "lan_mac_address",
    "wlan_mac_address",
    "assigned_to",
    "comments",
)

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d/%m/%y",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)

_PRICE_PATTERN = re.compile(
    r"^(?:[A-Za-z]{1,3}\.?|[^\w\s.,-])?\s*"
    r"(?P<amount>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)"
    r"\s*(?:[A-Za-z]{1,3}|[^\w\s.,-])?$"
)
_IP_SEPARATORS = re.compile(r"[,;\s]+")


@dataclass
class NormalizedRow:
    """
    A validated import row.

    Attributes:
        item_number: Trimmed business key
        status: Canonical status label, or None when the cell was blank
        condition: Canonical condition label, or None when the cell was blank
        values: Asset column values, blank inputs already mapped to None
        lookups: Reference names keyed by lookup field, trimmed or None
        ip_addresses: Ordered, de-duplicated IP addresses
    """

    item_number: str
    status: Optional[str] = None
    condition: Optional[str] = None
    values: Dict[str, Any] = field(default_factory=dict)
    lookups: Dict[str, Optional[str]] = field(default_factory=dict)
    ip_addresses: List[str] = field(default_factory=list)


def clean_text(value) -> Optional[str]:
    """Trim a scalar to text; empty results become None."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def parse_date(value) -> Optional[date]:
    """
    Parse a calendar date.

    Native dates pass through, spreadsheet serial numbers are converted and
    strings are tried as ISO first, then against ``DATE_FORMATS``.

    Returns:
        The date, or None when the value is blank or unparsable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        try:
            converted = from_excel(value)
        except (ValueError, OverflowError, TypeError):
            return None
        return converted.date() if isinstance(converted, datetime) else None

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparsable date value: {text!r}")
    return None


def parse_price(value) -> Optional[Decimal]:
    """
    Parse a purchase price into a Decimal.

    Strings may carry one leading or trailing currency symbol or code and
    comma thousands separators. Any other text, a sign or a negative value
    makes the price unparsable.

    Returns:
        The price, or None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        match = _PRICE_PATTERN.match(str(value).strip())
        if match is None:
            return None
        try:
            amount = Decimal(match.group("amount").replace(",", ""))
        except InvalidOperation:
            return None

    if not amount.is_finite() or amount < 0:
        return None
    return amount


def parse_ip_addresses(value) -> List[str]:
    """Split an IP address cell on commas, semicolons or whitespace."""
    text = clean_text(value)
    if text is None:
        return []
    return list(dict.fromkeys(part for part in _IP_SEPARATORS.split(text) if part))


def match_status(raw: str) -> Optional[str]:
    lowered = raw.lower()
    for label in AssetStatus.labels():
        if label.lower() == lowered:
            return label
    return None


def match_condition(raw: str) -> Optional[str]:
    upper = raw.upper()
    return upper if upper in AssetCondition.labels() else None


class RowValidator:
    """
    Validates raw import rows against the asset schema.
    """

    def validate(self, row: Mapping[str, Any]) -> NormalizedRow:
        """
        Validate and normalize one raw row.

        Args:
            row: Field key to raw value mapping from a source adapter

        Returns:
            The normalized row

        Raises:
            MissingKeyException: If the item number is blank
            InvalidEnumException: If status or condition is not a known label
        """
        item_number = clean_text(row.get("item_number"))
        if item_number is None:
            raise MissingKeyException()

        normalized = NormalizedRow(item_number=item_number)

        status_input = clean_text(row.get("status"))
        if status_input is not None:
            normalized.status = match_status(status_input)
            if normalized.status is None:
                raise InvalidEnumException("status", status_input, AssetStatus.labels())

        condition_input = clean_text(row.get("condition"))
        if condition_input is not None:
            normalized.condition = match_condition(condition_input)
            if normalized.condition is None:
                raise InvalidEnumException(
                    "condition", condition_input, AssetCondition.labels()
                )

        for key in TEXT_FIELDS:
            normalized.values[key] = clean_text(row.get(key))
        for key in DATE_FIELDS:
            normalized.values[key] = parse_date(row.get(key))
        normalized.values["purchase_price"] = parse_price(row.get("purchase_price"))

        for key in LOOKUP_FIELDS:
            normalized.lookups[key] = clean_text(row.get(key))

        normalized.ip_addresses = parse_ip_addresses(row.get("ip_address"))
        return normalized

# File: asset_admin/services/asset_columns.py
"""
Fixed column schema shared by the import template, the importer and the export.

The order of ``ASSET_COLUMNS`` is the order of the spreadsheet columns. Header
matching for uploaded files is fuzzy: the header text is lower-cased, stripped
of everything but letters and tested against ``HEADER_RULES`` in order; the
first rule with a matching substring decides the field.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from openpyxl.utils import get_column_letter

TEXT = "text"
DATE = "date"
PRICE = "price"


@dataclass(frozen=True)
class AssetColumn:
    key: str
    header: str
    width: int
    kind: str = TEXT
    lookup: bool = False

    @property
    def letter(self) -> str:
        return get_column_letter(ASSET_COLUMNS.index(self) + 1)


ASSET_COLUMNS: Tuple[AssetColumn, ...] = (
    AssetColumn("item_number", "Item Number *", 15),
    AssetColumn("serial_number", "Serial Number", 18),
    AssetColumn("manufacturer", "Manufacturer", 20, lookup=True),
    AssetColumn("model", "Model", 20),
    AssetColumn("category", "Category", 18, lookup=True),
    AssetColumn("description", "Description", 30),
    AssetColumn("status", "Status", 12),
    AssetColumn("condition", "Condition", 12),
    AssetColumn("acquired_date", "Acquired Date", 14, kind=DATE),
    AssetColumn("purchase_price", "Purchase Price", 14, kind=PRICE),
    AssetColumn("supplier", "Supplier", 20, lookup=True),
    AssetColumn("order_number", "Order Number", 15),
    AssetColumn("hostname", "Hostname", 18),
    AssetColumn("device_username", "Device Username", 16),
    AssetColumn("device_password", "Device Password", 16),
    AssetColumn("lan_mac_address", "LAN MAC", 18),
    AssetColumn("wlan_mac_address", "WLAN MAC", 18),
    AssetColumn("ip_address", "IP Address", 15),
    AssetColumn("assigned_to", "Assigned To", 20),
    AssetColumn("location", "Location", 20, lookup=True),
    AssetColumn("warranty_expiration", "Warranty Expiration", 18, kind=DATE),
    AssetColumn("end_of_life_date", "End of Life Date", 16, kind=DATE),
    AssetColumn("comments", "Comments", 30),
)

COLUMNS_BY_KEY: Dict[str, AssetColumn] = {column.key: column for column in ASSET_COLUMNS}

DATE_FIELDS = tuple(c.key for c in ASSET_COLUMNS if c.kind == DATE)
LOOKUP_FIELDS = tuple(c.key for c in ASSET_COLUMNS if c.lookup)

# (field key, substrings); evaluated in order, first hit wins.
# "wlanmac" contains "lanmac", so the WLAN rule is checked first.
HEADER_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("item_number", ("itemnumber",)),
    ("serial_number", ("serialnumber",)),
    ("manufacturer", ("manufacturer",)),
    ("model", ("model",)),
    ("category", ("category",)),
    ("description", ("description",)),
    ("status", ("status",)),
    ("condition", ("condition",)),
    ("acquired_date", ("acquireddate", "acquired")),
    ("purchase_price", ("purchaseprice", "price")),
    ("supplier", ("supplier",)),
    ("order_number", ("ordernumber", "order")),
    ("hostname", ("hostname",)),
    ("device_username", ("deviceusername", "username")),
    ("device_password", ("devicepassword", "password")),
    ("wlan_mac_address", ("wlanmac",)),
    ("lan_mac_address", ("lanmac",)),
    ("ip_address", ("ipaddress",)),
    ("assigned_to", ("assignedto", "assigned")),
    ("location", ("location",)),
    ("warranty_expiration", ("warrantyexpiration", "warranty")),
    ("end_of_life_date", ("endoflife", "eol")),
    ("comments", ("comments", "notes")),
)

_NON_LETTERS = re.compile(r"[^a-z]")


def normalize_header(header) -> str:
    """Lower-case a header cell and strip every non-letter character."""
    if header is None:
        return ""
    return _NON_LETTERS.sub("", str(header).lower())


def match_header(header) -> Optional[str]:
    """
    Map a header cell to a field key.

    Args:
        header: Raw header text from the uploaded file

    Returns:
        The field key of the first matching rule, or None when nothing matches
    """
    normalized = normalize_header(header)
    if not normalized:
        return None
    if normalized == "ip":
        return "ip_address"
    for key, needles in HEADER_RULES:
        if any(needle in normalized for needle in needles):
            return key
    return None


def build_column_map(headers: List) -> Dict[str, int]:
    """
    Build a field key to 0-based column index map from a header row.

    When several headers map to the same field the right-most one wins.
    """
    column_map: Dict[str, int] = {}
    for index, header in enumerate(headers):
        key = match_header(header)
        if key is not None:
            column_map[key] = index
    return column_map


# File: asset_admin/services/workbook_service.py
"""
Spreadsheet rendering for the asset import template and the full export.

The template is built directly with openpyxl so it can carry list validations
backed by a hidden ``Lookups`` sheet. The export is assembled as a pandas
DataFrame and written through the openpyxl engine, then styled in place.
"""

import io
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.datavalidation import DataValidation
from sqlalchemy.orm import Session

from asset_admin.core.config import settings
from asset_admin.db.models import Asset
from asset_admin.db.models.enums import AssetCondition, AssetStatus
from asset_admin.repositories import (
    AssetRepository,
    CategoryRepository,
    LocationRepository,
    ManufacturerRepository,
    SupplierRepository,
)
from asset_admin.services.asset_columns import ASSET_COLUMNS, COLUMNS_BY_KEY, DATE, PRICE

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
TEMPLATE_FILENAME = "asset-import-template.xlsx"
LOOKUPS_SHEET = "Lookups"
README_SHEET = "README"

DATE_FORMAT = "yyyy-mm-dd"
PRICE_FORMAT = "#,##0.00"
HEADER_COLOR = "FF4472C4"

HEADER_FONT = Font(bold=True, color="FFFFFFFF")
HEADER_FILL = PatternFill(fill_type="solid", fgColor=HEADER_COLOR)
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

# Field key -> column of the hidden Lookups sheet
LOOKUP_SHEET_COLUMNS = {
    "manufacturer": "A",
    "category": "B",
    "supplier": "C",
    "location": "D",
    "status": "E",
    "condition": "F",
}


def export_filename(on: Optional[date] = None) -> str:
    return f"assets-export-{(on or date.today()).isoformat()}.xlsx"


def _readme_lines(max_rows: int) -> List[str]:
    return [
        "Asset Import Template - Instructions",
        "",
        "GETTING STARTED",
        f'1. Go to the "{settings.IMPORT_SHEET_NAME}" sheet to enter your asset data',
        "2. Fill in one asset per row, starting from row 2 (row 1 has headers)",
        "3. Save the file and upload it in Settings > Data Import / Export",
        "",
        "REQUIRED FIELDS",
        "- Item Number: Must be unique for each asset (marked with *)",
        "",
        "DROPDOWN FIELDS (click cell to see options)",
        f"- Status: {', '.join(AssetStatus.labels())}",
        f"- Condition: {', '.join(AssetCondition.labels())}",
        "- Manufacturer: Select from existing or type new (will be created)",
        "- Category: Select from existing or type new (will be created)",
        "- Supplier: Select from existing or type new (will be created)",
        "- Location: Select from existing or type new (will be created)",
        "",
        "DATE FIELDS (use format: YYYY-MM-DD)",
        "- Acquired Date: When the asset was purchased/acquired",
        "- Warranty Expiration: When warranty expires",
        "- End of Life Date: Planned end of life for the asset",
        "",
        "IMPORT OPTIONS (in the web application)",
        "- Skip duplicates: Skip rows where Item Number already exists",
        "- Update existing: Update existing assets that match by Item Number",
        "- Default (neither checked): Error on duplicate Item Numbers",
        "",
        "TIPS",
        f"- Dropdowns are provided for the first {max_rows - 1} data rows",
        "- New manufacturers, categories, suppliers, and locations are created automatically",
        "- Separate multiple IP addresses with commas",
        "- Leave optional fields blank if not applicable",
        "- The Purchase Price field accepts numbers (e.g., 1234.56)",
    ]


def style_header_row(worksheet) -> None:
    """Apply the header styling, column widths and a frozen first row."""
    for index, column in enumerate(ASSET_COLUMNS, start=1):
        cell = worksheet.cell(row=1, column=index)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        worksheet.column_dimensions[column.letter].width = column.width
    worksheet.row_dimensions[1].height = 20
    worksheet.freeze_panes = "A2"


def apply_number_formats(worksheet, first_row: int, last_row: int) -> None:
    """Set date and price number formats on the typed columns."""
    typed_columns = [c for c in ASSET_COLUMNS if c.kind in (DATE, PRICE)]
    for column in typed_columns:
        number_format = DATE_FORMAT if column.kind == DATE else PRICE_FORMAT
        for row in range(first_row, last_row + 1):
            worksheet[f"{column.letter}{row}"].number_format = number_format


class WorkbookService:
    """
    Service building the import template and the asset export workbooks.
    """

    def __init__(self, session: Session):
        self.session = session
        self.asset_repository = AssetRepository(session)
        self.lookup_repositories = {
            "manufacturer": ManufacturerRepository(session),
            "category": CategoryRepository(session),
            "supplier": SupplierRepository(session),
            "location": LocationRepository(session),
        }

    def build_template(self, max_rows: Optional[int] = None) -> bytes:
        """
        Build the import template workbook.

        The data sheet comes first so it opens active, followed by a README
        sheet and a hidden sheet holding the dropdown values. Reference-entity
        dropdowns are only added when their list is non-empty.

        Args:
            max_rows: Last worksheet row carrying validations and formats

        Returns:
            The ``.xlsx`` document as bytes
        """
        max_rows = max_rows or settings.IMPORT_TEMPLATE_MAX_ROWS

        lookup_values: Dict[str, List[str]] = {
            field: repository.list_names()
            for field, repository in self.lookup_repositories.items()
        }
        lookup_values["status"] = AssetStatus.labels()
        lookup_values["condition"] = AssetCondition.labels()

        workbook = Workbook()
        data_sheet = workbook.active
        data_sheet.title = settings.IMPORT_SHEET_NAME
        data_sheet.append([column.header for column in ASSET_COLUMNS])
        style_header_row(data_sheet)

        readme_sheet = workbook.create_sheet(README_SHEET)
        readme_sheet.column_dimensions["A"].width = 80
        for index, line in enumerate(_readme_lines(max_rows), start=1):
            cell = readme_sheet.cell(row=index, column=1, value=line)
            if index == 1:
                cell.font = Font(bold=True, size=14, color=HEADER_COLOR)
            elif line[:1].isupper():
                cell.font = Font(bold=True)

        lookups_sheet = workbook.create_sheet(LOOKUPS_SHEET)
        lookups_sheet.sheet_state = "hidden"
        headings = {
            "manufacturer": "Manufacturers",
            "category": "Categories",
            "supplier": "Suppliers",
            "location": "Locations",
            "status": "Status",
            "condition": "Condition",
        }
        for field, sheet_column in LOOKUP_SHEET_COLUMNS.items():
            values = lookup_values[field]
            lookups_sheet[f"{sheet_column}1"] = headings[field]
            for offset, value in enumerate(values, start=2):
                lookups_sheet[f"{sheet_column}{offset}"] = value

            if not values:
                continue
            validation = DataValidation(
                type="list",
                formula1=f"{LOOKUPS_SHEET}!${sheet_column}$2:${sheet_column}${len(values) + 1}",
                allow_blank=True,
                showErrorMessage=True,
            )
            target = COLUMNS_BY_KEY[field].letter
            validation.add(f"{target}2:{target}{max_rows}")
            data_sheet.add_data_validation(validation)

        apply_number_formats(data_sheet, 2, max_rows)

        output = io.BytesIO()
        workbook.save(output)
        logger.info(
            "Built import template with "
            + ", ".join(f"{len(v)} {k}" for k, v in lookup_values.items())
        )
        return output.getvalue()

    def export_row(self, asset: Asset) -> Dict[str, Any]:
        """Flatten an asset into export values keyed by column header."""
        values = {
            "item_number": asset.item_number,
            "serial_number": asset.serial_number,
            "manufacturer": asset.manufacturer.name if asset.manufacturer else None,
            "model": asset.model,
            "category": asset.category.name if asset.category else None,
            "description": asset.description,
            "status": asset.status,
            "condition": asset.condition,
            "acquired_date": asset.acquired_date,
            "purchase_price": float(asset.purchase_price) if asset.purchase_price is not None else None,
            "supplier": asset.supplier.name if asset.supplier else None,
            "order_number": asset.order_number,
            "hostname": asset.hostname,
            "device_username": asset.device_username,
            "device_password": asset.device_password,
            "lan_mac_address": asset.lan_mac_address,
            "wlan_mac_address": asset.wlan_mac_address,
            "ip_address": ", ".join(asset.ip_list()) or None,
            "assigned_to": asset.assigned_to,
            "location": asset.location.name if asset.location else None,
            "warranty_expiration": asset.warranty_expiration,
            "end_of_life_date": asset.end_of_life_date,
            "comments": asset.comments,
        }
        return {column.header: values[column.key] for column in ASSET_COLUMNS}

    def build_export(self) -> bytes:
        """
        Export every asset, ordered by item number, to a single-sheet workbook.

        Returns:
            The ``.xlsx`` document as bytes
        """
        assets = self.asset_repository.list_for_export()
        frame = pd.DataFrame(
            [self.export_row(asset) for asset in assets],
            columns=[column.header for column in ASSET_COLUMNS],
        )

        output = io.BytesIO()
        sheet_name = settings.EXPORT_SHEET_NAME
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            frame.to_excel(writer, index=False, sheet_name=sheet_name)
            worksheet = writer.sheets[sheet_name]
            style_header_row(worksheet)
            if len(frame):
                apply_number_formats(worksheet, 2, len(frame) + 1)

        logger.info(f"Exported {len(frame)} assets")
        return output.getvalue()

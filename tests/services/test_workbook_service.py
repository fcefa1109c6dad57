# tests/services/test_workbook_service.py
import io
from datetime import date, datetime
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from asset_admin.db.models import AssetIPAddress, Category, Manufacturer
from asset_admin.services.asset_columns import ASSET_COLUMNS
from asset_admin.services.workbook_service import WorkbookService, export_filename


@pytest.fixture()
def service(db_session):
    return WorkbookService(db_session)


def validations_by_range(sheet):
    return {str(dv.sqref): dv.formula1 for dv in sheet.data_validations.dataValidation}


def test_template_layout(service):
    workbook = load_workbook(io.BytesIO(service.build_template(max_rows=50)))

    assert workbook.sheetnames == ["Asset Import", "README", "Lookups"]
    assert workbook["Lookups"].sheet_state == "hidden"

    data_sheet = workbook["Asset Import"]
    headers = [cell.value for cell in data_sheet[1]]
    assert headers == [column.header for column in ASSET_COLUMNS]
    assert data_sheet.freeze_panes == "A2"
    assert data_sheet["A1"].font.bold
    assert data_sheet["A1"].alignment.vertical == "center"
    assert data_sheet["I2"].number_format == "yyyy-mm-dd"
    assert data_sheet["J50"].number_format == "#,##0.00"

    readme = workbook["README"]
    assert readme["A1"].value == "Asset Import Template - Instructions"


def test_template_dropdowns_skip_empty_lookup_lists(service, db_session):
    db_session.add_all([Manufacturer(name="Lenovo"), Manufacturer(name="Dell")])
    db_session.commit()

    workbook = load_workbook(io.BytesIO(service.build_template(max_rows=50)))
    validations = validations_by_range(workbook["Asset Import"])

    assert validations["C2:C50"] == "Lookups!$A$2:$A$3"
    assert validations["G2:G50"] == "Lookups!$E$2:$E$16"
    assert validations["H2:H50"] == "Lookups!$F$2:$F$6"
    assert "E2:E50" not in validations

    lookups = workbook["Lookups"]
    assert [lookups["A2"].value, lookups["A3"].value] == ["Dell", "Lenovo"]
    assert lookups["E2"].value == "In Use"
    assert lookups["F6"].value == "DAMAGED"


def test_export_rows_are_ordered_by_item_number(service, make_asset):
    make_asset("B-2", model="X1")
    first = make_asset(
        "A-1",
        manufacturer="Dell",
        category="Laptop",
        model="Latitude",
        purchase_price=Decimal("899.50"),
        acquired_date=date(2024, 3, 15),
    )
    first.ip_addresses.extend(
        [AssetIPAddress(ip="10.0.0.1", position=0), AssetIPAddress(ip="10.0.0.2", position=1)]
    )
    service.session.commit()

    workbook = load_workbook(io.BytesIO(service.build_export()))
    sheet = workbook["Assets"]
    rows = list(sheet.iter_rows(values_only=True))
    headers = list(rows[0])
    column = {header: index for index, header in enumerate(headers)}

    assert headers == [c.header for c in ASSET_COLUMNS]
    assert [row[0] for row in rows[1:]] == ["A-1", "B-2"]
    exported = rows[1]
    assert exported[column["Manufacturer"]] == "Dell"
    assert exported[column["Category"]] == "Laptop"
    assert exported[column["IP Address"]] == "10.0.0.1, 10.0.0.2"
    assert exported[column["Purchase Price"]] == pytest.approx(899.5)
    acquired = exported[column["Acquired Date"]]
    assert (acquired.date() if isinstance(acquired, datetime) else acquired) == date(2024, 3, 15)
    assert exported[column["Status"]] == "In Use"
    assert rows[2][column["Manufacturer"]] in (None, "")


def test_export_without_assets_has_only_headers(service):
    workbook = load_workbook(io.BytesIO(service.build_export()))
    rows = list(workbook["Assets"].iter_rows(values_only=True))
    assert len(rows) == 1


def test_export_filename():
    assert export_filename(date(2024, 1, 2)) == "assets-export-2024-01-02.xlsx"

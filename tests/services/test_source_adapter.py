# tests/services/test_source_adapter.py
import io
from datetime import date, datetime

import pytest
from openpyxl import Workbook, load_workbook

from asset_admin.services.asset_columns import ASSET_COLUMNS, build_column_map, match_header
from asset_admin.services.row_validator import RowValidator
from asset_admin.services.source_adapter import (
    XLSX_CONTENT_TYPE,
    CellKind,
    CellValue,
    DelimitedTextSourceAdapter,
    SpreadsheetSourceAdapter,
    select_adapter,
)
from asset_admin.services.workbook_service import WorkbookService


def make_workbook(rows, title="Asset Import", extra_first_sheet=None):
    workbook = Workbook()
    sheet = workbook.active
    if extra_first_sheet:
        sheet.title = extra_first_sheet
        sheet.append(["Item Number", "Model"])
        sheet.append(["WRONG-SHEET", "Nope"])
        sheet = workbook.create_sheet(title)
    else:
        sheet.title = title
    for row in rows:
        sheet.append(row)
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Item Number *", "item_number"),
        ("WLAN MAC", "wlan_mac_address"),
        ("wlan-mac address", "wlan_mac_address"),
        ("LAN MAC", "lan_mac_address"),
        ("IP", "ip_address"),
        ("IP Addresses", "ip_address"),
        ("Notes", "comments"),
        ("Purchase Price (GBP)", "purchase_price"),
        ("Purchase Order", "order_number"),
        ("EOL", "end_of_life_date"),
        ("Username", "device_username"),
        ("Something else", None),
        (None, None),
    ],
)
def test_match_header(header, expected):
    assert match_header(header) == expected


def test_every_template_header_maps_to_its_own_field():
    column_map = build_column_map([column.header for column in ASSET_COLUMNS])
    assert column_map == {column.key: index for index, column in enumerate(ASSET_COLUMNS)}


def test_rightmost_duplicate_header_wins():
    assert build_column_map(["Item Number", "Notes", "Comments"]) == {
        "item_number": 0,
        "comments": 2,
    }


def test_cell_value_decode():
    assert CellValue.decode(None).kind is CellKind.EMPTY
    assert CellValue.decode("   ").kind is CellKind.EMPTY
    assert CellValue.decode(42).kind is CellKind.NUMBER
    assert CellValue.decode(True).kind is CellKind.TEXT
    assert CellValue.decode(datetime(2024, 1, 2)).kind is CellKind.DATE
    assert CellValue.decode(7, is_formula=True) == CellValue(CellKind.FORMULA_RESULT, 7)


def test_cell_value_as_text():
    assert CellValue.decode(1001.0).as_text() == "1001"
    assert CellValue.decode(datetime(2024, 1, 2)).as_text() == "2024-01-02"
    assert CellValue.decode(datetime(2024, 1, 2, 8, 15)).as_text() == "2024-01-02T08:15:00"
    assert CellValue.decode(" abc ").as_text() == "abc"
    assert CellValue.decode(None).as_text() == ""


def test_csv_reader_tolerates_bom_and_blank_lines():
    content = (
        "\ufeffItem Number,Model,IP Address\r\n"
        "\r\n"
        "A-1,T14,10.0.0.1\r\n"
        ",,\r\n"
        "A-2,X1,\r\n"
    ).encode("utf-8")

    rows = DelimitedTextSourceAdapter().read(content)

    assert rows == [
        {"item_number": "A-1", "model": "T14", "ip_address": "10.0.0.1"},
        {"item_number": "A-2", "model": "X1", "ip_address": ""},
    ]


def test_csv_reader_keeps_rows_without_item_number():
    content = b"Item Number,Model\n,Orphan\nA-1,T14\n"
    rows = DelimitedTextSourceAdapter().read(content)
    assert [row["item_number"] for row in rows] == ["", "A-1"]


def test_csv_short_rows_are_padded():
    rows = DelimitedTextSourceAdapter().read(b"Item Number,Model,Hostname\nA-1\n")
    assert rows == [{"item_number": "A-1", "model": "", "hostname": ""}]


def test_spreadsheet_reader_prefers_named_sheet():
    content = make_workbook(
        [["Item Number", "Model"], ["A-1", "T14"]], extra_first_sheet="Notes"
    )
    rows = SpreadsheetSourceAdapter().read(content)
    assert rows == [{"item_number": "A-1", "model": "T14"}]


def test_spreadsheet_reader_falls_back_to_first_sheet():
    content = make_workbook([["Item Number", "Model"], ["A-1", "T14"]], title="Sheet1")
    rows = SpreadsheetSourceAdapter().read(content)
    assert rows == [{"item_number": "A-1", "model": "T14"}]


def test_spreadsheet_reader_drops_rows_without_item_number_and_keeps_native_dates():
    content = make_workbook(
        [
            ["Item Number", "Acquired Date", "Purchase Price", "Serial Number"],
            [1001, datetime(2024, 3, 15), 899.5, 123456],
            [None, datetime(2024, 3, 16), 10, "SN"],
        ]
    )

    rows = SpreadsheetSourceAdapter().read(content)

    assert len(rows) == 1
    row = rows[0]
    assert row["item_number"] == "1001"
    assert row["serial_number"] == "123456"
    assert row["acquired_date"] == datetime(2024, 3, 15)
    assert row["purchase_price"] == 899.5


def test_csv_and_spreadsheet_rows_validate_identically():
    headers = ["Item Number", "Manufacturer", "Acquired Date", "Purchase Price", "IP Address", "Status"]
    csv_content = (
        "Item Number,Manufacturer,Acquired Date,Purchase Price,IP Address,Status\n"
        "1001,Dell,2024-03-15,899.5,\"10.0.0.1, 10.0.0.2\",in use\n"
    ).encode("utf-8")
    xlsx_content = make_workbook(
        [headers, [1001, "Dell", datetime(2024, 3, 15), 899.5, "10.0.0.1, 10.0.0.2", "in use"]]
    )

    validator = RowValidator()
    from_csv = validator.validate(DelimitedTextSourceAdapter().read(csv_content)[0])
    from_xlsx = validator.validate(SpreadsheetSourceAdapter().read(xlsx_content)[0])

    assert from_csv == from_xlsx
    assert from_csv.values["acquired_date"] == date(2024, 3, 15)
    assert from_csv.status == "In Use"


def test_filled_template_round_trips(db_session):
    template = WorkbookService(db_session).build_template(max_rows=10)
    workbook = load_workbook(io.BytesIO(template))
    sheet = workbook["Asset Import"]
    for index, column in enumerate(ASSET_COLUMNS, start=1):
        sheet.cell(row=2, column=index, value=f"value-{column.key}")
    sheet.cell(row=2, column=1, value="RT-1")
    output = io.BytesIO()
    workbook.save(output)

    rows = SpreadsheetSourceAdapter().read(output.getvalue())

    assert len(rows) == 1
    assert set(rows[0]) == {column.key for column in ASSET_COLUMNS}
    assert rows[0]["item_number"] == "RT-1"
    assert rows[0]["hostname"] == "value-hostname"


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("assets.xlsx", None, SpreadsheetSourceAdapter),
        ("ASSETS.XLSX", "application/octet-stream", SpreadsheetSourceAdapter),
        ("upload", XLSX_CONTENT_TYPE, SpreadsheetSourceAdapter),
        ("assets.csv", "text/csv", DelimitedTextSourceAdapter),
        (None, None, DelimitedTextSourceAdapter),
    ],
)
def test_select_adapter(filename, content_type, expected):
    assert isinstance(select_adapter(filename, content_type), expected)

# tests/services/test_label_service.py
import io

import pytest
from PIL import Image

from asset_admin.core.exceptions import (
    EntityNotFoundException,
    LabelRenderException,
    PrintException,
)
from asset_admin.db.models import Setting
from asset_admin.schemas.label import (
    LabelBatchPrintRequest,
    LabelOverrides,
    LabelPrintRequest,
    LabelSettings,
)
from asset_admin.services.label_service import (
    LabelAsset,
    LabelRenderer,
    LabelService,
    build_qr_content,
    text_lines,
    truncate_text,
)


class FakePrinter:
    def __init__(self, fail_on_call=None):
        self.jobs = []
        self.fail_on_call = fail_on_call

    def print_pdf(self, pdf_bytes, printer_name, copies=1):
        self.jobs.append((printer_name, copies, pdf_bytes[:4]))
        if self.fail_on_call == len(self.jobs):
            raise PrintException("Print failed: paper jam", printer_name)

    def list_printers(self):
        return ["QL-500"]


def label_settings(**flags):
    return LabelSettings(printer_name="QL-500", **flags)


@pytest.fixture()
def printer():
    return FakePrinter()


@pytest.fixture()
def service(db_session, printer):
    return LabelService(db_session, renderer=LabelRenderer(dpi=72), printer=printer)


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("abcdefghij", 6) == "abcd.."


def test_model_line_includes_manufacturer():
    assert LabelAsset("A1", model="T14", manufacturer_name="Lenovo").model_line == "Lenovo T14"
    assert LabelAsset("A1", model="T14").model_line == "T14"
    assert LabelAsset("A1", manufacturer_name="Lenovo").model_line is None


def test_qr_content_follows_display_flags():
    asset = LabelAsset(
        "A-100",
        serial_number="SN123",
        model="T14",
        assigned_to="Jo Bloggs",
        manufacturer_name="Lenovo",
        organization_name="Acme School",
    )

    assert build_qr_content(asset, label_settings()) == (
        "Jo Bloggs\nItem: A-100\nLenovo T14\nS/N: SN123\nAcme School"
    )
    assert build_qr_content(asset, label_settings(show_model=False, show_assigned_to=False)) == (
        "Item: A-100\nS/N: SN123\nAcme School"
    )


def test_text_lines_truncate_and_omit_hostname():
    asset = LabelAsset("A-100", hostname="host-01", assigned_to="A very long person name indeed")
    lines = [line[0] for line in text_lines(asset, label_settings())]
    assert lines == ["A very long person..", "Item:A-100"]


@pytest.mark.parametrize("dpi, size", [(72, (176, 82)), (300, (733, 342))])
def test_png_size_follows_dpi(dpi, size):
    png = LabelRenderer(dpi=dpi).render_png(LabelAsset("A-100", model="T14"), label_settings())
    assert png.startswith(b"\x89PNG")
    assert Image.open(io.BytesIO(png)).size == size


def test_pdf_output():
    renderer = LabelRenderer(dpi=72)
    pdf = renderer.render_batch_pdf([LabelAsset("A-1"), LabelAsset("A-2")], label_settings())
    assert pdf.startswith(b"%PDF")


def test_empty_batch_cannot_be_rendered():
    with pytest.raises(LabelRenderException):
        LabelRenderer(dpi=72).render_batch_pdf([], label_settings())


def test_preview_of_unknown_asset(service):
    with pytest.raises(EntityNotFoundException):
        service.preview_png(999)


def test_preview_png(service, make_asset):
    asset = make_asset("A-1", manufacturer="Dell", model="Latitude")
    assert service.preview_png(asset.id, LabelOverrides(showModel=False)).startswith(b"\x89PNG")


def test_download_pdf(service, make_asset):
    asset = make_asset("A-1")
    filename, content = service.download_pdf(asset.id)
    assert filename == "label-A-1.pdf"
    assert content.startswith(b"%PDF")


def test_download_batch_ignores_unknown_ids(service, make_asset):
    first = make_asset("A-1")
    second = make_asset("A-2")

    filename, content = service.download_batch_pdf([second.id, 999, first.id])

    assert filename == "labels-batch-2.pdf"
    assert content.startswith(b"%PDF")


def test_download_batch_without_known_ids(service):
    with pytest.raises(EntityNotFoundException):
        service.download_batch_pdf([998, 999])


def test_print_label_uses_stored_printer(service, printer, make_asset, db_session):
    db_session.add(Setting(key="label.printerName", value="Office_QL"))
    db_session.commit()
    asset = make_asset("A-1")

    result = service.print_label(asset.id, LabelPrintRequest(copies=2))

    assert result == {"success": True, "message": "Printed 2 label(s) for A-1"}
    assert printer.jobs == [("Office_QL", 2, b"%PDF")]


def test_print_batch_counts_missing_assets(service, printer, make_asset):
    asset = make_asset("A-1")

    result = service.print_batch(LabelBatchPrintRequest(assetIds=[asset.id, 404]))

    assert result == {
        "success": False,
        "printed": 1,
        "failed": 1,
        "errors": ["Assets not found: 1"],
    }
    assert len(printer.jobs) == 1


def test_print_batch_collects_printer_failures(db_session, make_asset):
    failing_printer = FakePrinter(fail_on_call=2)
    service = LabelService(db_session, renderer=LabelRenderer(dpi=72), printer=failing_printer)
    ids = [make_asset(f"A-{i}").id for i in range(3)]

    result = service.print_batch(LabelBatchPrintRequest(assetIds=ids))

    assert result["printed"] == 2
    assert result["failed"] == 1
    assert result["errors"] == ["A-1: Print failed: paper jam"]
    assert result["success"] is False


def test_print_batch_all_succeed(service, make_asset):
    ids = [make_asset("A-1").id, make_asset("A-2").id]
    result = service.print_batch(LabelBatchPrintRequest(assetIds=ids, copies=1))
    assert result == {"success": True, "printed": 2, "failed": 0, "errors": None}

# tests/services/test_label_printer.py
import subprocess

import pytest

from asset_admin.core.exceptions import PrintException
from asset_admin.services.label_printer import LabelPrinter


class FakeRun:
    def __init__(self, returncode=0, stdout="", stderr=b"", error=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.error = error
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


def test_print_submits_one_job_per_copy(monkeypatch):
    fake_run = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake_run)

    LabelPrinter(print_command="lp").print_pdf(b"%PDF-1.4", "QL-500", copies=3)

    assert len(fake_run.calls) == 3
    args, kwargs = fake_run.calls[0]
    assert args == ["lp", "-d", "QL-500"]
    assert kwargs["input"] == b"%PDF-1.4"


def test_rejected_job_raises(monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeRun(returncode=1, stderr=b"lp: unknown printer"))

    with pytest.raises(PrintException) as exc_info:
        LabelPrinter().print_pdf(b"%PDF", "Missing")
    assert "unknown printer" in exc_info.value.message
    assert exc_info.value.details == {"printer_name": "Missing"}


def test_missing_spooler_raises(monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeRun(error=FileNotFoundError("lp")))

    with pytest.raises(PrintException):
        LabelPrinter().print_pdf(b"%PDF", "QL-500")


def test_list_printers_parses_queue_names(monkeypatch):
    output = (
        "Brother_QL_500 accepting requests since Mon 01 Jan 2024\n"
        "\n"
        "Office_Laser accepting requests since Mon 01 Jan 2024\n"
    )
    fake_run = FakeRun(stdout=output)
    monkeypatch.setattr(subprocess, "run", fake_run)

    assert LabelPrinter(list_command="lpstat").list_printers() == ["Brother_QL_500", "Office_Laser"]
    assert fake_run.calls[0][0] == ["lpstat", "-a"]


def test_list_printers_without_spooler_is_empty(monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeRun(error=FileNotFoundError("lpstat")))
    assert LabelPrinter().list_printers() == []

# tests/api/endpoints/conftest.py
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from asset_admin.api.deps import get_current_user, get_db, get_label_service
from asset_admin.api.endpoints import imports, labels
from asset_admin.core.exceptions import PrintException
from asset_admin.db.models.user import User
from asset_admin.services.label_service import LabelRenderer, LabelService


class FakePrinter:
    """Records print jobs instead of talking to a spooler."""

    def __init__(self):
        self.jobs = []
        self.fail = False

    def print_pdf(self, pdf_bytes, printer_name, copies=1):
        if self.fail:
            raise PrintException("Print failed: printer offline", printer_name)
        self.jobs.append((printer_name, copies))

    def list_printers(self):
        return ["Brother_QL_500", "Office_Laser"]


@pytest.fixture()
def current_user():
    return User(
        id=1,
        email="admin@example.com",
        username="admin",
        is_active=True,
        is_superuser=True,
    )


@pytest.fixture()
def printer():
    return FakePrinter()


@pytest.fixture()
def test_app(session_factory, current_user, printer):
    # Override the database dependency
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def override_get_label_service():
        db = session_factory()
        try:
            yield LabelService(db, renderer=LabelRenderer(dpi=72), printer=printer)
        finally:
            db.close()

    app = FastAPI()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_label_service] = override_get_label_service

    app.include_router(imports.router, prefix="/import", tags=["Import / Export"])
    app.include_router(labels.router, prefix="/labels", tags=["Labels"])
    yield app


@pytest.fixture()
def client(test_app):
    """Get a TestClient instance that reads/writes to the test database."""
    with TestClient(test_app) as client:
        yield client

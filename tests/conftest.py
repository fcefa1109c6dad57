# tests/conftest.py
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from asset_admin.db.models import Base, Category, Location, Manufacturer, Supplier, Asset

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture()
def engine():
    # In-memory database shared by every connection of the test
    test_engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_asset(db_session):
    """Create and commit an asset, resolving reference names to new rows."""

    def _make_asset(item_number, manufacturer=None, category=None, supplier=None, location=None, **fields):
        asset = Asset(item_number=item_number, **fields)
        if manufacturer:
            asset.manufacturer = Manufacturer(name=manufacturer)
        if category:
            asset.category = Category(name=category)
        if supplier:
            asset.supplier = Supplier(name=supplier)
        if location:
            asset.location = Location(name=location)
        db_session.add(asset)
        db_session.commit()
        db_session.refresh(asset)
        return asset

    return _make_asset

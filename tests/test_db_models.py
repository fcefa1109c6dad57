# tests/test_db_models.py
import pytest
from sqlalchemy.exc import IntegrityError

from asset_admin.db.models import Asset, AssetIPAddress, Location, Setting
from asset_admin.repositories import (
    AssetRepository,
    ManufacturerRepository,
    SettingsRepository,
)


def ip_address_count(session):
    return session.query(AssetIPAddress).count()


def test_asset_defaults(db_session):
    asset = Asset(item_number="A-1")
    db_session.add(asset)
    db_session.commit()

    assert asset.status == "In Use"
    assert asset.condition == "GOOD"
    assert asset.uuid
    assert asset.created_at is not None
    assert asset.primary_ip is None


def test_item_number_is_unique(db_session):
    db_session.add(Asset(item_number="A-1"))
    db_session.commit()

    db_session.add(Asset(item_number="A-1"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_item_number_lookup_is_case_sensitive(db_session, make_asset):
    make_asset("abc-1")
    repository = AssetRepository(db_session)
    assert repository.get_by_item_number("abc-1") is not None
    assert repository.get_by_item_number("ABC-1") is None


def test_reference_names_are_unique_ignoring_case(db_session):
    db_session.add(Location(name="Main Office"))
    db_session.commit()

    db_session.add(Location(name="main office"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_get_or_create_by_name(db_session):
    repository = ManufacturerRepository(db_session)

    created_id = repository.get_or_create_by_name("Dell")

    assert repository.get_or_create_by_name("DELL") == created_id
    assert repository.count() == 1
    assert repository.get_by_name("dell").name == "Dell"
    assert repository.list_id_name() == [(created_id, "Dell")]


def test_ip_addresses_keep_order_and_cascade(db_session):
    asset = Asset(item_number="A-1")
    repository = AssetRepository(db_session)
    repository.replace_ip_addresses(asset, ["10.0.0.2", "10.0.0.1"])
    db_session.add(asset)
    db_session.commit()

    assert asset.ip_list() == ["10.0.0.2", "10.0.0.1"]
    assert asset.primary_ip == "10.0.0.2"

    repository.replace_ip_addresses(asset, ["192.168.0.9"])
    db_session.commit()
    assert ip_address_count(db_session) == 1

    db_session.delete(asset)
    db_session.commit()
    assert ip_address_count(db_session) == 0


def test_get_many_with_relations_preserves_order(db_session, make_asset):
    first = make_asset("A-1", manufacturer="Dell")
    second = make_asset("A-2")

    assets = AssetRepository(db_session).get_many_with_relations([second.id, 999, first.id, second.id])

    assert [asset.item_number for asset in assets] == ["A-2", "A-1"]
    assert assets[1].manufacturer.name == "Dell"


def test_settings_upsert_and_prefix(db_session):
    repository = SettingsRepository(db_session)
    repository.upsert_many({"label.showModel": "false", "organization": "Acme"})
    repository.upsert_many({"label.showModel": "true"})

    assert [s.key for s in repository.get_by_prefix("label.")] == ["label.showModel"]
    assert repository.get_value("label.showModel") == "true"
    assert repository.get_value("missing", "fallback") == "fallback"
    assert db_session.query(Setting).count() == 2

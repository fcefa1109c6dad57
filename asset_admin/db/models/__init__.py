"""
Initializes the models package for SQLAlchemy declarative base.

Importing every model here ensures that SQLAlchemy's metadata is populated
with all table definitions when ``Base.metadata.create_all()`` is called.
"""

from asset_admin.db.models.base import Base, AbstractBase, TimestampMixin
from asset_admin.db.models.enums import (
    AssetStatus,
    AssetCondition,
    DEFAULT_STATUS,
    DEFAULT_CONDITION,
)
from asset_admin.db.models.lookups import (
    Manufacturer,
    Category,
    Supplier,
    Location,
    REFERENCE_MODELS,
)
from asset_admin.db.models.asset import Asset, AssetIPAddress
from asset_admin.db.models.settings import Setting
from asset_admin.db.models.user import User

# File: asset_admin/db/models/lookups.py
"""
Reference entity models.

Manufacturers, categories, suppliers and locations are simple named lookup
tables referenced by assets. Names are unique per table, ignoring case.
"""

from sqlalchemy import Column, Index, String, Text, func
from sqlalchemy.orm import relationship

from asset_admin.db.models.base import AbstractBase, TimestampMixin


class ReferenceEntityMixin(TimestampMixin):
    """Columns shared by every lookup table."""

    name = Column(String(255), nullable=False)

    def __repr__(self):
        return f"{self.__class__.__name__}(id={self.id}, name={self.name!r})"


class Manufacturer(AbstractBase, ReferenceEntityMixin):
    __tablename__ = "manufacturers"

    website = Column(String(255))
    support_url = Column(String(255))

    assets = relationship("Asset", back_populates="manufacturer")


class Category(AbstractBase, ReferenceEntityMixin):
    __tablename__ = "categories"

    description = Column(Text)

    assets = relationship("Asset", back_populates="category")


class Supplier(AbstractBase, ReferenceEntityMixin):
    __tablename__ = "suppliers"

    contact_name = Column(String(100))
    email = Column(String(255))
    phone = Column(String(50))

    assets = relationship("Asset", back_populates="supplier")


class Location(AbstractBase, ReferenceEntityMixin):
    __tablename__ = "locations"

    description = Column(Text)

    assets = relationship("Asset", back_populates="location")


REFERENCE_MODELS = (Manufacturer, Category, Supplier, Location)

# Case-insensitive uniqueness on name
for _model in REFERENCE_MODELS:
    Index(
        f"uq_{_model.__tablename__}_name_lower",
        func.lower(_model.__table__.c.name),
        unique=True,
    )

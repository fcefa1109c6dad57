# File: asset_admin/db/models/asset.py
"""
Asset model for the inventory schema.

An asset is a single tracked piece of IT equipment, identified by its item
number. Reference data (manufacturer, category, supplier, location) is held
in lookup tables, and network addresses in a child table so a device can
carry more than one IP.
"""

from typing import List, Optional

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from asset_admin.db.models.base import AbstractBase, TimestampMixin
from asset_admin.db.models.enums import DEFAULT_CONDITION, DEFAULT_STATUS


class Asset(AbstractBase, TimestampMixin):
    """
    Asset model representing a single inventory item.

    Attributes:
        item_number: Business key, unique and immutable once set
        serial_number: Manufacturer serial number
        status: One of the AssetStatus labels
        condition: One of the AssetCondition labels
        purchase_price: Non-negative purchase price
        ip_addresses: Ordered network addresses assigned to the device
    """

    __tablename__ = "assets"
    __table_args__ = (
        Index("idx_asset_serial_number", "serial_number"),
        Index("idx_asset_status", "status"),
    )

    item_number = Column(String(100), nullable=False, unique=True, index=True)
    serial_number = Column(String(255))

    manufacturer_id = Column(Integer, ForeignKey("manufacturers.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=True)

    model = Column(String(255))
    description = Column(Text)
    status = Column(String(50), nullable=False, default=DEFAULT_STATUS.value)
    condition = Column(String(20), nullable=False, default=DEFAULT_CONDITION.value)

    acquired_date = Column(Date)
    purchase_price = Column(Numeric(12, 2))
    order_number = Column(String(100))

    hostname = Column(String(255))
    device_username = Column(String(255))
    device_password = Column(String(255))
    lan_mac_address = Column(String(50))
    wlan_mac_address = Column(String(50))

    assigned_to = Column(String(255))
    warranty_expiration = Column(Date)
    end_of_life_date = Column(Date)
    comments = Column(Text)

    # Relationships
    manufacturer = relationship("Manufacturer", back_populates="assets")
    category = relationship("Category", back_populates="assets")
    supplier = relationship("Supplier", back_populates="assets")
    location = relationship("Location", back_populates="assets")
    ip_addresses = relationship(
        "AssetIPAddress",
        back_populates="asset",
        cascade="all, delete-orphan",
        order_by="AssetIPAddress.position",
    )

    @property
    def primary_ip(self) -> Optional[str]:
        return self.ip_addresses[0].ip if self.ip_addresses else None

    def ip_list(self) -> List[str]:
        return [entry.ip for entry in self.ip_addresses]

    def __repr__(self):
        return f"Asset(id={self.id}, item_number={self.item_number!r})"


class AssetIPAddress(AbstractBase):
    """A single IP address assigned to an asset."""

    __tablename__ = "asset_ip_addresses"

    asset_id = Column(
        Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ip = Column(String(64), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    asset = relationship("Asset", back_populates="ip_addresses")

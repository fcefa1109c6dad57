# File: asset_admin/repositories/asset_repository.py
"""
Repository for Asset entities.

Provides lookups by the item-number business key, eager-loaded listings for
the spreadsheet export and label rendering, and maintenance of the ordered
IP address child rows.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from asset_admin.db.models import Asset, AssetIPAddress
from asset_admin.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AssetRepository(BaseRepository[Asset]):
    """
    Repository for Asset entity operations.
    """

    def __init__(self, session: Session):
        super().__init__(session=session, model=Asset)

    def _with_relations(self, stmt):
        return stmt.options(
            selectinload(Asset.manufacturer),
            selectinload(Asset.category),
            selectinload(Asset.supplier),
            selectinload(Asset.location),
            selectinload(Asset.ip_addresses),
        )

    def get_by_item_number(self, item_number: str) -> Optional[Asset]:
        """
        Get an asset by its item number. The match is case-sensitive.

        Args:
            item_number: Business key of the asset

        Returns:
            Asset if found, None otherwise
        """
        stmt = select(Asset).where(Asset.item_number == item_number)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_with_relations(self, asset_id: int) -> Optional[Asset]:
        """Get an asset with its reference entities and IP addresses loaded."""
        stmt = self._with_relations(select(Asset).where(Asset.id == asset_id))
        return self.session.execute(stmt).scalar_one_or_none()

    def get_many_with_relations(self, asset_ids: Sequence[int]) -> List[Asset]:
        """
        Get several assets by id, preserving the order of ``asset_ids``.

        Unknown ids are silently left out; callers compare lengths to detect them.
        """
        if not asset_ids:
            return []
        stmt = self._with_relations(select(Asset).where(Asset.id.in_(list(asset_ids))))
        found = {asset.id: asset for asset in self.session.execute(stmt).scalars().all()}
        return [found[asset_id] for asset_id in dict.fromkeys(asset_ids) if asset_id in found]

    def list_for_export(self) -> List[Asset]:
        """
        List every asset ordered by item number with relations eager-loaded.

        Returns:
            All assets, ascending by item number
        """
        stmt = self._with_relations(select(Asset).order_by(Asset.item_number))
        return list(self.session.execute(stmt).scalars().all())

    def replace_ip_addresses(self, asset: Asset, addresses: Iterable[str]) -> None:
        """
        Replace the asset's IP addresses with ``addresses`` in the given order.

        The change is staged on the session; the caller commits.
        """
        asset.ip_addresses.clear()
        for position, ip in enumerate(addresses):
            asset.ip_addresses.append(AssetIPAddress(ip=ip, position=position))

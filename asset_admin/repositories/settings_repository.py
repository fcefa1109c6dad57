# File: asset_admin/repositories/settings_repository.py

from typing import Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from asset_admin.db.models import Setting
from asset_admin.repositories.base_repository import BaseRepository


class SettingsRepository(BaseRepository[Setting]):
    """
    Repository for key/value settings.
    """

    def __init__(self, session: Session):
        super().__init__(session=session, model=Setting)

    def get_by_key(self, key: str) -> Optional[Setting]:
        """
        Get a setting by its key.

        Args:
            key: Unique key of the setting

        Returns:
            Setting if found, None otherwise
        """
        stmt = select(Setting).where(Setting.key == key)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = self.get_by_key(key)
        return setting.value if setting is not None else default

    def get_by_prefix(self, prefix: str) -> List[Setting]:
        """
        Get all settings whose key starts with ``prefix``.

        Args:
            prefix: Key prefix such as ``label.``

        Returns:
            Matching settings ordered by key
        """
        stmt = (
            select(Setting)
            .where(Setting.key.startswith(prefix, autoescape=True))
            .order_by(Setting.key)
        )
        return list(self.session.execute(stmt).scalars().all())

    def upsert_many(self, values: Mapping[str, str]) -> Dict[str, str]:
        """
        Insert or update several settings and commit once.

        Args:
            values: Mapping of key to string value

        Returns:
            The stored key/value pairs
        """
        for key, value in values.items():
            setting = self.get_by_key(key)
            if setting is None:
                self.session.add(Setting(key=key, value=value))
            else:
                setting.value = value
        self.session.commit()
        return dict(values)

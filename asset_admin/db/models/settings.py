# File: asset_admin/db/models/settings.py
"""
Key/value settings storage.

Label preferences live under the ``label.`` prefix and the organisation
name under ``organization``.
"""

from sqlalchemy import Column, Integer, String, Text

from asset_admin.db.models.base import Base, TimestampMixin


class Setting(Base, TimestampMixin):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False, default="")

    def __repr__(self):
        return f"Setting(key={self.key!r}, value={self.value!r})"

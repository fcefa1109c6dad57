# File: asset_admin/db/models/user.py

from sqlalchemy import Boolean, Column, Integer, String

from asset_admin.db.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """
    User account referenced by access tokens.

    Accounts are managed by the main inventory application; this service
    only reads them to authorise requests.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)
    is_superuser = Column(Boolean, default=False)

    def __repr__(self):
        return f"User(id={self.id}, email={self.email}, username={self.username})"

# File: asset_admin/repositories/user_repository.py
"""
Repository implementation for users.

Accounts are read to authorise requests; they are managed elsewhere.
"""

from sqlalchemy.orm import Session

from asset_admin.db.models import User
from asset_admin.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Repository for user entities.
    """

    def __init__(self, session: Session):
        super().__init__(session=session, model=User)

# File: asset_admin/repositories/base_repository.py

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Shared persistence operations for the inventory tables.

    Attributes:
        session (Session): Session every query of the repository runs in
        model (Type[T]): Mapped class handled by the repository
    """

    def __init__(self, session: Session, model: Optional[Type[T]] = None):
        self.session = session
        self.model = model

    def _get_model(self) -> Type[T]:
        if self.model is None:
            raise TypeError(f"{self.__class__.__name__} has no model configured")
        return self.model

    def get_by_id(self, id: int) -> Optional[T]:
        """
        Fetch a row by primary key.

        Args:
            id (int): Primary key

        Returns:
            Optional[T]: The row, or None when no row has that key
        """
        model_class = self._get_model()
        return self.session.get(model_class, id)

    def create(self, data: Dict[str, Any]) -> T:
        """
        Insert a row and commit it.

        Keys that are not columns of the model are ignored.

        Args:
            data (Dict[str, Any]): Column values

        Returns:
            T: The stored row, refreshed with generated values
        """
        model_class = self._get_model()
        columns = set(model_class.__table__.columns.keys())
        entity = model_class(**{k: v for k, v in data.items() if k in columns})
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def count(self, **filters) -> int:
        """
        Count rows, optionally restricted by column equality filters.

        Args:
            **filters: column=value pairs; unknown columns are ignored

        Returns:
            int: Number of matching rows
        """
        model_class = self._get_model()
        stmt = select(func.count()).select_from(model_class)
        for column, value in filters.items():
            if hasattr(model_class, column):
                stmt = stmt.where(getattr(model_class, column) == value)
        return self.session.execute(stmt).scalar_one()

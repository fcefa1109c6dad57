# File: asset_admin/repositories/lookup_repository.py
"""
Repositories for the reference entities referenced by assets.

Manufacturers, categories, suppliers and locations share one implementation:
they are looked up by name ignoring case and created on demand by the import.
"""

import logging
from typing import List, Optional, Tuple, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from asset_admin.db.models import Category, Location, Manufacturer, Supplier
from asset_admin.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ReferenceRepository(BaseRepository[R]):
    """
    Repository for a named lookup table.

    Attributes:
        entity_label: Human-readable plural used in logs and workbook headers
    """

    entity_label = "Entities"

    def __init__(self, session: Session, model: Type[R]):
        super().__init__(session=session, model=model)

    def list_id_name(self) -> List[Tuple[int, str]]:
        """
        List every entity as ``(id, name)`` pairs ordered by name.
        """
        model_class = self._get_model()
        stmt = select(model_class.id, model_class.name).order_by(model_class.name)
        return [(row.id, row.name) for row in self.session.execute(stmt).all()]

    def list_names(self) -> List[str]:
        return [name for _, name in self.list_id_name()]

    def get_by_name(self, name: str) -> Optional[R]:
        """
        Get an entity by name, ignoring case.

        Args:
            name: Entity name

        Returns:
            The entity if found, None otherwise
        """
        model_class = self._get_model()
        stmt = select(model_class).where(func.lower(model_class.name) == name.lower())
        return self.session.execute(stmt).scalars().first()

    def get_or_create_by_name(self, name: str) -> int:
        """
        Return the id of the entity called ``name``, creating it if absent.

        A concurrent insert of the same name surfaces as an integrity error on
        the unique index; the existing row is then fetched instead.

        Args:
            name: Trimmed entity name in its original case

        Returns:
            Primary key of the existing or newly created entity
        """
        existing = self.get_by_name(name)
        if existing is not None:
            return existing.id

        try:
            entity = self.create({"name": name})
        except IntegrityError:
            self.session.rollback()
            existing = self.get_by_name(name)
            if existing is None:
                raise
            return existing.id

        logger.info(f"Created {self._get_model().__name__} '{name}' (id={entity.id})")
        return entity.id


class ManufacturerRepository(ReferenceRepository[Manufacturer]):
    entity_label = "Manufacturers"

    def __init__(self, session: Session):
        super().__init__(session, Manufacturer)


class CategoryRepository(ReferenceRepository[Category]):
    entity_label = "Categories"

    def __init__(self, session: Session):
        super().__init__(session, Category)


class SupplierRepository(ReferenceRepository[Supplier]):
    entity_label = "Suppliers"

    def __init__(self, session: Session):
        super().__init__(session, Supplier)


class LocationRepository(ReferenceRepository[Location]):
    entity_label = "Locations"

    def __init__(self, session: Session):
        super().__init__(session, Location)

# File: asset_admin/services/asset_import_service.py
"""
Asset import reconciliation.

This module reconciles uploaded asset rows against the stored inventory.
Every row goes through the same steps, in order:

1. validation (``RowValidator``); failures are recorded and the row skipped
2. lookup of the existing asset by item number
3. resolution of the manufacturer, category, supplier and location names,
   creating missing reference entities
4. the conflict policy: create, update, skip, or report a duplicate

Each row is committed on its own. A failing row is rolled back and reported
without affecting rows before or after it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from asset_admin.core.exceptions import (
    BatchInputException,
    DuplicateKeyException,
    RowValidationException,
)
from asset_admin.db.models import Asset
from asset_admin.db.models.enums import DEFAULT_CONDITION, DEFAULT_STATUS
from asset_admin.repositories import (
    AssetRepository,
    CategoryRepository,
    LocationRepository,
    ManufacturerRepository,
    SupplierRepository,
)
from asset_admin.services.asset_columns import LOOKUP_FIELDS
from asset_admin.services.import_result import ImportResult
from asset_admin.services.lookup_resolver import LookupCache, LookupResolver
from asset_admin.services.row_validator import NormalizedRow, RowValidator
from asset_admin.services.source_adapter import select_adapter

logger = logging.getLogger(__name__)

EMPTY_FILE_MESSAGE = "File is empty or has no data rows"

CREATE = "create"
UPDATE = "update"
SKIP = "skip"
REJECT = "reject"


@dataclass(frozen=True)
class ConflictPolicy:
    """
    What to do when an imported item number already exists.

    ``update_existing`` takes precedence over ``skip_duplicates``. With both
    off, the row is reported as a duplicate.
    """

    skip_duplicates: bool = False
    update_existing: bool = False

    def decide(self, existing: Optional[Asset]) -> str:
        if existing is None:
            return CREATE
        if self.update_existing:
            return UPDATE
        if self.skip_duplicates:
            return SKIP
        return REJECT


class AssetImportService:
    """
    Service for importing assets from spreadsheet and CSV uploads.
    """

    def __init__(self, session: Session, validator: Optional[RowValidator] = None):
        """
        Initialize the import service.

        Args:
            session: Database session used for every read and write of the run
            validator: Optional row validator, defaults to ``RowValidator()``
        """
        self.session = session
        self.validator = validator or RowValidator()
        self.asset_repository = AssetRepository(session)
        self.lookup_repositories = {
            "manufacturer": ManufacturerRepository(session),
            "category": CategoryRepository(session),
            "supplier": SupplierRepository(session),
            "location": LocationRepository(session),
        }
        self.resolvers = {
            field: LookupResolver(repository.get_or_create_by_name)
            for field, repository in self.lookup_repositories.items()
        }

    def build_lookup_caches(self) -> Dict[str, LookupCache]:
        """
        Create one cache per reference type, seeded with the stored entities.

        Returns:
            Caches keyed by lookup field
        """
        return {
            field: LookupCache(repository.entity_label).seed(repository.list_id_name())
            for field, repository in self.lookup_repositories.items()
        }

    def import_file(
        self,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        policy: ConflictPolicy,
    ) -> ImportResult:
        """
        Parse an uploaded file and import its rows.

        Args:
            content: Raw upload bytes
            filename: Original file name, used to pick the reader
            content_type: Media type reported by the client
            policy: Conflict policy for existing item numbers

        Returns:
            The import result

        Raises:
            BatchInputException: If the file yields no data rows
        """
        if not content:
            raise BatchInputException(EMPTY_FILE_MESSAGE)

        adapter = select_adapter(filename, content_type)
        logger.info(f"Importing '{filename}' with the {adapter.name} reader")
        rows = adapter.read(content)

        if not rows:
            raise BatchInputException(EMPTY_FILE_MESSAGE, {"filename": filename})

        return self.process_batch(rows, policy)

    def process_batch(
        self, rows: Sequence[Mapping[str, Any]], policy: ConflictPolicy
    ) -> ImportResult:
        """
        Reconcile raw rows against stored assets.

        A failure on one row never aborts the batch; it is recorded against
        the row number (data row index + 2, the header being row 1).

        Args:
            rows: Raw rows keyed by field key
            policy: Conflict policy for existing item numbers

        Returns:
            Counts of created, updated and skipped rows plus the ordered errors
        """
        result = ImportResult()
        caches = self.build_lookup_caches()

        logger.info(
            f"Processing {len(rows)} import rows "
            f"(skip_duplicates={policy.skip_duplicates}, update_existing={policy.update_existing})"
        )

        for index, raw_row in enumerate(rows):
            row_number = index + 2

            try:
                normalized = self.validator.validate(raw_row)
            except RowValidationException as e:
                result.add_error(row_number, e.message)
                continue

            try:
                self._reconcile_row(normalized, policy, caches, result)
            except DuplicateKeyException as e:
                result.add_error(row_number, e.message)
            except IntegrityError as e:
                self.session.rollback()
                logger.warning(f"Integrity error on import row {row_number}: {e.orig}")
                result.add_error(row_number, str(e.orig))
            except Exception as e:
                self.session.rollback()
                logger.error(f"Failed to import row {row_number}: {e}", exc_info=True)
                result.add_error(row_number, str(e))

        new_lookups = {field: cache.miss_count for field, cache in caches.items()}
        logger.info(
            f"Import finished: {result!r} over {result.processed} rows, new lookups {new_lookups}"
        )
        return result

    def _resolve_lookups(
        self, normalized: NormalizedRow, caches: Dict[str, LookupCache]
    ) -> Dict[str, Optional[int]]:
        return {
            f"{field}_id": self.resolvers[field].resolve(caches[field], normalized.lookups.get(field))
            for field in LOOKUP_FIELDS
        }

    def _reconcile_row(
        self,
        normalized: NormalizedRow,
        policy: ConflictPolicy,
        caches: Dict[str, LookupCache],
        result: ImportResult,
    ) -> None:
        existing = self.asset_repository.get_by_item_number(normalized.item_number)
        lookup_ids = self._resolve_lookups(normalized, caches)

        action = policy.decide(existing)
        if action == CREATE:
            self._create_asset(normalized, lookup_ids)
            result.created += 1
        elif action == UPDATE:
            self._update_asset(existing, normalized, lookup_ids)
            result.updated += 1
        elif action == SKIP:
            logger.debug(f"Skipping existing asset {normalized.item_number}")
            result.skipped += 1
        else:
            raise DuplicateKeyException(normalized.item_number)

    def _create_asset(
        self, normalized: NormalizedRow, lookup_ids: Dict[str, Optional[int]]
    ) -> Asset:
        asset = Asset(
            item_number=normalized.item_number,
            status=normalized.status or DEFAULT_STATUS.value,
            condition=normalized.condition or DEFAULT_CONDITION.value,
            **normalized.values,
            **lookup_ids,
        )
        self.asset_repository.replace_ip_addresses(asset, normalized.ip_addresses)
        self.session.add(asset)
        self.session.commit()
        return asset

    def _update_asset(
        self,
        asset: Asset,
        normalized: NormalizedRow,
        lookup_ids: Dict[str, Optional[int]],
    ) -> Asset:
        for key, value in {**normalized.values, **lookup_ids}.items():
            setattr(asset, key, value)
        if normalized.status is not None:
            asset.status = normalized.status
        if normalized.condition is not None:
            asset.condition = normalized.condition
        self.asset_repository.replace_ip_addresses(asset, normalized.ip_addresses)
        self.session.commit()
        return asset

# File: asset_admin/services/lookup_resolver.py
"""
Name-to-id resolution for reference entities during an import run.

A ``LookupCache`` is owned by a single import call. It is seeded with every
existing entity of its type and then filled as new names are created, so each
distinct name (compared trimmed and case-insensitively) costs at most one
database insert per run.
"""

import logging
from typing import Callable, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


def normalize_name(raw_name) -> str:
    """Trim and lower-case a reference name for cache keys."""
    return str(raw_name).strip().lower()


class LookupCache:
    """
    Memo of normalized name to entity id for one reference type.

    Attributes:
        entity_type: Label of the reference type, used in logs
    """

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        self._ids: Dict[str, int] = {}
        self.miss_count = 0

    def seed(self, entries: Iterable[Tuple[int, str]]) -> "LookupCache":
        """
        Pre-load the cache with existing ``(id, name)`` pairs.

        Args:
            entries: Existing entities of this type

        Returns:
            The cache itself
        """
        for entity_id, name in entries:
            if name:
                self._ids.setdefault(normalize_name(name), entity_id)
        logger.debug(f"Seeded {self.entity_type} lookup cache with {len(self._ids)} entries")
        return self

    def get(self, normalized_name: str) -> Optional[int]:
        return self._ids.get(normalized_name)

    def put(self, normalized_name: str, entity_id: int) -> None:
        self._ids[normalized_name] = entity_id

    def __contains__(self, normalized_name: str) -> bool:
        return normalized_name in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class LookupResolver:
    """
    Resolves free-text reference names to entity ids, creating missing entities.

    Args:
        create_if_absent: Callable taking a trimmed name in its original case
            and returning the id of the existing or newly created entity
    """

    def __init__(self, create_if_absent: Callable[[str], int]):
        self.create_if_absent = create_if_absent

    def resolve(self, cache: LookupCache, raw_name) -> Optional[int]:
        """
        Resolve ``raw_name`` to an entity id.

        Args:
            cache: Per-run cache for this reference type
            raw_name: Name as read from the import row

        Returns:
            Entity id, or None for a blank name
        """
        if raw_name is None:
            return None
        trimmed = str(raw_name).strip()
        if not trimmed:
            return None

        key = normalize_name(trimmed)
        cached = cache.get(key)
        if cached is not None:
            return cached

        entity_id = self.create_if_absent(trimmed)
        cache.put(key, entity_id)
        cache.miss_count += 1
        logger.debug(f"Resolved new {cache.entity_type} '{trimmed}' to id {entity_id}")
        return entity_id

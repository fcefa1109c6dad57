# File: asset_admin/services/import_result.py

from typing import Any, Dict, List


class ImportResult:
    """Container for import results and statistics."""

    def __init__(self):
        self.created = 0
        self.updated = 0
        self.skipped = 0
        self.errors: List[Dict[str, Any]] = []

    def add_error(self, row: int, message: str) -> None:
        self.errors.append({"row": row, "message": message})

    @property
    def processed(self) -> int:
        return self.created + self.updated + self.skipped + len(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert results to dictionary."""
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }

    def __repr__(self):
        return (
            f"ImportResult(created={self.created}, updated={self.updated}, "
            f"skipped={self.skipped}, errors={len(self.errors)})"
        )

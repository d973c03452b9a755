"""
Catalog vector storage for MoodShift.

This module provides the catalog collaborator: bulk lookup of precomputed
mood vectors by media id, optionally persisted to a JSON file.
"""
import json
import os
import tempfile
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from ..data.schemas import CatalogVector, MoodVector, ValidationResult
from ..data.validator import DataValidator


CatalogKey = Tuple[int, str]


def catalog_vector_to_dict(item: CatalogVector) -> Dict[str, Any]:
    return {
        'media_id': item.media_id,
        'media_kind': item.media_kind,
        'title': item.title,
        'mood_vector': item.mood_vector.to_dict(),
    }


class CatalogStore:
    """
    In-memory catalog of media mood vectors, keyed by (media_id, media_kind).

    When a storage path is given the catalog can be loaded from and atomically
    saved to a JSON file. Records without a mood vector are kept out of the
    index entirely, so lookups simply miss them.
    """

    def __init__(self, storage_path: Optional[str] = None, validator: Optional[DataValidator] = None):
        """
        Initialize CatalogStore.

        Args:
            storage_path: Optional path to the JSON file backing the catalog
            validator: Validator for incoming records (optional)
        """
        self.storage_path = storage_path
        self.validator = validator or DataValidator()
        self.logger = logging.getLogger(__name__)
        self._items: Dict[CatalogKey, CatalogVector] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def add(self, item: CatalogVector) -> None:
        with self._lock:
            self._items[item.key] = item

    def add_many(self, items: Iterable[CatalogVector]) -> None:
        with self._lock:
            for item in items:
                self._items[item.key] = item

    def get_vector(self, media_id: int, media_kind: str) -> Optional[CatalogVector]:
        with self._lock:
            return self._items.get((media_id, media_kind))

    def get_vectors(self, keys: Iterable[CatalogKey]) -> Dict[CatalogKey, CatalogVector]:
        """
        Bulk lookup. Keys with no precomputed vector are absent from the result.

        Args:
            keys: (media_id, media_kind) pairs

        Returns:
            Mapping of found keys to their CatalogVector
        """
        found = {}
        with self._lock:
            for key in keys:
                item = self._items.get(key)
                if item is not None:
                    found[key] = item
        return found

    def candidates(self, media_kind: Optional[str] = None) -> List[CatalogVector]:
        """All items with vectors, optionally restricted to one media kind."""
        with self._lock:
            items = list(self._items.values())
        if media_kind is not None:
            items = [item for item in items if item.media_kind == media_kind]
        return items

    def load_records(self, records: Iterable[Dict[str, Any]]) -> ValidationResult:
        """
        Load raw catalog records, skipping invalid ones and those without vectors.

        Args:
            records: Mappings with media_id, media_kind, title and mood_vector

        Returns:
            ValidationResult aggregating every record's problems
        """
        summary = ValidationResult(is_valid=True, errors=[], warnings=[])
        loaded = 0
        skipped = 0
        for record in records:
            result = self.validator.validate_catalog_record(record)
            for warning in result.warnings:
                summary.add_warning(warning)
            if result.has_errors():
                for error in result.errors:
                    summary.add_error(error)
                self.logger.error(f"Rejected catalog record {record.get('media_id')}: {result.errors}")
                skipped += 1
                continue
            if record.get('mood_vector') is None:
                skipped += 1
                continue
            self.add(CatalogVector(
                media_id=record['media_id'],
                media_kind=record['media_kind'],
                mood_vector=MoodVector.from_dict(record['mood_vector']),
                title=record.get('title', ''),
            ))
            loaded += 1
        summary.metadata = {'loaded': loaded, 'skipped': skipped}
        self.logger.info(f"Loaded {loaded} catalog vectors ({skipped} skipped)")
        return summary

    def load(self) -> ValidationResult:
        """
        Load the catalog from the JSON storage file.

        Raises:
            FileNotFoundError: If the catalog file doesn't exist
            ValueError: If the file is not a JSON list of records
        """
        if not self.storage_path:
            raise ValueError("CatalogStore has no storage path")
        if not os.path.exists(self.storage_path):
            raise FileNotFoundError(f"Catalog file not found: {self.storage_path}")

        with open(self.storage_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise ValueError("Catalog file must contain a JSON list")
        return self.load_records(data)

    def save_atomic(self) -> None:
        """
        Atomically save the catalog to storage.

        Raises:
            IOError: If saving fails
        """
        if not self.storage_path:
            raise ValueError("CatalogStore has no storage path")

        with self._lock:
            data = [catalog_vector_to_dict(item) for item in self._items.values()]

        target_dir = os.path.dirname(os.path.abspath(self.storage_path))
        os.makedirs(target_dir, exist_ok=True)

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                dir=target_dir,
                delete=False,
                suffix='.tmp',
                encoding='utf-8'
            ) as temp_file:
                temp_path = temp_file.name
                json.dump(data, temp_file, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.storage_path)
            temp_path = None

            self.logger.info(f"Atomically saved {len(data)} catalog vectors to {self.storage_path}")

        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            error_msg = f"Failed to save catalog atomically: {e}"
            self.logger.error(error_msg)
            raise IOError(error_msg) from e

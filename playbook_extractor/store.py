"""
Record Store

A JSON-file store for extracted records, keyed by entity type and record id,
and the reseed routine that replaces its contents with a pipeline result.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from playbook_extractor.models import EntityType, PlaybookExtractorError, record_from_dict
from playbook_extractor.pipeline import ExtractionResult

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path(".playbook") / "records.json"


class StoreError(PlaybookExtractorError):
    """Raised when the store cannot read, write or accept a record."""

    pass


def _entity_type(kind: Union[EntityType, str]) -> EntityType:
    if isinstance(kind, EntityType):
        return kind
    try:
        return EntityType(kind.lower().rstrip("s"))
    except ValueError:
        raise StoreError(f"Unknown record type: {kind}") from None


class JsonRecordStore:
    """Records of each entity type persisted in one JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or DEFAULT_STORE_PATH
        self._collections: dict[EntityType, dict[str, dict]] = {et: {} for et in EntityType}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read store {self.path}: {e}") from e

        for et in EntityType:
            self._collections[et] = dict(data.get("collections", {}).get(et.value, {}))

    def save(self) -> None:
        """Write every collection to disk."""
        data = {
            "collections": {et.value: records for et, records in self._collections.items()},
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Atomic write
            temp_file = self.path.with_suffix(".tmp")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_file, self.path)
        except OSError as e:
            raise StoreError(f"Could not write store {self.path}: {e}") from e

    def clear(self, kind: Union[EntityType, str]) -> int:
        """Delete every record of a type; returns how many were removed."""
        et = _entity_type(kind)
        removed = len(self._collections[et])
        self._collections[et] = {}
        self.save()
        return removed

    def insert(self, kind: Union[EntityType, str], record, save: bool = True) -> None:
        """
        Insert one record.

        Args:
            kind: Entity type of the record
            record: A record object with ``to_dict`` or its dict form
            save: Write the file immediately; batch callers call ``save`` once

        Raises:
            StoreError: If the id is missing or already stored
        """
        et = _entity_type(kind)
        data = record.to_dict() if hasattr(record, "to_dict") else dict(record)
        record_id = data.get("id")
        if not record_id:
            raise StoreError(f"{et.value} record has no id")
        if record_id in self._collections[et]:
            raise StoreError(f"Duplicate {et.value} id: {record_id}")
        self._collections[et][record_id] = data
        if save:
            self.save()

    def get(self, kind: Union[EntityType, str], record_id: str):
        """Return the stored record rebuilt as its record type, or None."""
        et = _entity_type(kind)
        data = self._collections[et].get(record_id)
        return record_from_dict(et, data) if data is not None else None

    def list(self, kind: Union[EntityType, str], platform: Optional[str] = None) -> list[dict]:
        et = _entity_type(kind)
        records = list(self._collections[et].values())
        if platform is not None:
            records = [r for r in records if r.get("platform") == platform]
        return records

    def count(self, kind: Union[EntityType, str]) -> int:
        return len(self._collections[_entity_type(kind)])

    def counts(self) -> dict[str, int]:
        return {et.value: len(records) for et, records in self._collections.items()}


@dataclass
class SeedReport:
    """Outcome of a reseed: records cleared, inserted and failed per type."""

    cleared: dict[str, int] = field(default_factory=dict)
    inserted: dict[str, int] = field(default_factory=dict)
    failures: list[dict] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict:
        return {
            "cleared": dict(self.cleared),
            "inserted": dict(self.inserted),
            "failed": self.failed,
            "failures": list(self.failures),
        }


def reseed(store: JsonRecordStore, result: ExtractionResult) -> SeedReport:
    """
    Replace the store contents with a pipeline result.

    Every collection is cleared first. Individual insert failures are logged
    and counted; the batch continues.
    """
    report = SeedReport()

    for et in EntityType:
        report.cleared[et.value] = store.clear(et)

    for et in EntityType:
        inserted = 0
        for record in result.records(et):
            try:
                store.insert(et, record, save=False)
                inserted += 1
            except StoreError as e:
                logger.warning("Failed to insert %s %s: %s", et.value, record.id, e)
                report.failures.append({"type": et.value, "id": record.id, "error": str(e)})
        report.inserted[et.value] = inserted

    store.save()

    logger.info("Reseed complete: inserted=%s failed=%d", report.inserted, report.failed)
    return report

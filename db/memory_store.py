"""In-memory record store, used by tests and dry runs."""

import copy
from typing import Any, Dict, List, Optional

from models.errors import create_db_error
from db.record_store import EntityType, RecordStore


class InMemoryRecordStore(RecordStore):
    """Dict-backed ``RecordStore``; records are deep-copied on the way in and out."""

    def __init__(self):
        self._records: Dict[EntityType, Dict[str, Dict[str, Any]]] = {
            entity: {} for entity in EntityType
        }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def list_all(self, entity: EntityType) -> List[Dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._records[EntityType(entity)].values()]

    def get(self, entity: EntityType, record_id: str) -> Optional[Dict[str, Any]]:
        record = self._records[EntityType(entity)].get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def upsert(self, entity: EntityType, record: Dict[str, Any]) -> None:
        record_id = record.get("id")
        if not record_id:
            raise create_db_error("Record is missing an 'id'", retryable=False)
        self._records[EntityType(entity)][str(record_id)] = copy.deepcopy(record)

    def delete(self, entity: EntityType, record_id: str) -> bool:
        return self._records[EntityType(entity)].pop(record_id, None) is not None

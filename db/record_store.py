"""
Record store layer for the JobPursuit core.

Defines the storage port consumed by the workflow and suggestion engines
(list-all, get, upsert-by-id, delete-by-id per entity type) and a SQLite
implementation with connection management. No transactional guarantees are
required by the core; every write commits immediately.
"""

import json
import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.errors import (
    MalformedSuggestionError,
    create_db_error,
    create_db_not_found_error,
)
from models.records import Application, Engagement, Suggestion

logger = logging.getLogger(__name__)

# Default database path relative to repository root
DEFAULT_DB_PATH = "data/jobpursuit.db"


class EntityType(str, Enum):
    """Record collections known to the store."""

    JOB = "Job"
    APPLICATION = "Application"
    PERSON = "Person"
    ENGAGEMENT = "Engagement"
    ARTIFACT = "Artifact"
    SUGGESTION = "Suggestion"


def resolve_db_path(db_path: Optional[str] = None) -> Path:
    """
    Resolve the database path with support for overrides and defaults.

    Resolution order:
    1. Provided db_path parameter
    2. JOBPURSUIT_DB environment variable
    3. JOBPURSUIT_ROOT/data/jobpursuit.db
    4. Default path: data/jobpursuit.db

    Args:
        db_path: Optional database path override

    Returns:
        Resolved absolute Path to the database
    """
    if db_path is not None:
        path_str = db_path
    else:
        db_env = os.getenv("JOBPURSUIT_DB")
        if db_env:
            path_str = db_env
        else:
            root_env = os.getenv("JOBPURSUIT_ROOT")
            if root_env:
                return Path(root_env) / "data" / "jobpursuit.db"
            path_str = DEFAULT_DB_PATH

    path = Path(path_str)

    if not path.is_absolute():
        repo_root = Path(__file__).resolve().parents[1]  # db/ -> repo/
        path = repo_root / path

    return path


class RecordStore(ABC):
    """
    Storage port keyed by entity type.

    Implementations provide the four primitive operations on JSON-compatible
    dicts; the typed helpers below convert to and from domain records.
    """

    @abstractmethod
    def list_all(self, entity: EntityType) -> List[Dict[str, Any]]:
        """Return every record of ``entity`` in insertion order."""

    @abstractmethod
    def get(self, entity: EntityType, record_id: str) -> Optional[Dict[str, Any]]:
        """Return one record, or None if the id is unknown."""

    @abstractmethod
    def upsert(self, entity: EntityType, record: Dict[str, Any]) -> None:
        """Insert or replace the record with ``record["id"]``."""

    @abstractmethod
    def delete(self, entity: EntityType, record_id: str) -> bool:
        """Delete by id; return whether a record was removed."""

    # Applications

    def save_application(self, application: Application) -> None:
        self.upsert(EntityType.APPLICATION, application.model_dump(mode="json"))

    def get_application(self, application_id: str) -> Optional[Application]:
        record = self.get(EntityType.APPLICATION, application_id)
        return Application.model_validate(record) if record is not None else None

    def list_applications(self) -> List[Application]:
        return [Application.model_validate(r) for r in self.list_all(EntityType.APPLICATION)]

    # Engagements

    def save_engagement(self, engagement: Engagement) -> None:
        self.upsert(EntityType.ENGAGEMENT, engagement.model_dump(mode="json"))

    def list_engagements(self) -> List[Engagement]:
        return [Engagement.model_validate(r) for r in self.list_all(EntityType.ENGAGEMENT)]

    # Suggestions

    def save_suggestion(self, suggestion: Suggestion) -> None:
        self.upsert(EntityType.SUGGESTION, suggestion.model_dump(mode="json"))

    def get_suggestion(self, suggestion_id: str) -> Optional[Suggestion]:
        record = self.get(EntityType.SUGGESTION, suggestion_id)
        return _load_suggestion(record) if record is not None else None

    def list_suggestions(self) -> List[Suggestion]:
        return [_load_suggestion(r) for r in self.list_all(EntityType.SUGGESTION)]


def _load_suggestion(record: Dict[str, Any]) -> Suggestion:
    """Validate a stored suggestion; corrupt payloads are malformed suggestions."""
    try:
        return Suggestion.model_validate(record)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()))
        detail = f"{field}: {first.get('msg', 'invalid record')}" if field else str(e)
        raise MalformedSuggestionError(detail, suggestion_id=record.get("id")) from e


class SqliteRecordStore(RecordStore):
    """
    Context manager for record storage in a SQLite database.

    All entity types share one ``records`` table keyed by (entity_type, id)
    with a JSON payload. The database file and schema are created on entry
    unless ``create=False``.

    Usage:
        with SqliteRecordStore(db_path) as store:
            store.save_application(app)
            apps = store.list_applications()
    """

    def __init__(self, db_path: Optional[str] = None, create: bool = True):
        """
        Initialize store with database path.

        Args:
            db_path: Optional database path override
            create: Create the database file if it does not exist
        """
        self.db_path = db_path
        self.create = create
        self.resolved_path: Optional[Path] = None
        self.conn: Optional[sqlite3.Connection] = None

    def __enter__(self):
        """
        Open connection and ensure the schema exists.

        Returns:
            self: The SqliteRecordStore instance

        Raises:
            ToolError: If database file is missing (create=False) or connection fails
        """
        self.resolved_path = resolve_db_path(self.db_path)

        if self.resolved_path.exists() and not self.resolved_path.is_file():
            raise create_db_not_found_error(str(self.resolved_path))

        if not self.resolved_path.exists():
            if not self.create:
                raise create_db_not_found_error(str(self.resolved_path))
            self.resolved_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self.conn = sqlite3.connect(str(self.resolved_path))
            self.conn.row_factory = sqlite3.Row
            self.ensure_schema()
            return self

        except sqlite3.OperationalError as e:
            self._close()
            error_msg = str(e)
            if "unable to open database" in error_msg.lower():
                raise create_db_not_found_error(str(self.resolved_path)) from e
            raise create_db_error(error_msg, retryable=True, original_error=e) from e

        except sqlite3.Error as e:
            self._close()
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close the connection always; never suppress exceptions."""
        self._close()
        return False

    def _close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise create_db_error("Connection not established", retryable=False)
        return self.conn

    def ensure_schema(self) -> None:
        """Create the records table if it does not exist."""
        conn = self._connection()
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS records (
                entity_type TEXT NOT NULL,
                id TEXT NOT NULL,
                payload_json TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (entity_type, id)
            )
            """
        )
        conn.commit()

    def list_all(self, entity: EntityType) -> List[Dict[str, Any]]:
        try:
            cursor = self._connection().execute(
                "SELECT payload_json FROM records WHERE entity_type = ? ORDER BY rowid",
                (EntityType(entity).value,),
            )
            return [json.loads(row["payload_json"]) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def get(self, entity: EntityType, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            row = self._connection().execute(
                "SELECT payload_json FROM records WHERE entity_type = ? AND id = ?",
                (EntityType(entity).value, record_id),
            ).fetchone()
        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e
        return json.loads(row["payload_json"]) if row is not None else None

    def upsert(self, entity: EntityType, record: Dict[str, Any]) -> None:
        record_id = record.get("id")
        if not record_id:
            raise create_db_error("Record is missing an 'id'", retryable=False)

        conn = self._connection()
        try:
            conn.execute(
                """
                INSERT INTO records (entity_type, id, payload_json, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(entity_type, id) DO UPDATE SET
                    payload_json = excluded.payload_json,
                    updated_at = excluded.updated_at
                """,
                (
                    EntityType(entity).value,
                    str(record_id),
                    json.dumps(record, ensure_ascii=False),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise create_db_error(str(e), retryable=False, original_error=e) from e

        logger.debug("Saved %s %s", EntityType(entity).value, record_id)

    def delete(self, entity: EntityType, record_id: str) -> bool:
        conn = self._connection()
        try:
            cursor = conn.execute(
                "DELETE FROM records WHERE entity_type = ? AND id = ?",
                (EntityType(entity).value, record_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise create_db_error(str(e), retryable=False, original_error=e) from e
        return cursor.rowcount > 0

from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any, Protocol

from aurascan.schemas.assessment import AppConfig, NewAssessment, StoredAssessment

logger = logging.getLogger(__name__)


# SQLite INTEGER PRIMARY KEY is a signed 64-bit value.
MAX_ASSESSMENT_ID = 2**63 - 1


class StorageError(RuntimeError):
    pass


class AssessmentStore(Protocol):
    def create(self, record: NewAssessment) -> StoredAssessment: ...

    def get(self, assessment_id: int) -> StoredAssessment | None: ...

    def list_recent(self, limit: int = 50) -> list[StoredAssessment]: ...

    def get_config(self) -> AppConfig: ...

    def update_config(self, changes: dict[str, Any]) -> AppConfig: ...

    def close(self) -> None: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _merge_config(current: AppConfig, changes: dict[str, Any]) -> AppConfig:
    # id is fixed; unknown keys are ignored.
    allowed = set(AppConfig.model_fields) - {"id"}
    updates = {key: value for key, value in changes.items() if key in allowed and value is not None}
    return current.model_copy(update=updates)


class InMemoryAssessmentStore:
    """Process-local store. Nothing survives a restart."""

    def __init__(self, config: AppConfig | None = None):
        self._lock = threading.Lock()
        self._records: dict[int, StoredAssessment] = {}
        self._next_id = 1
        self._config = config or AppConfig()

    def create(self, record: NewAssessment) -> StoredAssessment:
        with self._lock:
            assessment_id = self._next_id
            self._next_id += 1
            stored = StoredAssessment(**record.model_dump(), id=assessment_id, created_at=_utc_now())
            self._records[assessment_id] = stored
        return stored

    def get(self, assessment_id: int) -> StoredAssessment | None:
        return self._records.get(assessment_id)

    def list_recent(self, limit: int = 50) -> list[StoredAssessment]:
        with self._lock:
            records = sorted(self._records.values(), key=lambda item: item.id, reverse=True)
        return records[: max(0, limit)]

    def get_config(self) -> AppConfig:
        with self._lock:
            return self._config.model_copy()

    def update_config(self, changes: dict[str, Any]) -> AppConfig:
        with self._lock:
            self._config = _merge_config(self._config, changes)
            return self._config.model_copy()

    def close(self) -> None:
        return None


_RECORD_COLUMNS = (
    "full_name",
    "email",
    "position",
    "experience",
    "evaluation_type",
    "resume_filename",
    "image_filename",
    "audio_filename",
    "resume_content",
    "emotion_data",
    "voice_sentiment",
    "mood_score",
    "mood_text",
    "trust_score",
    "risk_score",
    "recommendation",
    "reason",
)


class SQLiteAssessmentStore:
    """Durable store backed by a single SQLite file."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._lock = threading.Lock()
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self._conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._conn.execute("PRAGMA busy_timeout=5000;")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS assessments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                full_name TEXT NOT NULL,
                email TEXT NOT NULL,
                position TEXT NOT NULL,
                experience TEXT NOT NULL,
                evaluation_type TEXT NOT NULL,
                resume_filename TEXT,
                image_filename TEXT,
                audio_filename TEXT,
                resume_content TEXT,
                emotion_data TEXT,
                voice_sentiment TEXT,
                mood_score REAL NOT NULL,
                mood_text TEXT NOT NULL,
                trust_score REAL NOT NULL,
                risk_score REAL NOT NULL,
                recommendation TEXT NOT NULL,
                reason TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS app_config (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                config_json TEXT NOT NULL
            );
            """
        )

    def _row_to_record(self, row: tuple[Any, ...]) -> StoredAssessment:
        values = dict(zip(("id", *_RECORD_COLUMNS, "created_at"), row))
        values["created_at"] = datetime.fromisoformat(values["created_at"])
        return StoredAssessment(**values)

    def create(self, record: NewAssessment) -> StoredAssessment:
        created_at = _utc_now()
        data = record.model_dump()
        placeholders = ", ".join("?" for _ in range(len(_RECORD_COLUMNS) + 1))
        try:
            with self._lock:
                cur = self._conn.execute(
                    f"INSERT INTO assessments ({', '.join(_RECORD_COLUMNS)}, created_at) VALUES ({placeholders})",
                    (*(data[column] for column in _RECORD_COLUMNS), created_at.isoformat()),
                )
                assessment_id = int(cur.lastrowid)
        except sqlite3.Error as exc:
            logger.error("assessment_store_write_failed path=%s: %s", self._db_path, exc)
            raise StorageError("Failed to save assessment") from exc
        return StoredAssessment(**data, id=assessment_id, created_at=created_at)

    def get(self, assessment_id: int) -> StoredAssessment | None:
        if not 0 < assessment_id <= MAX_ASSESSMENT_ID:
            return None
        with self._lock:
            cur = self._conn.execute(
                f"SELECT id, {', '.join(_RECORD_COLUMNS)}, created_at FROM assessments WHERE id = ?",
                (assessment_id,),
            )
            row = cur.fetchone()
        if not row:
            return None
        return self._row_to_record(row)

    def list_recent(self, limit: int = 50) -> list[StoredAssessment]:
        with self._lock:
            cur = self._conn.execute(
                f"SELECT id, {', '.join(_RECORD_COLUMNS)}, created_at FROM assessments ORDER BY id DESC LIMIT ?",
                (max(0, limit),),
            )
            rows = cur.fetchall()
        return [self._row_to_record(row) for row in rows]

    def _read_config(self) -> AppConfig:
        cur = self._conn.execute("SELECT config_json FROM app_config WHERE id = 1")
        row = cur.fetchone()
        if not row:
            return AppConfig()
        return AppConfig(**json.loads(row[0]))

    def get_config(self) -> AppConfig:
        with self._lock:
            return self._read_config()

    def update_config(self, changes: dict[str, Any]) -> AppConfig:
        try:
            with self._lock:
                merged = _merge_config(self._read_config(), changes)
                self._conn.execute(
                    "INSERT OR REPLACE INTO app_config (id, config_json) VALUES (1, ?)",
                    (json.dumps(merged.model_dump(), ensure_ascii=False),),
                )
        except sqlite3.Error as exc:
            logger.error("app_config_write_failed path=%s: %s", self._db_path, exc)
            raise StorageError("Failed to update configuration") from exc
        return merged

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def build_store(backend: str, db_path: str) -> AssessmentStore:
    if backend == "sqlite":
        logger.info("assessment_store backend=sqlite path=%s", db_path)
        return SQLiteAssessmentStore(db_path)
    logger.info("assessment_store backend=memory")
    return InMemoryAssessmentStore()

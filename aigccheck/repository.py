"""SQLite storage of detection records."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import astuple, dataclass, fields
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

_TABLE = "detection_records"
_SORT_COLUMNS = frozenset({"created_at", "score", "risk_level"})
_ORDERS = frozenset({"asc", "desc"})


class RecordNotFoundError(LookupError):
    """No detection record matches the given identifier."""


@dataclass
class DetectionRecord:
    """A stored detection; the JSON columns hold serialised results."""

    id: str
    request_id: str
    text: str
    score: float
    risk_level: str
    text_preview: str = ""
    rule_results: str = ""
    suggestions: str = ""
    multimodal_result: str = ""
    process_time: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


_COLUMNS = tuple(f.name for f in fields(DetectionRecord))


def _encode_time(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat(timespec="microseconds")


def _decode_time(value: str | None) -> datetime | None:
    return None if value is None else datetime.fromisoformat(value)


def _row_to_record(row: tuple) -> DetectionRecord:
    record = DetectionRecord(*row)
    record.created_at = _decode_time(row[-2])
    record.updated_at = _decode_time(row[-1])
    return record


def open_database(db_type: str, dsn: str) -> sqlite3.Connection:
    """Open a database connection; only "sqlite" is supported.

    The directory holding the database file is created when missing.
    """
    if db_type != "sqlite":
        raise ValueError(f"unsupported database type: {db_type}")
    if dsn != ":memory:":
        Path(dsn).parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(dsn)
    logger.info("Database connected successfully (type: %s)", db_type)
    return connection


def migrate(connection: sqlite3.Connection) -> None:
    """Create the detection_records table and its indexes if missing."""
    logger.info("Starting database migration...")
    with connection:
        connection.executescript(
            f"""
            CREATE TABLE IF NOT EXISTS {_TABLE} (
                id TEXT PRIMARY KEY,
                request_id TEXT NOT NULL,
                text TEXT NOT NULL,
                score REAL NOT NULL,
                risk_level TEXT NOT NULL,
                text_preview TEXT,
                rule_results TEXT,
                suggestions TEXT,
                multimodal_result TEXT,
                process_time TEXT,
                created_at TEXT,
                updated_at TEXT
            );
            CREATE UNIQUE INDEX IF NOT EXISTS idx_{_TABLE}_request_id ON {_TABLE}(request_id);
            CREATE INDEX IF NOT EXISTS idx_{_TABLE}_risk_level ON {_TABLE}(risk_level);
            CREATE INDEX IF NOT EXISTS idx_{_TABLE}_created_at ON {_TABLE}(created_at);
            """
        )
    logger.info("Database migration completed successfully")


class DetectionRepository:
    """Create, read, list and delete detection records."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    def create(self, record: DetectionRecord) -> None:
        """Insert a record, filling in unset timestamps."""
        now = datetime.now()
        if record.created_at is None:
            record.created_at = now
        if record.updated_at is None:
            record.updated_at = now
        values = list(astuple(record))
        values[-2] = _encode_time(record.created_at)
        values[-1] = _encode_time(record.updated_at)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._conn:
            self._conn.execute(
                f"INSERT INTO {_TABLE} ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                values,
            )

    def _get_one(self, column: str, value: str) -> DetectionRecord:
        row = self._conn.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM {_TABLE} WHERE {column} = ? LIMIT 1",
            (value,),
        ).fetchone()
        if row is None:
            raise RecordNotFoundError(f"detection record not found: {value}")
        return _row_to_record(row)

    def get_by_id(self, record_id: str) -> DetectionRecord:
        return self._get_one("id", record_id)

    def get_by_request_id(self, request_id: str) -> DetectionRecord:
        return self._get_one("request_id", request_id)

    def list(
        self, page: int, page_size: int, sort_by: str = "created_at", order: str = "desc"
    ) -> tuple[list[DetectionRecord], int]:
        """One page of records and the total record count."""
        if sort_by not in _SORT_COLUMNS:
            raise ValueError(f"unsupported sort column: {sort_by}")
        if order not in _ORDERS:
            raise ValueError(f"unsupported sort order: {order}")
        (total,) = self._conn.execute(f"SELECT COUNT(*) FROM {_TABLE}").fetchone()
        rows = self._conn.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM {_TABLE} "
            f"ORDER BY {sort_by} {order} LIMIT ? OFFSET ?",
            (page_size, (page - 1) * page_size),
        ).fetchall()
        return [_row_to_record(row) for row in rows], total

    def delete(self, record_id: str) -> None:
        with self._conn:
            cursor = self._conn.execute(f"DELETE FROM {_TABLE} WHERE id = ?", (record_id,))
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"detection record not found: {record_id}")

    def delete_all(self) -> None:
        with self._conn:
            self._conn.execute(f"DELETE FROM {_TABLE}")
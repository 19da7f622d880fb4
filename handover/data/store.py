"""
handover/data/store.py
──────────────────────
Append-only stores for shift notes and equipment readings.

Provides, for each entity, one in-memory and one SQLite implementation with
the same interface:
  - append(item)   : add a record (the only mutation)
  - query(...)     : filtered records, in insertion order
  - to_dataframe() : all records as a pandas DataFrame

The reading store adds recent() and abnormal(), both newest first.

Thread safety: every store holds an RLock around appends and filtered reads,
so readers always see a consistent prefix of the log. SQLite stores opened on
the same connection share one lock, since a commit or rollback on that
connection covers every pending insert.
"""
from __future__ import annotations

import logging
import re
import sqlite3
import threading
from collections.abc import Iterable
from datetime import datetime
from enum import Enum

import pandas as pd

from handover.data.models import (
    EquipmentReading,
    NoteType,
    Parameter,
    ReadingStatus,
    Shift,
    ShiftNote,
)

logger = logging.getLogger(__name__)


def newest_first(items: Iterable) -> list:
    """Records sorted by timestamp, newest first."""
    # Stable sort on reversed insertion order keeps later appends first on ties
    return sorted(reversed(list(items)), key=lambda i: i.timestamp, reverse=True)


def _unit_matches(stored_unit: str, unit_filter: str) -> bool:
    """A filter of "5" or "Unit 5" both match a note stored with unit "5"."""
    return stored_unit == re.sub(r"\D", "", unit_filter) or stored_unit == unit_filter


# ── Note stores ───────────────────────────────────────────────────────────────


class NoteStore:
    """In-process, insertion-ordered note log."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._notes: list[ShiftNote] = []

    def append(self, note: ShiftNote) -> None:
        with self._lock:
            self._notes.append(note)

    def all(self) -> list[ShiftNote]:
        with self._lock:
            return list(self._notes)

    def query(
        self,
        shift: Shift | str | None = None,
        unit: str | None = None,
        note_type: NoteType | str | None = None,
        since: datetime | None = None,
    ) -> list[ShiftNote]:
        """Return matching notes in the order they were logged."""
        shift = Shift(shift) if shift else None
        note_type = NoteType(note_type) if note_type else None
        with self._lock:
            return [
                n
                for n in self._notes
                if (shift is None or n.shift == shift)
                and (not unit or _unit_matches(n.unit, unit))
                and (note_type is None or n.type == note_type)
                and (since is None or n.timestamp >= since)
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._notes)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([n.model_dump() for n in self.all()])


# ── Reading stores ────────────────────────────────────────────────────────────


class ReadingStore:
    """In-process, insertion-ordered equipment reading log."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._readings: list[EquipmentReading] = []

    def append(self, reading: EquipmentReading) -> None:
        with self._lock:
            self._readings.append(reading)

    def all(self) -> list[EquipmentReading]:
        with self._lock:
            return list(self._readings)

    def query(
        self,
        equipment_id: str | None = None,
        parameter: Parameter | str | None = None,
        since: datetime | None = None,
    ) -> list[EquipmentReading]:
        parameter = Parameter(parameter) if parameter else None
        with self._lock:
            return [
                r
                for r in self._readings
                if (equipment_id is None or r.equipment_id == equipment_id)
                and (parameter is None or r.parameter == parameter)
                and (since is None or r.timestamp >= since)
            ]

    def recent(
        self,
        equipment_id: str,
        parameter: Parameter | str | None = None,
        limit: int = 10,
    ) -> list[EquipmentReading]:
        """Most recent `limit` readings for an equipment, newest first."""
        return newest_first(self.query(equipment_id, parameter))[:limit]

    def abnormal(self, since: datetime | None = None) -> list[EquipmentReading]:
        """Every warning or critical reading, newest first."""
        return newest_first(
            [r for r in self.query(since=since) if r.status != ReadingStatus.NORMAL]
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([r.model_dump() for r in self.all()])


# ── SQLite backing ────────────────────────────────────────────────────────────

_CREATE_NOTES = """
CREATE TABLE IF NOT EXISTS shift_notes (
    seq        INTEGER PRIMARY KEY AUTOINCREMENT,
    id         TEXT NOT NULL UNIQUE,
    timestamp  TEXT NOT NULL,
    shift      TEXT NOT NULL,
    unit       TEXT NOT NULL,
    note       TEXT NOT NULL,
    type       TEXT NOT NULL,
    priority   TEXT NOT NULL,
    resolved   INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_notes_shift ON shift_notes (shift, seq);
"""

_CREATE_READINGS = """
CREATE TABLE IF NOT EXISTS equipment_readings (
    seq             INTEGER PRIMARY KEY AUTOINCREMENT,
    id              TEXT NOT NULL UNIQUE,
    timestamp       TEXT NOT NULL,
    shift           TEXT NOT NULL,
    equipment_id    TEXT NOT NULL,
    equipment_type  TEXT NOT NULL,
    unit            TEXT NOT NULL,
    parameter       TEXT NOT NULL,
    value           REAL NOT NULL,
    uom             TEXT NOT NULL,
    normal_min      REAL NOT NULL,
    normal_max      REAL NOT NULL,
    critical_min    REAL NOT NULL,
    critical_max    REAL NOT NULL,
    status          TEXT NOT NULL,
    deviation       REAL NOT NULL,
    operator        TEXT
);
CREATE INDEX IF NOT EXISTS idx_readings_eq ON equipment_readings (equipment_id, parameter, seq);
"""

_NOTE_COLUMNS = ("id", "timestamp", "shift", "unit", "note", "type", "priority", "resolved")
_READING_COLUMNS = (
    "id", "timestamp", "shift", "equipment_id", "equipment_type", "unit",
    "parameter", "value", "uom", "normal_min", "normal_max", "critical_min",
    "critical_max", "status", "deviation", "operator",
)


def connect(database_url: str) -> sqlite3.Connection:
    conn = sqlite3.connect(database_url, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def _to_column(value):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _row_values(model, columns: tuple[str, ...]) -> tuple:
    data = model.model_dump()
    return tuple(_to_column(data[c]) for c in columns)


def _insert_sql(table: str, columns: tuple[str, ...]) -> str:
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({', '.join('?' * len(columns))})"


class SQLiteNoteStore(NoteStore):
    """Note log persisted to SQLite; filtering runs in SQL."""

    def __init__(self, conn: sqlite3.Connection, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._conn = conn
        with self._lock, conn:
            conn.executescript(_CREATE_NOTES)

    def append(self, note: ShiftNote) -> None:
        with self._lock, self._conn:
            self._conn.execute(_insert_sql("shift_notes", _NOTE_COLUMNS), _row_values(note, _NOTE_COLUMNS))
        logger.debug("Stored note %s", note.id)

    def all(self) -> list[ShiftNote]:
        return self.query()

    def query(
        self,
        shift: Shift | str | None = None,
        unit: str | None = None,
        note_type: NoteType | str | None = None,
        since: datetime | None = None,
    ) -> list[ShiftNote]:
        where: list[str] = []
        params: list = []

        if shift:
            where.append("shift = ?")
            params.append(Shift(shift).value)
        if unit:
            where.append("(unit = ? OR unit = ?)")
            params.extend([re.sub(r"\D", "", unit), unit])
        if note_type:
            where.append("type = ?")
            params.append(NoteType(note_type).value)

        sql = f"SELECT {', '.join(_NOTE_COLUMNS)} FROM shift_notes"
        if where:
            sql += f" WHERE {' AND '.join(where)}"
        sql += " ORDER BY seq ASC"

        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        notes = [ShiftNote(**dict(row)) for row in rows]
        # ISO strings with mixed offsets do not compare reliably in SQL
        if since is not None:
            notes = [n for n in notes if n.timestamp >= since]
        return notes

    def __len__(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM shift_notes").fetchone()[0]


class SQLiteReadingStore(ReadingStore):
    """Reading log persisted to SQLite."""

    def __init__(self, conn: sqlite3.Connection, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._conn = conn
        with self._lock, conn:
            conn.executescript(_CREATE_READINGS)

    def append(self, reading: EquipmentReading) -> None:
        with self._lock, self._conn:
            self._conn.execute(
                _insert_sql("equipment_readings", _READING_COLUMNS),
                _row_values(reading, _READING_COLUMNS),
            )
        logger.debug("Stored reading %s", reading.id)

    def all(self) -> list[EquipmentReading]:
        return self.query()

    def query(
        self,
        equipment_id: str | None = None,
        parameter: Parameter | str | None = None,
        since: datetime | None = None,
    ) -> list[EquipmentReading]:
        where: list[str] = []
        params: list = []

        if equipment_id is not None:
            where.append("equipment_id = ?")
            params.append(equipment_id)
        if parameter:
            where.append("parameter = ?")
            params.append(Parameter(parameter).value)

        sql = f"SELECT {', '.join(_READING_COLUMNS)} FROM equipment_readings"
        if where:
            sql += f" WHERE {' AND '.join(where)}"
        sql += " ORDER BY seq ASC"

        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        readings = [EquipmentReading(**dict(row)) for row in rows]
        if since is not None:
            readings = [r for r in readings if r.timestamp >= since]
        return readings

    def __len__(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM equipment_readings").fetchone()[0]


def sqlite_stores(conn: sqlite3.Connection) -> tuple[SQLiteNoteStore, SQLiteReadingStore]:
    """Note and reading stores on one connection, serialized by one lock."""
    lock = threading.RLock()
    return SQLiteNoteStore(conn, lock), SQLiteReadingStore(conn, lock)


def open_stores(database_url: str) -> tuple[NoteStore, ReadingStore]:
    """In-memory stores for ":memory:", SQLite-backed stores for a file path."""
    if database_url == ":memory:":
        return NoteStore(), ReadingStore()
    logger.info("Using SQLite storage at %s", database_url)
    return sqlite_stores(connect(database_url))

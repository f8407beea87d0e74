"""SQLite implementation of the run repository."""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import RecordConflictError
from .models import RunRecord
from .repository import RunRepository


class SQLiteRunRepository(RunRepository):
    """Persist run records using SQLite.

    Each save is a single INSERT or version-guarded UPDATE inside its own
    transaction, so readers never observe a half-written record.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._write_lock = threading.Lock()
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS runs (
                run_id TEXT PRIMARY KEY,
                workflow_id TEXT NOT NULL,
                status TEXT NOT NULL,
                step_index INTEGER NOT NULL,
                version INTEGER NOT NULL,
                record TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> int:
        with self._write_lock:
            cur = self._conn.cursor()
            try:
                cur.execute(query, params)
            except sqlite3.IntegrityError:
                self._conn.rollback()
                return 0
            self._conn.commit()
            return cur.rowcount

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        with self._write_lock:
            cur = self._conn.cursor()
            cur.execute(query, params)
            return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        with self._write_lock:
            cur = self._conn.cursor()
            cur.execute(query, params)
            return cur.fetchall()

    # ------------------------------------------------------------------
    # Repository API
    async def load(self, run_id: str) -> RunRecord | None:
        row = await asyncio.to_thread(
            self._fetchone, "SELECT record FROM runs WHERE run_id = ?", run_id
        )
        if not row:
            return None
        return RunRecord.model_validate_json(row["record"])

    async def save(self, record: RunRecord) -> None:
        expected = record.version
        candidate = record.model_copy(
            update={"version": expected + 1, "updated_at": datetime.now(timezone.utc)}
        )
        data = candidate.model_dump_json()
        if expected == 0:
            changed = await asyncio.to_thread(
                self._execute,
                "INSERT INTO runs (run_id, workflow_id, status, step_index, version, record, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                candidate.run_id,
                candidate.workflow_id,
                candidate.status.value,
                candidate.step_index,
                candidate.version,
                data,
                candidate.updated_at.isoformat(),
            )
        else:
            changed = await asyncio.to_thread(
                self._execute,
                """
                UPDATE runs
                SET status = ?, step_index = ?, version = ?, record = ?, updated_at = ?
                WHERE run_id = ? AND version = ?
                """,
                candidate.status.value,
                candidate.step_index,
                candidate.version,
                data,
                candidate.updated_at.isoformat(),
                candidate.run_id,
                expected,
            )
        if not changed:
            raise RecordConflictError(
                f"Run {record.run_id} was modified concurrently (expected version {expected})"
            )
        record.version = candidate.version
        record.updated_at = candidate.updated_at

    async def list_runs(self) -> list[RunRecord]:
        rows = await asyncio.to_thread(
            self._fetchall, "SELECT record FROM runs ORDER BY updated_at"
        )
        return [RunRecord.model_validate_json(row["record"]) for row in rows]

    def close(self) -> None:
        self._conn.close()

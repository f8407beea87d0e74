"""PostgreSQL implementation of the run repository."""

from __future__ import annotations

from datetime import datetime, timezone

import asyncpg

from ..errors import RecordConflictError
from .models import RunRecord
from .repository import RunRepository


class PostgresRunRepository(RunRepository):
    """Persist run records using PostgreSQL."""

    def __init__(self, dsn: str):
        self._dsn = dsn
        self._initialized = False

    async def _connect(self) -> asyncpg.Connection:
        conn = await asyncpg.connect(self._dsn)
        if not self._initialized:
            await self._ensure_schema(conn)
            self._initialized = True
        return conn

    async def _ensure_schema(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS runs (
                run_id TEXT PRIMARY KEY,
                workflow_id TEXT NOT NULL,
                status TEXT NOT NULL,
                step_index INTEGER NOT NULL,
                version INTEGER NOT NULL,
                record JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL
            )
            """
        )

    # ------------------------------------------------------------------
    async def load(self, run_id: str) -> RunRecord | None:
        conn = await self._connect()
        try:
            row = await conn.fetchrow(
                "SELECT record::text AS record FROM runs WHERE run_id = $1", run_id
            )
        finally:
            await conn.close()
        if not row:
            return None
        return RunRecord.model_validate_json(row["record"])

    async def save(self, record: RunRecord) -> None:
        expected = record.version
        candidate = record.model_copy(
            update={"version": expected + 1, "updated_at": datetime.now(timezone.utc)}
        )
        data = candidate.model_dump_json()
        conn = await self._connect()
        try:
            if expected == 0:
                result = await conn.execute(
                    """
                    INSERT INTO runs (run_id, workflow_id, status, step_index, version, record, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6::jsonb, $7)
                    ON CONFLICT (run_id) DO NOTHING
                    """,
                    candidate.run_id,
                    candidate.workflow_id,
                    candidate.status.value,
                    candidate.step_index,
                    candidate.version,
                    data,
                    candidate.updated_at,
                )
            else:
                result = await conn.execute(
                    """
                    UPDATE runs
                    SET status = $1, step_index = $2, version = $3, record = $4::jsonb, updated_at = $5
                    WHERE run_id = $6 AND version = $7
                    """,
                    candidate.status.value,
                    candidate.step_index,
                    candidate.version,
                    data,
                    candidate.updated_at,
                    candidate.run_id,
                    expected,
                )
        finally:
            await conn.close()
        # asyncpg returns the command tag, e.g. "UPDATE 1" or "INSERT 0 0"
        if result.rsplit(" ", 1)[-1] == "0":
            raise RecordConflictError(
                f"Run {record.run_id} was modified concurrently (expected version {expected})"
            )
        record.version = candidate.version
        record.updated_at = candidate.updated_at

    async def list_runs(self) -> list[RunRecord]:
        conn = await self._connect()
        try:
            rows = await conn.fetch(
                "SELECT record::text AS record FROM runs ORDER BY updated_at"
            )
        finally:
            await conn.close()
        return [RunRecord.model_validate_json(r["record"]) for r in rows]

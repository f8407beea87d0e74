"""In-memory implementation of the run repository."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict

from ..errors import RecordConflictError
from .models import RunRecord
from .repository import RunRepository


class InMemoryRunRepository(RunRepository):
    """Store run records in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts. Records are copied on the way in and
    out so callers never share an instance with the store.
    """

    def __init__(self) -> None:
        self._runs: Dict[str, RunRecord] = {}
        self._lock = asyncio.Lock()

    async def load(self, run_id: str) -> RunRecord | None:
        async with self._lock:
            record = self._runs.get(run_id)
            return record.model_copy(deep=True) if record else None

    async def save(self, record: RunRecord) -> None:
        async with self._lock:
            current = self._runs.get(record.run_id)
            stored_version = current.version if current else 0
            if stored_version != record.version:
                raise RecordConflictError(
                    f"Run {record.run_id} was modified concurrently "
                    f"(expected version {record.version}, found {stored_version})"
                )
            record.version += 1
            record.updated_at = datetime.now(timezone.utc)
            self._runs[record.run_id] = record.model_copy(deep=True)

    async def list_runs(self) -> list[RunRecord]:
        async with self._lock:
            return [r.model_copy(deep=True) for r in self._runs.values()]

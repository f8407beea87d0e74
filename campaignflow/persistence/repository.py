"""Repository abstraction for run record persistence."""

from __future__ import annotations

from typing import Protocol

from .models import RunRecord


class RunRepository(Protocol):
    """Protocol for run record persistence backends.

    ``save`` is atomic per run id and uses optimistic versioning: it succeeds
    only if the stored version equals ``record.version`` (or nothing is stored
    and ``record.version == 0``), then increments ``record.version``.
    Otherwise it raises :class:`~campaignflow.errors.RecordConflictError`.
    """

    async def load(self, run_id: str) -> RunRecord | None:
        """Retrieve the run record by id."""

    async def save(self, record: RunRecord) -> None:
        """Persist ``record`` if nobody else saved it in between."""

    async def list_runs(self) -> list[RunRecord]:
        """Return all persisted run records."""

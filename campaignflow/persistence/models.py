"""Data models for persisted run state."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RunStatus(str, Enum):
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    BAILED = "bailed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.BAILED, RunStatus.FAILED)


class StepEvent(BaseModel):
    """One entry in a run's append-only transition log."""

    step_name: str
    step_index: int
    outcome: str  # output, suspended, bailed, failed, resumed, cancelled
    at: datetime = Field(default_factory=_utcnow)


class RunRecord(BaseModel):
    """Persisted position, state and status of one workflow run."""

    run_id: str
    workflow_id: str
    status: RunStatus = RunStatus.RUNNING
    step_index: int = 0
    step_input: dict[str, Any] = Field(default_factory=dict)
    state: dict[str, Any] = Field(default_factory=dict)
    state_version: int = 0
    payload: Optional[Any] = None
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    version: int = 0
    history: list[StepEvent] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def log(self, step_name: str, step_index: int, outcome: str) -> None:
        self.history.append(
            StepEvent(step_name=step_name, step_index=step_index, outcome=outcome)
        )

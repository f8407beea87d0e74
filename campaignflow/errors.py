"""Error taxonomy for the workflow engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


class CampaignflowError(Exception):
    """Base class for all engine errors."""


@dataclass(frozen=True)
class Violation:
    """A single field-level validation failure."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}" if self.field else self.message


class ValidationError(CampaignflowError):
    """A value does not match its declared shape.

    Always recoverable: the run it belongs to (if any) is not advanced.
    """

    def __init__(self, violations: Iterable[Violation], shape_name: str | None = None):
        self.violations = list(violations)
        self.shape_name = shape_name
        super().__init__(self.message)

    @property
    def message(self) -> str:
        text = "; ".join(str(v) for v in self.violations)
        if self.shape_name:
            return f"Invalid {self.shape_name}: {text}"
        return text

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class NotFoundError(CampaignflowError):
    """No run (or workflow) exists for the given identifier."""

    def __init__(self, identifier: str, kind: str = "Run"):
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found")


class InvalidStateError(CampaignflowError):
    """The run is not in a state that allows the requested operation."""


class RecordConflictError(InvalidStateError):
    """A concurrent writer saved the run record first."""


class StepExecutionError(CampaignflowError):
    """A step body raised or returned an unrecoverable error."""

    def __init__(self, step_name: str, message: str):
        self.step_name = step_name
        super().__init__(f"Step {step_name} failed: {message}")


class DefinitionError(CampaignflowError):
    """A workflow definition is malformed. Raised at build time only."""

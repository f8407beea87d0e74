"""campaignflow: resumable marketing workflows driven by AI agents."""

from .errors import (
    CampaignflowError,
    DefinitionError,
    InvalidStateError,
    NotFoundError,
    RecordConflictError,
    StepExecutionError,
    ValidationError,
    Violation,
)
from .executor import RunHandle, WorkflowExecutor
from .persistence import RunRecord, RunStatus, get_repository
from .schema import Empty, Shape, validate
from .state import RunState
from .step import Bail, Fail, Step, StepContext, Suspend, step
from .workflow import WorkflowDefinition

__version__ = "0.1.0"
__all__ = [
    "Bail",
    "CampaignflowError",
    "DefinitionError",
    "Empty",
    "Fail",
    "InvalidStateError",
    "NotFoundError",
    "RecordConflictError",
    "RunHandle",
    "RunRecord",
    "RunState",
    "RunStatus",
    "Shape",
    "Step",
    "StepContext",
    "StepExecutionError",
    "Suspend",
    "ValidationError",
    "Violation",
    "WorkflowDefinition",
    "WorkflowExecutor",
    "get_repository",
    "step",
    "validate",
]

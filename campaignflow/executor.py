"""Run executor: drives workflow definitions through suspend, resume and bail."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Iterable, Optional, Union
from weakref import WeakValueDictionary

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .constants import CANCELLED_REASON
from .errors import (
    DefinitionError,
    InvalidStateError,
    NotFoundError,
    RecordConflictError,
    StepExecutionError,
    ValidationError,
)
from .persistence import RunRecord, RunRepository, RunStatus, get_repository
from .schema import instantiate, validate
from .state import RunState
from .step import Bail, Fail, Outcome, Step, StepContext, Suspend
from .workflow import WorkflowDefinition

logger = logging.getLogger(__name__)


class RunHandle(BaseModel):
    """Read-only view of a run returned to callers."""

    run_id: str
    workflow_id: str
    status: RunStatus
    step_index: int
    step_name: Optional[str] = None
    payload: Optional[Any] = None
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def from_record(
        cls, record: RunRecord, definition: Optional[WorkflowDefinition] = None
    ) -> "RunHandle":
        step_name = None
        if definition is not None and record.step_index < len(definition):
            step_name = definition.step_at(record.step_index).name
        return cls(
            run_id=record.run_id,
            workflow_id=record.workflow_id,
            status=record.status,
            step_index=record.step_index,
            step_name=step_name,
            payload=record.payload,
            result=record.result,
            error=record.error,
        )


class WorkflowExecutor:
    """Start, resume and cancel workflow runs.

    The executor is the only writer of run records. Each advance (one step
    invocation) results in exactly one save. A per-run lock covers claiming a
    run (load, check, mark running, save); the claimer then drives it alone,
    so a concurrent resume sees a running run and is rejected. The
    repository's optimistic version check covers writers in other processes.
    """

    def __init__(
        self,
        workflows: Iterable[WorkflowDefinition] = (),
        repository: RunRepository | None = None,
    ) -> None:
        self._workflows: dict[str, WorkflowDefinition] = {}
        for workflow in workflows:
            self.register(workflow)
        self._repository = repository or get_repository()
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()
        self._cancel_requests: set[str] = set()
        self._active: set[str] = set()

    # ------------------------------------------------------------------
    # Workflow registry
    def register(self, workflow: WorkflowDefinition) -> None:
        existing = self._workflows.get(workflow.id)
        if existing is not None and existing is not workflow:
            raise DefinitionError(f"Workflow {workflow.id} is already registered")
        self._workflows[workflow.id] = workflow

    def workflow(self, workflow_id: str) -> WorkflowDefinition:
        try:
            return self._workflows[workflow_id]
        except KeyError:
            raise NotFoundError(workflow_id, kind="Workflow") from None

    @property
    def workflows(self) -> list[WorkflowDefinition]:
        return list(self._workflows.values())

    def _resolve(self, workflow: Union[str, WorkflowDefinition]) -> WorkflowDefinition:
        if isinstance(workflow, WorkflowDefinition):
            self.register(workflow)
            return workflow
        return self.workflow(workflow)

    def _lock_for(self, run_id: str) -> asyncio.Lock:
        lock = self._locks.get(run_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[run_id] = lock
        return lock

    # ------------------------------------------------------------------
    # Public API
    async def start(
        self,
        workflow: Union[str, WorkflowDefinition],
        input_data: Any = None,
        *,
        run_id: Optional[str] = None,
    ) -> RunHandle:
        """Validate ``input_data`` and run the workflow until it stops.

        Raises:
            ValidationError: the input does not match the workflow's input
                shape. No run record is created.
            InvalidStateError: ``run_id`` is already taken.
        """
        definition = self._resolve(workflow)
        value = validate(definition.input_shape, input_data if input_data is not None else {})
        first_input = validate(definition.step_at(0).input_shape, value)

        run_id = run_id or str(uuid.uuid4())
        async with self._lock_for(run_id):
            record = RunRecord(run_id=run_id, workflow_id=definition.id, step_input=first_input)
            try:
                await self._repository.save(record)
            except RecordConflictError:
                raise InvalidStateError(f"Run {run_id} already exists") from None
            logger.info(f"Started workflow {definition.id} run_id={run_id}")
        await self._drive(definition, record)
        return RunHandle.from_record(record, definition)

    async def resume(
        self,
        run_id: str,
        resume_data: Any = None,
        *,
        step: Optional[str] = None,
    ) -> RunHandle:
        """Continue a suspended run with ``resume_data``.

        Args:
            run_id: The suspended run.
            resume_data: Value for the awaiting step's resume shape.
            step: Optional name of the step the data is meant for. When
                given it must match the awaiting step.

        Raises:
            NotFoundError: unknown run id.
            InvalidStateError: the run is not suspended (or awaits another step).
            ValidationError: ``resume_data`` does not match the resume shape;
                the run stays suspended.
        """
        async with self._lock_for(run_id):
            record = await self._repository.load(run_id)
            if record is None:
                raise NotFoundError(run_id)
            if record.status is not RunStatus.SUSPENDED:
                raise InvalidStateError(
                    f"Run {run_id} is {record.status.value}, only suspended runs can be resumed"
                )
            definition = self.workflow(record.workflow_id)
            awaiting = definition.step_at(record.step_index)
            if step is not None and step != awaiting.name:
                raise InvalidStateError(
                    f"Run {run_id} is waiting on step {awaiting.name}, not {step}"
                )
            value = validate(awaiting.resume_shape, resume_data if resume_data is not None else {})

            record.status = RunStatus.RUNNING
            record.payload = None
            record.log(awaiting.name, record.step_index, "resumed")
            await self._repository.save(record)
            logger.info(f"Resumed run_id={run_id} at step {awaiting.name}")
        await self._drive(definition, record, resume_data=value)
        return RunHandle.from_record(record, definition)

    async def cancel(self, run_id: str) -> RunHandle:
        """Request cancellation of a run this executor is driving.

        The run bails before its next step; a step already executing runs
        to completion.
        """
        record = await self._repository.load(run_id)
        if record is None:
            raise NotFoundError(run_id)
        if record.status is not RunStatus.RUNNING:
            raise InvalidStateError(
                f"Run {run_id} is {record.status.value}, only running runs can be cancelled"
            )
        if run_id not in self._active:
            raise InvalidStateError(f"Run {run_id} is not being driven by this executor")
        self._cancel_requests.add(run_id)
        logger.info(f"Cancellation requested for run_id={run_id}")
        return RunHandle.from_record(record, self._workflows.get(record.workflow_id))

    async def get_run(self, run_id: str) -> RunHandle:
        record = await self._repository.load(run_id)
        if record is None:
            raise NotFoundError(run_id)
        return RunHandle.from_record(record, self._workflows.get(record.workflow_id))

    async def list_runs(self) -> list[RunHandle]:
        records = await self._repository.list_runs()
        return [RunHandle.from_record(r, self._workflows.get(r.workflow_id)) for r in records]

    # ------------------------------------------------------------------
    # Advancing
    async def _drive(
        self,
        definition: WorkflowDefinition,
        record: RunRecord,
        resume_data: Optional[dict[str, Any]] = None,
    ) -> None:
        self._active.add(record.run_id)
        try:
            while record.status is RunStatus.RUNNING:
                await self._advance(definition, record, resume_data)
                resume_data = None
        finally:
            self._active.discard(record.run_id)
            self._cancel_requests.discard(record.run_id)

    async def _advance(
        self,
        definition: WorkflowDefinition,
        record: RunRecord,
        resume_data: Optional[dict[str, Any]],
    ) -> None:
        index = record.step_index
        step = definition.step_at(index)

        if record.run_id in self._cancel_requests:
            record.status = RunStatus.BAILED
            record.payload = {"reason": CANCELLED_REASON}
            record.log(step.name, index, "cancelled")
            await self._repository.save(record)
            logger.info(f"Run run_id={record.run_id} cancelled before step {step.name}")
            return

        state = RunState(record.state, record.state_version)
        ctx = StepContext(
            run_id=record.run_id,
            workflow_id=definition.id,
            step_name=step.name,
            input=instantiate(step.input_shape, record.step_input),
            state=state,
            resume_data=instantiate(step.resume_shape, resume_data),
            deps=definition.deps_for(step),
        )
        try:
            outcome = await step.execute(ctx)
        except Exception as exc:
            logger.error(f"Step {step.name} raised for run_id={record.run_id}: {exc!r}")
            outcome = Fail(f"{type(exc).__name__}: {exc}")

        self._apply(definition, record, step, state, outcome)
        await self._repository.save(record)

    def _apply(
        self,
        definition: WorkflowDefinition,
        record: RunRecord,
        step: Step,
        state: RunState,
        outcome: Outcome,
    ) -> None:
        """Fold one step outcome into ``record``."""
        index = record.step_index
        try:
            if isinstance(outcome, Fail):
                raise StepExecutionError(step.name, outcome.error)

            if isinstance(outcome, Suspend):
                payload = self._payload(step.suspend_shape, outcome.payload)
                self._commit_state(definition, record, state)
                record.status = RunStatus.SUSPENDED
                record.payload = payload
                record.log(step.name, index, "suspended")
                logger.info(f"Run run_id={record.run_id} suspended at step {step.name}")
                return

            if isinstance(outcome, Bail):
                payload = to_jsonable_python(outcome.payload)
                self._commit_state(definition, record, state)
                record.status = RunStatus.BAILED
                record.payload = payload
                record.log(step.name, index, "bailed")
                logger.info(f"Run run_id={record.run_id} bailed at step {step.name}")
                return

            output = validate(step.output_shape, outcome)
            last = index == len(definition) - 1
            if last:
                result = validate(definition.output_shape, output)
            else:
                next_input = validate(definition.step_at(index + 1).input_shape, output)
            self._commit_state(definition, record, state)
        except StepExecutionError as exc:
            self._fail(record, step, exc)
            return
        except ValidationError as exc:
            self._fail(record, step, StepExecutionError(step.name, str(exc)))
            return
        except PydanticSerializationError as exc:
            error = StepExecutionError(step.name, f"unserializable value: {exc}")
            self._fail(record, step, error)
            return

        record.log(step.name, index, "output")
        if last:
            record.status = RunStatus.COMPLETED
            record.result = result
            record.step_index = len(definition)
            record.step_input = {}
            logger.info(f"Workflow {definition.id} completed for run_id={record.run_id}")
        else:
            record.step_index = index + 1
            record.step_input = next_input
            logger.debug(
                f"Run run_id={record.run_id} advanced from {step.name} "
                f"to {definition.step_at(index + 1).name}"
            )

    @staticmethod
    def _fail(record: RunRecord, step: Step, error: StepExecutionError) -> None:
        record.status = RunStatus.FAILED
        record.error = str(error)
        record.log(step.name, record.step_index, "failed")
        logger.error(f"Run run_id={record.run_id} failed: {error}")

    @staticmethod
    def _payload(shape: Any, payload: Any) -> Any:
        if shape is None:
            return to_jsonable_python(payload)
        return validate(shape, payload)

    @staticmethod
    def _commit_state(
        definition: WorkflowDefinition, record: RunRecord, state: RunState
    ) -> None:
        snapshot = state.snapshot()
        if definition.state_shape is not None:
            validate(definition.state_shape, snapshot)
        record.state = snapshot
        record.state_version = state.version

"""Step contract: a named unit of work with typed boundaries."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from .schema import ShapeType
from .state import RunState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Suspend:
    """Pause the run and show ``payload`` to the external caller."""

    payload: Any = field(default_factory=dict)


@dataclass(frozen=True)
class Bail:
    """End the run early with a terminal ``payload``."""

    payload: Any = field(default_factory=dict)


@dataclass(frozen=True)
class Fail:
    """End the run with an unrecoverable error."""

    error: str


Outcome = Union[Suspend, Bail, Fail, Any]


class StepContext:
    """Everything a step body may touch during one invocation.

    ``deps`` holds only the collaborators the step declared in ``requires``.
    ``resume_data`` is ``None`` unless the run is being resumed at this step.
    """

    def __init__(
        self,
        *,
        run_id: str,
        workflow_id: str,
        step_name: str,
        input: Any,
        state: RunState,
        resume_data: Any = None,
        deps: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.run_id = run_id
        self.workflow_id = workflow_id
        self.step_name = step_name
        self.input = input
        self.state = state
        self.resume_data = resume_data
        self.deps = MappingProxyType(dict(deps or {}))

    @property
    def resuming(self) -> bool:
        return self.resume_data is not None

    def suspend(self, payload: Any = None) -> Suspend:
        return Suspend(payload if payload is not None else {})

    def bail(self, payload: Any = None) -> Bail:
        return Bail(payload if payload is not None else {})

    def fail(self, error: str) -> Fail:
        return Fail(error)


StepBody = Callable[[StepContext], Union[Outcome, Awaitable[Outcome]]]


class Step:
    """A named unit of work with declared input, output, resume and suspend shapes."""

    def __init__(
        self,
        name: str,
        body: StepBody,
        *,
        input_shape: ShapeType,
        output_shape: ShapeType,
        resume_shape: ShapeType = None,
        suspend_shape: ShapeType = None,
        requires: tuple[str, ...] | list[str] = (),
        description: str = "",
    ) -> None:
        if not name:
            raise ValueError("Step name must not be empty")
        self.name = name
        self.body = body
        self.input_shape = input_shape
        self.output_shape = output_shape
        self.resume_shape = resume_shape
        self.suspend_shape = suspend_shape
        self.requires = tuple(requires)
        self.description = description

    @property
    def resumable(self) -> bool:
        return self.resume_shape is not None

    async def execute(self, ctx: StepContext) -> Outcome:
        """Invoke the body, awaiting it when it is a coroutine function."""
        logger.debug(f"Executing step {self.name} for run_id={ctx.run_id}")
        result = self.body(ctx)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"Step({self.name!r})"


def step(
    name: Optional[str] = None,
    *,
    input: ShapeType,
    output: ShapeType,
    resume: ShapeType = None,
    suspend: ShapeType = None,
    requires: tuple[str, ...] | list[str] = (),
    description: Optional[str] = None,
) -> Callable[[StepBody], Step]:
    """Decorator turning a function into a :class:`Step`.

    The step name defaults to the function name with underscores replaced by
    hyphens; the description defaults to the docstring.
    """

    def decorator(fn: StepBody) -> Step:
        return Step(
            name or fn.__name__.replace("_", "-"),
            fn,
            input_shape=input,
            output_shape=output,
            resume_shape=resume,
            suspend_shape=suspend,
            requires=requires,
            description=description if description is not None else inspect.getdoc(fn) or "",
        )

    return decorator

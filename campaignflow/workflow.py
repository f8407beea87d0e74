"""Declarative workflow definitions."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from .errors import DefinitionError
from .schema import ShapeType, compatibility_problems
from .step import Step

logger = logging.getLogger(__name__)


class WorkflowDefinition:
    """Ordered steps plus the workflow's input, output and state shapes.

    Instances are immutable and shared by every run of the workflow. Use
    :meth:`build`, which checks the definition before returning it.
    """

    __slots__ = (
        "_id",
        "_description",
        "_steps",
        "_input_shape",
        "_output_shape",
        "_state_shape",
        "_collaborators",
        "_index",
    )

    def __init__(
        self,
        id: str,
        steps: Sequence[Step],
        input_shape: ShapeType,
        output_shape: ShapeType,
        state_shape: ShapeType = None,
        collaborators: Optional[Mapping[str, Any]] = None,
        description: str = "",
    ) -> None:
        self._id = id
        self._description = description
        self._steps = tuple(steps)
        self._input_shape = input_shape
        self._output_shape = output_shape
        self._state_shape = state_shape
        self._collaborators = MappingProxyType(dict(collaborators or {}))
        self._index = {s.name: i for i, s in enumerate(self._steps)}

    @classmethod
    def build(
        cls,
        id: str,
        steps: Sequence[Step],
        input_shape: ShapeType,
        output_shape: ShapeType,
        *,
        state_shape: ShapeType = None,
        collaborators: Optional[Mapping[str, Any]] = None,
        description: str = "",
    ) -> "WorkflowDefinition":
        """Build and check a workflow definition.

        Raises:
            DefinitionError: on duplicate step names, incompatible shapes
                between consecutive boundaries, or missing collaborators.
        """
        if not id:
            raise DefinitionError("Workflow id must not be empty")
        if not steps:
            raise DefinitionError(f"Workflow {id} has no steps")

        seen: set[str] = set()
        for s in steps:
            if s.name in seen:
                raise DefinitionError(f"Workflow {id} has duplicate step name {s.name!r}")
            seen.add(s.name)

        problems: list[str] = []
        boundaries = [("input", input_shape)]
        boundaries += [(s.name, s.output_shape) for s in steps]
        consumers = [(s.name, s.input_shape) for s in steps]
        consumers.append(("output", output_shape))
        for (producer_name, producer), (consumer_name, consumer) in zip(boundaries, consumers):
            for problem in compatibility_problems(producer, consumer):
                problems.append(f"{producer_name} -> {consumer_name}: {problem}")

        available = dict(collaborators or {})
        for s in steps:
            missing = [name for name in s.requires if name not in available]
            if missing:
                problems.append(f"step {s.name} requires missing collaborators {missing}")

        if problems:
            raise DefinitionError(f"Workflow {id} is invalid: " + "; ".join(problems))

        logger.debug(f"Built workflow {id} with steps {[s.name for s in steps]}")
        return cls(
            id,
            steps,
            input_shape,
            output_shape,
            state_shape=state_shape,
            collaborators=available,
            description=description,
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def description(self) -> str:
        return self._description

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def input_shape(self) -> ShapeType:
        return self._input_shape

    @property
    def output_shape(self) -> ShapeType:
        return self._output_shape

    @property
    def state_shape(self) -> ShapeType:
        return self._state_shape

    def step_at(self, index: int) -> Step:
        return self._steps[index]

    def index_of(self, step_name: str) -> int:
        return self._index[step_name]

    def deps_for(self, step: Step) -> dict[str, Any]:
        """Return only the collaborators ``step`` declared."""
        return {name: self._collaborators[name] for name in step.requires}

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"WorkflowDefinition({self._id!r}, steps={[s.name for s in self._steps]})"

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, Sequence

from pydantic import BaseModel
from pydantic_ai import Agent

if TYPE_CHECKING:
    from ..scorers import Scorer, ScoringHarness

logger = logging.getLogger(__name__)


class DecisionUnit(Protocol):
    """Blocking external call turning a prompt into text."""

    name: str

    async def generate(self, prompt: str) -> str:
        ...


class AgentDecisionUnit:
    """Expose a pydantic-ai ``Agent`` through the ``generate`` contract.

    Structured agent outputs (pydantic models) are returned as JSON text so
    step bodies can validate them against the same model. Every call is
    offered to the scoring harness, which samples it independently.
    """

    def __init__(
        self,
        agent: Agent[Any, Any],
        name: str | None = None,
        harness: ScoringHarness | None = None,
        scorers: Sequence[Scorer] = (),
    ) -> None:
        self.agent = agent
        self.name = name or getattr(agent, "name", None) or "agent"
        self._harness = harness
        self._scorers = tuple(scorers)

    async def generate(self, prompt: str) -> str:
        logger.debug(f"Agent {self.name} generating for prompt of {len(prompt)} chars")
        result = await self.agent.run(prompt)
        output = result.output
        if isinstance(output, BaseModel):
            text = output.model_dump_json()
        else:
            text = str(output)

        if self._harness is not None and self._scorers:
            await self._harness.observe(self.name, prompt, text, self._scorers)
        return text

    def __repr__(self) -> str:
        return f"AgentDecisionUnit({self.name!r})"

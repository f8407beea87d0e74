"""Sampled, observational evaluation of decision-unit calls."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ScoreResult(BaseModel):
    scorer: str
    unit: Optional[str] = None
    score: float = Field(ge=0.0, le=1.0)
    reason: str = ""
    scored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Scorer(Protocol):
    name: str

    async def score(self, input_text: str, output_text: str) -> ScoreResult:
        ...


class ScoringHarness:
    """Run scorers on a random sample of ``(input, output)`` pairs.

    Scoring never affects control flow: scorer failures are logged and
    dropped.
    """

    def __init__(self, sample_rate: float = 0.2, rng: Optional[random.Random] = None) -> None:
        if not 0.0 <= sample_rate <= 1.0:
            raise ValueError(f"sample_rate must be within [0, 1], got {sample_rate}")
        self.sample_rate = sample_rate
        self._rng = rng or random.Random()
        self.results: list[ScoreResult] = []

    def should_sample(self) -> bool:
        if self.sample_rate >= 1.0:
            return True
        return self._rng.random() < self.sample_rate

    async def observe(
        self,
        unit: str,
        input_text: str,
        output_text: str,
        scorers: Sequence[Scorer],
    ) -> list[ScoreResult]:
        if not scorers or not self.should_sample():
            return []

        recorded = []
        for scorer in scorers:
            try:
                result = await scorer.score(input_text, output_text)
            except Exception as exc:
                logger.warning(f"Scorer {scorer.name} failed for {unit}: {exc!r}")
                continue
            result = result.model_copy(update={"unit": unit})
            logger.info(f"Scored {unit} with {scorer.name}: {result.score:.2f}")
            recorded.append(result)
        self.results.extend(recorded)
        return recorded

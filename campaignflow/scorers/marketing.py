"""Scorers for the marketing agents.

The completeness scorer is a local heuristic; the other three ask a judge
model for a structured analysis and turn it into a score.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Generic, Type, TypeVar, Union

from pydantic import BaseModel, Field
from pydantic_ai import Agent
from pydantic_ai.models import Model

from .base import ScoreResult, Scorer

AnalysisT = TypeVar("AnalysisT", bound=BaseModel)

_WORD = re.compile(r"[a-z0-9]+")
_STOPWORDS = frozenset(
    "a an and are as at be by for from has have in is it its of on or that the this to use "
    "with your then first produce".split()
)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _terms(text: str) -> set[str]:
    return {w for w in _WORD.findall(text.lower()) if len(w) > 2 and w not in _STOPWORDS}


class CompletenessScorer:
    """Share of meaningful input terms that the output covers."""

    name = "analytics-completeness"

    async def score(self, input_text: str, output_text: str) -> ScoreResult:
        expected = _terms(input_text)
        if not expected:
            return ScoreResult(scorer=self.name, score=1.0, reason="No input terms to cover.")
        covered = expected & _terms(output_text)
        value = len(covered) / len(expected)
        missing = sorted(expected - covered)
        reason = f"Covered {len(covered)} of {len(expected)} input terms."
        if missing:
            reason += f" Missing: {', '.join(missing[:10])}."
        return ScoreResult(scorer=self.name, score=value, reason=reason)


class StrategyFormatAnalysis(BaseModel):
    has_three_ideas: bool
    two_seven_day: bool
    one_fourteen_day: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    explanation: str = ""


class PlanStructureAnalysis(BaseModel):
    has_objectives: bool
    has_audience: bool
    has_creatives: bool
    has_schedule: bool
    has_metrics: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    explanation: str = ""


class RelevancyAnalysis(BaseModel):
    relevant: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    explanation: str = ""


def strategy_format_score(analysis: StrategyFormatAnalysis) -> float:
    ok = analysis.has_three_ideas and analysis.two_seven_day and analysis.one_fourteen_day
    return _clamp(0.7 + 0.3 * analysis.confidence) if ok else 0.0


def plan_structure_score(analysis: PlanStructureAnalysis) -> float:
    sections = [
        analysis.has_objectives,
        analysis.has_audience,
        analysis.has_creatives,
        analysis.has_schedule,
        analysis.has_metrics,
    ]
    return (sum(sections) / len(sections)) * (0.8 + 0.2 * analysis.confidence)


def relevancy_score(analysis: RelevancyAnalysis) -> float:
    return _clamp(0.7 + 0.3 * analysis.confidence) if analysis.relevant else 0.0


class JudgeScorer(Generic[AnalysisT]):
    """Score a pair by asking a judge agent for a structured analysis."""

    def __init__(
        self,
        name: str,
        label: str,
        judge: Agent[Any, AnalysisT],
        prompt: Callable[[str, str], str],
        score_fn: Callable[[AnalysisT], float],
    ) -> None:
        self.name = name
        self.label = label
        self._judge = judge
        self._prompt = prompt
        self._score_fn = score_fn

    async def score(self, input_text: str, output_text: str) -> ScoreResult:
        result = await self._judge.run(self._prompt(input_text, output_text))
        analysis = result.output
        value = self._score_fn(analysis)
        return ScoreResult(
            scorer=self.name,
            score=value,
            reason=f"{self.label}: score={value}. {analysis.explanation}".strip(),
        )


def _judge(model: Union[str, Model], output_type: Type[AnalysisT], instructions: str) -> Agent:
    return Agent(
        model, output_type=output_type, instructions=instructions, defer_model_check=True
    )


def _strategy_prompt(user: str, assistant: str) -> str:
    return (
        f'User (analytics context): """{user}"""\n'
        f'Assistant (strategy response): """{assistant}"""\n'
        "Does the assistant recommend exactly 3 campaign ideas, "
        "with 2 for 7 days and 1 for 14 days?"
    )


def _plan_prompt(user: str, assistant: str) -> str:
    return (
        f'Plan text: """{assistant}"""\n'
        "Does it include: objectives/goals/KPIs, audience/targeting, creatives/ad format, "
        "schedule/timeline, success metrics?"
    )


def _relevancy_prompt(user: str, assistant: str) -> str:
    return (
        f'User (campaign/monitoring request): """{user}"""\n'
        f'Assistant (summary + suggestions): """{assistant}"""\n'
        "Are the suggestions relevant to the campaign and KPIs?"
    )


def build_scorers(judge_model: Union[str, Model]) -> dict[str, list[Scorer]]:
    """Scorers keyed by the collaborator name of the agent they evaluate."""
    return {
        "analytics_agent": [CompletenessScorer()],
        "strategy_agent": [
            JudgeScorer(
                "strategy-campaign-format",
                "Strategy format",
                _judge(
                    judge_model,
                    StrategyFormatAnalysis,
                    "You evaluate whether a campaign strategy response contains exactly 3 "
                    "campaign ideas, with 2 ideas for 7 days and 1 idea for 14 days.",
                ),
                _strategy_prompt,
                strategy_format_score,
            )
        ],
        "planning_agent": [
            JudgeScorer(
                "plan-structure",
                "Plan structure",
                _judge(
                    judge_model,
                    PlanStructureAnalysis,
                    "You evaluate whether a campaign plan includes: objectives/KPIs, audience, "
                    "creatives, schedule/timeline, and success metrics.",
                ),
                _plan_prompt,
                plan_structure_score,
            )
        ],
        "monitoring_agent": [
            JudgeScorer(
                "monitoring-relevancy",
                "Monitoring relevancy",
                _judge(
                    judge_model,
                    RelevancyAnalysis,
                    "You evaluate whether the assistant's daily summary and optimization "
                    "suggestions are relevant to the campaign and the KPIs mentioned.",
                ),
                _relevancy_prompt,
                relevancy_score,
            )
        ],
    }

import random

import pytest
from pydantic_ai import Agent
from pydantic_ai.models.test import TestModel

from campaignflow.scorers import (
    CompletenessScorer,
    JudgeScorer,
    PlanStructureAnalysis,
    RelevancyAnalysis,
    ScoreResult,
    ScoringHarness,
    StrategyFormatAnalysis,
    build_scorers,
    plan_structure_score,
    relevancy_score,
    strategy_format_score,
)


class BrokenScorer:
    name = "broken"

    async def score(self, input_text, output_text):
        raise RuntimeError("judge unavailable")


class FixedScorer:
    name = "fixed"

    async def score(self, input_text, output_text):
        return ScoreResult(scorer=self.name, score=0.5, reason="fixed")


def test_strategy_format_score():
    ok = StrategyFormatAnalysis(has_three_ideas=True, two_seven_day=True, one_fourteen_day=True)
    assert strategy_format_score(ok) == pytest.approx(1.0)
    assert strategy_format_score(ok.model_copy(update={"confidence": 0.0})) == pytest.approx(0.7)
    missing = ok.model_copy(update={"one_fourteen_day": False})
    assert strategy_format_score(missing) == 0.0


def test_plan_structure_score():
    analysis = PlanStructureAnalysis(
        has_objectives=True,
        has_audience=True,
        has_creatives=True,
        has_schedule=False,
        has_metrics=False,
        confidence=0.5,
    )
    assert plan_structure_score(analysis) == pytest.approx(0.6 * 0.9)


def test_relevancy_score():
    assert relevancy_score(RelevancyAnalysis(relevant=True, confidence=0.5)) == pytest.approx(0.85)
    assert relevancy_score(RelevancyAnalysis(relevant=False)) == 0.0


@pytest.mark.asyncio
async def test_completeness_scorer_measures_term_coverage():
    scorer = CompletenessScorer()
    result = await scorer.score("facebook instagram conversions", "Facebook reach grew strongly")
    assert result.scorer == "analytics-completeness"
    assert result.score == pytest.approx(1 / 3)
    assert "conversions" in result.reason

    empty = await scorer.score("a an the", "anything")
    assert empty.score == 1.0


@pytest.mark.asyncio
async def test_judge_scorer_uses_structured_analysis():
    judge = Agent(
        TestModel(custom_output_args={"relevant": True, "confidence": 0.0, "explanation": "ok"}),
        output_type=RelevancyAnalysis,
    )
    scorer = JudgeScorer(
        "monitoring-relevancy",
        "Monitoring relevancy",
        judge,
        lambda user, assistant: f"{user}\n{assistant}",
        relevancy_score,
    )
    result = await scorer.score("campaign cmp_1", "Pause ad set B")
    assert result.score == pytest.approx(0.7)
    assert result.reason == "Monitoring relevancy: score=0.7. ok"


def test_harness_rejects_invalid_sample_rate():
    with pytest.raises(ValueError):
        ScoringHarness(sample_rate=1.5)


@pytest.mark.asyncio
async def test_harness_sampling_bounds():
    never = ScoringHarness(sample_rate=0.0)
    assert await never.observe("analytics_agent", "in", "out", [FixedScorer()]) == []
    assert never.results == []

    always = ScoringHarness(sample_rate=1.0)
    results = await always.observe("analytics_agent", "in", "out", [FixedScorer()])
    assert [r.unit for r in results] == ["analytics_agent"]
    assert always.results == results


@pytest.mark.asyncio
async def test_harness_samples_roughly_at_rate():
    harness = ScoringHarness(sample_rate=0.2, rng=random.Random(7))
    for _ in range(500):
        await harness.observe("planning_agent", "in", "out", [FixedScorer()])
    assert 50 <= len(harness.results) <= 150


@pytest.mark.asyncio
async def test_scorer_failures_do_not_propagate():
    harness = ScoringHarness(sample_rate=1.0)
    results = await harness.observe("planning_agent", "in", "out", [BrokenScorer(), FixedScorer()])
    assert [r.scorer for r in results] == ["fixed"]


def test_build_scorers_covers_each_agent():
    scorers = build_scorers(TestModel())
    assert sorted(scorers) == [
        "analytics_agent",
        "monitoring_agent",
        "planning_agent",
        "strategy_agent",
    ]
    assert scorers["strategy_agent"][0].name == "strategy-campaign-format"
    assert scorers["planning_agent"][0].name == "plan-structure"

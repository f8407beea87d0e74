import pytest
from pydantic_ai import Agent
from pydantic_ai.models.test import TestModel

from campaignflow.agent import AgentDecisionUnit, DailyReport, build_agents, build_decision_units
from campaignflow.config import CampaignflowConfig, ScoringConfig
from campaignflow.scorers import CompletenessScorer, ScoringHarness


@pytest.mark.asyncio
async def test_text_output_is_returned_verbatim():
    unit = AgentDecisionUnit(
        Agent(TestModel(custom_output_text="## Objectives\nGrow sign-ups."), name="planner")
    )
    assert unit.name == "planner"
    assert await unit.generate("Plan a retargeting campaign") == "## Objectives\nGrow sign-ups."


@pytest.mark.asyncio
async def test_structured_output_is_returned_as_json():
    agent = Agent(
        TestModel(
            call_tools=[],
            custom_output_args={"summary": "CTR on target.", "suggestions": "1. Scale winners."},
        ),
        output_type=DailyReport,
    )
    unit = AgentDecisionUnit(agent, name="monitoring_agent")

    text = await unit.generate("Daily check for cmp_1")

    assert DailyReport.model_validate_json(text) == DailyReport(
        summary="CTR on target.", suggestions="1. Scale winners."
    )


@pytest.mark.asyncio
async def test_calls_are_offered_to_the_harness():
    harness = ScoringHarness(sample_rate=1.0)
    unit = AgentDecisionUnit(
        Agent(TestModel(custom_output_text="facebook reach is up")),
        name="analytics_agent",
        harness=harness,
        scorers=[CompletenessScorer()],
    )

    await unit.generate("facebook reach")

    assert len(harness.results) == 1
    assert harness.results[0].unit == "analytics_agent"
    assert harness.results[0].score == 1.0


def test_build_agents_registers_tools():
    agents = build_agents(TestModel())
    assert sorted(agents) == [
        "analytics_agent",
        "monitoring_agent",
        "planning_agent",
        "strategy_agent",
    ]
    assert agents["monitoring_agent"].name == "monitoring_agent"


@pytest.mark.asyncio
async def test_decision_units_share_one_harness():
    config = CampaignflowConfig(scoring=ScoringConfig(sample_rate=1.0))
    units = build_decision_units(
        config, model=TestModel(custom_output_text="Three campaign ideas."), judge_model=TestModel()
    )

    strategy = units["strategy_agent"]
    assert await strategy.generate("GA users grew") == "Three campaign ideas."
    assert units["analytics_agent"]._harness is strategy._harness
    assert [s.name for s in strategy._scorers] == ["strategy-campaign-format"]


def test_scoring_can_be_disabled():
    config = CampaignflowConfig(scoring=ScoringConfig(enabled=False))
    units = build_decision_units(config, model=TestModel())
    assert all(unit._harness is None for unit in units.values())

import pytest
from pydantic_ai.models.test import TestModel

from campaignflow import RunStatus, ValidationError, WorkflowExecutor
from campaignflow.agent import build_decision_units
from campaignflow.config import CampaignflowConfig, ScoringConfig
from campaignflow.workflows import MONITOR_WORKFLOW_ID, build_monitor_workflow


@pytest.mark.asyncio
async def test_daily_report_completes_run(collaborators, units, repo):
    executor = WorkflowExecutor([build_monitor_workflow(collaborators)], repository=repo)

    handle = await executor.start(MONITOR_WORKFLOW_ID, {"campaign_id": "cmp_123", "day": 3})

    assert handle.status is RunStatus.COMPLETED
    assert handle.result["summary"].startswith("CTR 0.031")
    assert handle.result["suggestions"].startswith("1. Pause")
    assert "cmp_123 (day 3 of campaign)" in units["monitoring_agent"].prompts[0]
    record = await repo.load(handle.run_id)
    assert record.state["last_report"] == handle.result


@pytest.mark.asyncio
async def test_malformed_report_fails_run(collaborators, repo, scripted_unit):
    collaborators["monitoring_agent"] = scripted_unit(
        "monitoring_agent", "**Summary** all good\n**Suggestions** none"
    )
    executor = WorkflowExecutor([build_monitor_workflow(collaborators)], repository=repo)

    handle = await executor.start(MONITOR_WORKFLOW_ID, {"campaign_id": "cmp_123"})

    assert handle.status is RunStatus.FAILED
    assert "malformed report" in handle.error
    assert (await repo.load(handle.run_id)).state == {}


@pytest.mark.asyncio
async def test_invalid_campaign_id_is_rejected(collaborators, repo):
    executor = WorkflowExecutor([build_monitor_workflow(collaborators)], repository=repo)

    with pytest.raises(ValidationError) as exc_info:
        await executor.start(MONITOR_WORKFLOW_ID, {"campaign_id": "drop table;"})
    assert exc_info.value.fields == ["campaign_id"]


@pytest.mark.asyncio
async def test_monitoring_agent_structured_output(collaborators, repo):
    config = CampaignflowConfig(scoring=ScoringConfig(enabled=False))
    units = build_decision_units(
        config,
        model=TestModel(
            call_tools=[],
            custom_output_args={
                "summary": "CTR 0.041 above target 0.035.",
                "suggestions": "1. Scale ad set A. 2. Test a new hook.",
            },
        ),
    )
    collaborators["monitoring_agent"] = units["monitoring_agent"]
    executor = WorkflowExecutor([build_monitor_workflow(collaborators)], repository=repo)

    handle = await executor.start(MONITOR_WORKFLOW_ID, {"campaign_id": "cmp_123"})

    assert handle.status is RunStatus.COMPLETED
    assert handle.result == {
        "summary": "CTR 0.041 above target 0.035.",
        "suggestions": "1. Scale ad set A. 2. Test a new hook.",
    }

import pytest

from campaignflow import RunStatus, WorkflowExecutor
from campaignflow.persistence import SQLiteRunRepository
from campaignflow.workflows import CAMPAIGN_WORKFLOW_ID, build_campaign_workflow


@pytest.mark.asyncio
async def test_suspended_run_resumes_after_restart(tmp_path, collaborators):
    db_path = tmp_path / "runs.db"

    repo = SQLiteRunRepository(db_path)
    executor = WorkflowExecutor([build_campaign_workflow(collaborators)], repository=repo)
    handle = await executor.start(
        CAMPAIGN_WORKFLOW_ID, {"date_range": "last_7_days", "sources": ["instagram"]}
    )
    assert handle.status is RunStatus.SUSPENDED
    repo.close()

    # simulate a process restart: fresh repository and executor
    repo = SQLiteRunRepository(db_path)
    executor = WorkflowExecutor([build_campaign_workflow(collaborators)], repository=repo)

    handle = await executor.resume(handle.run_id, {"selected_index": 1})
    assert handle.step_name == "user-approve-plan"
    handle = await executor.resume(handle.run_id, {"approved": True})
    assert handle.status is RunStatus.COMPLETED

    record = await repo.load(handle.run_id)
    assert record.state["analytics_summary"].startswith("GA: 12500 users")
    assert [e.outcome for e in record.history].count("resumed") == 2
    assert record.version == len(record.history) + 1
    repo.close()

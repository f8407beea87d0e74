"""Example: run the campaign workflow end to end, answering prompts on stdin.

Requires credentials for the configured agent model (e.g. OPENAI_API_KEY).
"""

import asyncio
import json

from campaignflow import RunStatus, WorkflowExecutor, get_repository
from campaignflow.workflows import CAMPAIGN_WORKFLOW_ID, build_collaborators, build_workflows


async def main():
    executor = WorkflowExecutor(build_workflows(build_collaborators()), repository=get_repository())

    handle = await executor.start(
        CAMPAIGN_WORKFLOW_ID,
        {"date_range": "last_30_days", "sources": ["ga", "facebook", "instagram"]},
    )
    while handle.status is RunStatus.SUSPENDED:
        print(json.dumps(handle.payload, indent=2))
        if handle.step_name == "user-select-campaign":
            data = {"selected_index": int(input("Campaign index: "))}
        else:
            data = {"approved": input("Approve plan? [y/N] ").strip().lower() == "y"}
        handle = await executor.resume(handle.run_id, data)

    print(f"Run {handle.run_id} finished: {handle.status.value}")
    print(json.dumps(handle.result or handle.payload, indent=2))


if __name__ == "__main__":
    asyncio.run(main())

"""Example: daily monitoring check for one campaign, suitable for a cron job."""

import asyncio
import sys

from campaignflow import WorkflowExecutor
from campaignflow.workflows import MONITOR_WORKFLOW_ID, build_collaborators, build_monitor_workflow


async def main():
    campaign_id = sys.argv[1]
    day = int(sys.argv[2]) if len(sys.argv) > 2 else None

    executor = WorkflowExecutor([build_monitor_workflow(build_collaborators())])
    handle = await executor.start(MONITOR_WORKFLOW_ID, {"campaign_id": campaign_id, "day": day})

    if handle.error:
        print(handle.error)
        return
    print(handle.result["summary"])
    print(handle.result["suggestions"])


if __name__ == "__main__":
    asyncio.run(main())

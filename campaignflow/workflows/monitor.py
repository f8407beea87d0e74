"""Daily monitoring workflow, run per campaign (e.g. from cron)."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from ..agent import DailyReport
from ..schema import Shape
from ..step import StepContext, step
from ..tools.campaigns import CAMPAIGN_ID_PATTERN
from ..workflow import WorkflowDefinition
from .common import ask

MONITOR_WORKFLOW_ID = "monitor-daily-workflow"


class MonitorInput(Shape):
    campaign_id: str = Field(min_length=1, max_length=128, pattern=CAMPAIGN_ID_PATTERN)
    day: Optional[int] = Field(default=None, ge=1, description="Day number of the campaign")


@step(
    "monitor-daily",
    input=MonitorInput,
    output=DailyReport,
    requires=("monitoring_agent",),
    description="Fetch campaign KPIs, compare to target, and produce a daily summary "
    "with 2-4 optimization suggestions",
)
async def monitor_daily(ctx: StepContext):
    data: MonitorInput = ctx.input
    day_context = f" (day {data.day} of campaign)" if data.day is not None else ""
    prompt = (
        f"Daily performance check for campaign {data.campaign_id}{day_context}.\n\n"
        "1. Use get_campaign_analytics to fetch current KPIs (CTR, conversions, spend, etc.).\n"
        "2. Use compare_kpi to compare current CTR to target CTR.\n"
        "3. Return a JSON object with two fields: `summary` (key metrics, trend vs target, "
        "whether the campaign is on track) and `suggestions` (2-4 numbered, actionable "
        "suggestions referencing actual numbers)."
    )
    text = await ask(ctx.deps["monitoring_agent"], prompt)
    try:
        report = DailyReport.model_validate_json(text)
    except PydanticValidationError as exc:
        return ctx.fail(f"monitoring agent returned malformed report: {exc.error_count()} errors")
    ctx.state.set("last_report", report)
    return report


def build_monitor_workflow(collaborators: Mapping[str, Any]) -> WorkflowDefinition:
    return WorkflowDefinition.build(
        MONITOR_WORKFLOW_ID,
        [monitor_daily],
        input_shape=MonitorInput,
        output_shape=DailyReport,
        collaborators=collaborators,
        description="Monitor daily campaign performance with optimization suggestions.",
    )

"""Campaign workflow.

Analyze analytics, recommend campaigns, wait for the user to pick one,
plan it, wait for approval, then create the campaign.
"""

from __future__ import annotations

import json
import time
from typing import Any, Literal, Mapping, Optional

from pydantic import Field

from ..config import CampaignConfig
from ..schema import Shape
from ..step import StepContext, step
from ..tools import CampaignIdea, CampaignIdeas
from ..tools.analytics import AnalyticsSource
from ..workflow import WorkflowDefinition
from .common import ask

CAMPAIGN_WORKFLOW_ID = "campaign-workflow"


class CampaignInput(Shape):
    date_range: str = Field(min_length=1, description="e.g. last_30_days")
    sources: list[AnalyticsSource] = Field(min_length=1)
    campaign_name: Optional[str] = Field(default=None, min_length=1)
    budget: Optional[float] = Field(default=None, gt=0)


class CampaignState(Shape):
    analytics_summary: Optional[str] = None
    campaign_name: Optional[str] = None
    budget: Optional[float] = None
    selected_idea: Optional[CampaignIdea] = None
    plan: Optional[str] = None
    campaign_id: Optional[str] = None


class AnalyticsSummary(Shape):
    summary: str


class Selection(Shape):
    selected_index: int
    selected_idea: CampaignIdea


class SelectionResume(Shape):
    selected_index: int = Field(ge=0)


class SelectionRequest(Shape):
    reason: str
    ideas: list[CampaignIdea]


class Plan(Shape):
    plan: str


class ApprovalResume(Shape):
    approved: bool


class ApprovalRequest(Shape):
    reason: str
    plan: str


class Approval(Shape):
    approved: Literal[True]


class CampaignOutcome(Shape):
    campaign_id: str
    status: str


class CampaignResult(Shape):
    campaign_id: Optional[str] = None
    status: str


@step(
    "analyze-analytics",
    input=CampaignInput,
    output=AnalyticsSummary,
    requires=("analytics_agent",),
    description="Fetch and analyze analytics from requested sources",
)
async def analyze_analytics(ctx: StepContext) -> AnalyticsSummary:
    data: CampaignInput = ctx.input
    ctx.state.update({"campaign_name": data.campaign_name, "budget": data.budget})
    prompt = (
        f"Analyze analytics for date range: {data.date_range}, "
        f"sources: {', '.join(data.sources)}. "
        "Use fetch_analytics first, then produce a structured summary."
    )
    summary = await ask(ctx.deps["analytics_agent"], prompt)
    ctx.state.set("analytics_summary", summary)
    return AnalyticsSummary(summary=summary)


@step(
    "recommend-campaigns",
    input=AnalyticsSummary,
    output=CampaignIdeas,
    requires=("recommender",),
    description="Recommend 3 campaign ideas (2x7d, 1x14d)",
)
async def recommend_campaigns(ctx: StepContext) -> dict[str, Any]:
    return await ctx.deps["recommender"].fetch({"analytics_summary": ctx.input.summary})


@step(
    "user-select-campaign",
    input=CampaignIdeas,
    output=Selection,
    resume=SelectionResume,
    suspend=SelectionRequest,
    description="Wait for user to select a campaign",
)
def user_select_campaign(ctx: StepContext):
    ideas = ctx.input.ideas
    choices = ", ".join(str(i) for i in range(len(ideas)))
    if ctx.resume_data is None:
        return ctx.suspend(
            SelectionRequest(reason=f"Please select a campaign ({choices}).", ideas=ideas)
        )

    index = ctx.resume_data.selected_index
    if index >= len(ideas):
        return ctx.suspend(
            SelectionRequest(
                reason=f"Selection {index} is out of range. Please select a campaign ({choices}).",
                ideas=ideas,
            )
        )
    ctx.state.set("selected_idea", ideas[index])
    return Selection(selected_index=index, selected_idea=ideas[index])


@step(
    "create-detailed-plan",
    input=Selection,
    output=Plan,
    requires=("planning_agent",),
    description="Create a detailed execution plan for the selected campaign",
)
async def create_detailed_plan(ctx: StepContext) -> Plan:
    idea = json.dumps(ctx.input.selected_idea.model_dump(), indent=2)
    prompt = (
        f"Create a detailed execution plan for this campaign idea: {idea}. "
        "Include objectives, audience, creatives, schedule, budget allocation, "
        "and success metrics in markdown."
    )
    plan = await ask(ctx.deps["planning_agent"], prompt)
    ctx.state.set("plan", plan)
    return Plan(plan=plan)


@step(
    "user-approve-plan",
    input=Plan,
    output=Approval,
    resume=ApprovalResume,
    suspend=ApprovalRequest,
    description="Wait for user to approve the plan",
)
def user_approve_plan(ctx: StepContext):
    if ctx.resume_data is None:
        return ctx.suspend(
            ApprovalRequest(
                reason="Please review and approve or reject the plan.", plan=ctx.input.plan
            )
        )
    if not ctx.resume_data.approved:
        return ctx.bail({"reason": "User rejected the plan."})
    return Approval(approved=True)


@step(
    "execute-campaign",
    input=Approval,
    output=CampaignOutcome,
    requires=("campaign_creator", "campaign_config"),
    description="Create the campaign",
)
async def execute_campaign(ctx: StepContext) -> dict[str, Any]:
    defaults: CampaignConfig = ctx.deps["campaign_config"]
    name = ctx.state.get("campaign_name") or f"Campaign {int(time.time() * 1000)}"
    budget = ctx.state.get("budget") or defaults.default_budget
    created = await ctx.deps["campaign_creator"].fetch({"name": name, "budget": budget})
    ctx.state.set("campaign_id", created["campaign_id"])
    return created


CAMPAIGN_STEPS = (
    analyze_analytics,
    recommend_campaigns,
    user_select_campaign,
    create_detailed_plan,
    user_approve_plan,
    execute_campaign,
)


def build_campaign_workflow(collaborators: Mapping[str, Any]) -> WorkflowDefinition:
    return WorkflowDefinition.build(
        CAMPAIGN_WORKFLOW_ID,
        CAMPAIGN_STEPS,
        input_shape=CampaignInput,
        output_shape=CampaignResult,
        state_shape=CampaignState,
        collaborators=collaborators,
        description="Analyze analytics, recommend campaigns, get user selection and plan "
        "approval, then execute.",
    )

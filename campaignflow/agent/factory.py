"""Construction of the marketing agents and their decision-unit wrappers."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from pydantic_ai import Agent
from pydantic_ai.models import Model

from ..config import CampaignflowConfig, load_config
from ..scorers import ScoringHarness, build_scorers
from ..tools import compare_kpi, fetch_analytics, get_campaign_analytics, recommend_campaigns
from .instructions import (
    ANALYTICS_INSTRUCTIONS,
    MONITORING_INSTRUCTIONS,
    PLANNING_INSTRUCTIONS,
    STRATEGY_INSTRUCTIONS,
)
from .outputs import DailyReport
from .wrapper import AgentDecisionUnit

logger = logging.getLogger(__name__)

ModelLike = Union[str, Model]


def build_agents(model: ModelLike) -> dict[str, Agent[Any, Any]]:
    """Create the four marketing agents keyed by collaborator name."""
    return {
        "analytics_agent": Agent(
            model,
            name="analytics_agent",
            defer_model_check=True,
            instructions=ANALYTICS_INSTRUCTIONS,
            tools=[fetch_analytics, get_campaign_analytics],
        ),
        "strategy_agent": Agent(
            model,
            name="strategy_agent",
            defer_model_check=True,
            instructions=STRATEGY_INSTRUCTIONS,
            tools=[recommend_campaigns],
        ),
        "planning_agent": Agent(
            model,
            name="planning_agent",
            defer_model_check=True,
            instructions=PLANNING_INSTRUCTIONS,
        ),
        "monitoring_agent": Agent(
            model,
            name="monitoring_agent",
            defer_model_check=True,
            instructions=MONITORING_INSTRUCTIONS,
            tools=[get_campaign_analytics, compare_kpi],
            output_type=DailyReport,
        ),
    }


def build_decision_units(
    config: Optional[CampaignflowConfig] = None,
    model: Optional[ModelLike] = None,
    judge_model: Optional[ModelLike] = None,
) -> dict[str, AgentDecisionUnit]:
    """Wrap each agent as a decision unit with its sampled scorers attached."""
    config = config or load_config()
    agents = build_agents(model or config.agents.model)

    harness = None
    scorers: dict[str, list] = {}
    if config.scoring.enabled:
        harness = ScoringHarness(sample_rate=config.scoring.sample_rate)
        scorers = build_scorers(judge_model or config.scoring.judge_model)

    logger.debug(f"Built decision units {sorted(agents)} (scoring={harness is not None})")
    return {
        name: AgentDecisionUnit(
            agent, name=name, harness=harness, scorers=scorers.get(name, ())
        )
        for name, agent in agents.items()
    }

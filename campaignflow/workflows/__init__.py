"""Marketing workflows and their collaborator wiring."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..agent import build_decision_units
from ..config import CampaignflowConfig, load_config
from ..tools import default_producers
from ..workflow import WorkflowDefinition
from .campaign import CAMPAIGN_WORKFLOW_ID, build_campaign_workflow
from .monitor import MONITOR_WORKFLOW_ID, build_monitor_workflow


def build_collaborators(config: Optional[CampaignflowConfig] = None) -> dict[str, Any]:
    """Decision units, data producers and settings keyed by collaborator name."""
    config = config or load_config()
    collaborators: dict[str, Any] = {}
    collaborators.update(build_decision_units(config))
    collaborators.update(default_producers())
    collaborators["campaign_config"] = config.campaign
    return collaborators


def build_workflows(collaborators: Mapping[str, Any]) -> list[WorkflowDefinition]:
    return [
        build_campaign_workflow(collaborators),
        build_monitor_workflow(collaborators),
    ]


__all__ = [
    "CAMPAIGN_WORKFLOW_ID",
    "MONITOR_WORKFLOW_ID",
    "build_campaign_workflow",
    "build_collaborators",
    "build_monitor_workflow",
    "build_workflows",
]

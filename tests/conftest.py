"""Shared fixtures: scripted decision units and campaign collaborators."""

from __future__ import annotations

import pytest

import campaignflow.persistence as persistence
import campaignflow.utils.retry as retry
from campaignflow.config import CampaignConfig
from campaignflow.persistence import InMemoryRunRepository
from campaignflow.tools import default_producers

MONITOR_REPLY = (
    '{"summary": "CTR 0.031 vs target 0.035, slightly below target.", '
    '"suggestions": "1. Pause the weakest ad set. 2. Refresh creatives."}'
)


class ScriptedUnit:
    """Decision unit returning canned replies; exceptions in the script are raised."""

    def __init__(self, name: str, *replies):
        self.name = name
        self._replies = list(replies)
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    monkeypatch.setattr(persistence, "_repository_instance", None)
    monkeypatch.delenv("CAMPAIGNFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CAMPAIGNFLOW_CONFIG", raising=False)

    async def no_wait(attempt: int) -> None:
        return None

    monkeypatch.setattr(retry, "schedule_retry", no_wait)


@pytest.fixture
def units():
    return {
        "analytics_agent": ScriptedUnit(
            "analytics_agent", "GA: 12500 users. Facebook CTR 2.7% on 850 spend."
        ),
        "strategy_agent": ScriptedUnit("strategy_agent", "Three ideas."),
        "planning_agent": ScriptedUnit(
            "planning_agent", "## Objectives\nGrow conversions.\n## Schedule\n7 days."
        ),
        "monitoring_agent": ScriptedUnit("monitoring_agent", MONITOR_REPLY),
    }


@pytest.fixture
def collaborators(units):
    deps = dict(units)
    deps.update(default_producers())
    deps["campaign_config"] = CampaignConfig(default_budget=500.0)
    return deps


@pytest.fixture
def repo():
    return InMemoryRunRepository()


@pytest.fixture
def scripted_unit():
    return ScriptedUnit

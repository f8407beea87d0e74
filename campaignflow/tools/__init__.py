"""Data producers consumed by steps and agents."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Mapping, Type

from pydantic import BaseModel

from ..schema import Shape, validate
from .analytics import AnalyticsQuery, AnalyticsReport, fetch_analytics
from .campaigns import (
    CampaignAnalyticsResult,
    CampaignIdea,
    CampaignIdeas,
    CampaignIdQuery,
    CampaignKPIs,
    CreatedCampaign,
    KpiComparison,
    compare_kpi,
    create_campaign,
    get_campaign_analytics,
    recommend_campaigns,
    simulate_campaign_kpis,
)

logger = logging.getLogger(__name__)


class RecommendQuery(Shape):
    analytics_summary: str


class CreateCampaignQuery(Shape):
    name: str
    budget: float


class CompareKpiQuery(Shape):
    current_ctr: float
    target_ctr: float


class DataProducer:
    """Adapter giving a producer function the ``fetch(query)`` contract.

    The query is validated against ``query_shape`` and the result is returned
    as a JSON-compatible dict with unavailable fields omitted.
    """

    def __init__(self, name: str, fn: Callable[..., Any], query_shape: Type[BaseModel]):
        self.name = name
        self._fn = fn
        self.query_shape = query_shape

    async def fetch(self, query: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
        arguments = validate(self.query_shape, query)
        logger.debug(f"Fetching {self.name} with {arguments}")
        result = self._fn(**arguments)
        if inspect.isawaitable(result):
            result = await result
        return validate(None, result)

    def __repr__(self) -> str:
        return f"DataProducer({self.name!r})"


def default_producers() -> dict[str, DataProducer]:
    """Producers keyed by logical source name."""
    return {
        "analytics": DataProducer("analytics", fetch_analytics, AnalyticsQuery),
        "campaign_analytics": DataProducer(
            "campaign_analytics", get_campaign_analytics, CampaignIdQuery
        ),
        "kpi_comparison": DataProducer("kpi_comparison", compare_kpi, CompareKpiQuery),
        "recommender": DataProducer("recommender", recommend_campaigns, RecommendQuery),
        "campaign_creator": DataProducer("campaign_creator", create_campaign, CreateCampaignQuery),
    }


__all__ = [
    "AnalyticsQuery",
    "AnalyticsReport",
    "CampaignAnalyticsResult",
    "CampaignIdea",
    "CampaignIdeas",
    "CampaignKPIs",
    "CreatedCampaign",
    "DataProducer",
    "KpiComparison",
    "compare_kpi",
    "create_campaign",
    "default_producers",
    "fetch_analytics",
    "get_campaign_analytics",
    "recommend_campaigns",
    "simulate_campaign_kpis",
]

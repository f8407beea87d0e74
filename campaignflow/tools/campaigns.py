"""Campaign-level data producers: KPIs, comparisons, ideas and creation."""

from __future__ import annotations

import math
import time
from typing import Literal, Optional

from pydantic import Field

from ..errors import ValidationError
from ..schema import Shape, validate

CAMPAIGN_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


class CampaignIdQuery(Shape):
    campaign_id: str = Field(min_length=1, max_length=128, pattern=CAMPAIGN_ID_PATTERN)


class CampaignKPIs(Shape):
    campaign_id: str
    ctr: float
    conversions: int
    target_ctr: float
    impressions: int
    clicks: int
    spend: float
    conversion_rate: float
    period: str


class CampaignAnalyticsResult(Shape):
    success: bool
    data: Optional[CampaignKPIs] = None
    error: Optional[str] = None
    message: Optional[str] = None


class KpiComparison(Shape):
    status: Literal["above_target", "below_target"]


class CampaignIdea(Shape):
    duration_days: int = Field(gt=0)
    idea: str = Field(min_length=1)


class CampaignIdeas(Shape):
    ideas: list[CampaignIdea]


class CreatedCampaign(Shape):
    campaign_id: str
    status: str


def _simple_hash(text: str) -> int:
    """32-bit string hash (``h * 31 + c`` with signed overflow), made positive."""
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def simulate_campaign_kpis(campaign_id: str) -> CampaignKPIs:
    """Deterministic pseudo-KPIs seeded from the campaign id."""
    seed = _simple_hash(campaign_id)

    def r(low: int, high: int) -> int:
        return low + seed % (high - low + 1)

    def rf(low: float, high: float) -> float:
        return low + (seed % 10000) / 10000 * (high - low)

    impressions = r(5000, 450000)
    target_ctr = round(rf(0.02, 0.06), 4)
    ctr = round(target_ctr * rf(0.6, 1.4), 4)
    clicks = _round_half_up(impressions * ctr)
    conversion_rate = rf(0.02, 0.08)
    conversions = _round_half_up(clicks * conversion_rate)
    cpc = round(rf(0.35, 2.5), 2)
    spend = round(clicks * cpc, 2)

    return CampaignKPIs(
        campaign_id=campaign_id,
        ctr=ctr,
        conversions=conversions,
        target_ctr=target_ctr,
        impressions=impressions,
        clicks=clicks,
        spend=spend,
        conversion_rate=round(conversion_rate, 4),
        period="last_30_days",
    )


def get_campaign_analytics(campaign_id: str) -> CampaignAnalyticsResult:
    """Get KPIs for a campaign by ID (alphanumeric, hyphens or underscores, 1-128 chars)."""
    try:
        query = validate(CampaignIdQuery, {"campaign_id": campaign_id})
    except ValidationError as exc:
        message = "; ".join(v.message for v in exc.violations)
        return CampaignAnalyticsResult(
            success=False, error="invalid_campaign_id", message=message
        )
    return CampaignAnalyticsResult(
        success=True, data=simulate_campaign_kpis(query["campaign_id"])
    )


def compare_kpi(current_ctr: float, target_ctr: float) -> KpiComparison:
    """Compare current CTR to target CTR."""
    status = "above_target" if current_ctr >= target_ctr else "below_target"
    return KpiComparison(status=status)


def recommend_campaigns(analytics_summary: str) -> CampaignIdeas:
    """Recommend 3 campaign ideas from an analytics summary: 2 for 7 days, 1 for 14 days."""
    # TODO: derive ideas from the summary once a recommendation model is wired in
    return CampaignIdeas(
        ideas=[
            CampaignIdea(
                duration_days=7,
                idea="Scale top-performing ad sets by 20% and A/B test new creatives.",
            ),
            CampaignIdea(
                duration_days=7,
                idea="Run a retargeting campaign for cart abandoners with a limited-time offer.",
            ),
            CampaignIdea(
                duration_days=14,
                idea="Launch a full-funnel campaign with awareness, consideration, "
                "and conversion objectives.",
            ),
        ]
    )


def create_campaign(name: str, budget: float) -> CreatedCampaign:
    """Create a new campaign and return its id and status."""
    return CreatedCampaign(campaign_id=f"cmp_{int(time.time() * 1000)}", status="created")

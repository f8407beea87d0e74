"""Aggregate analytics for GA, Search Console, Facebook and Instagram.

Returns fixed mock figures per source. Sources that were not requested are
left out of the report entirely rather than set to null.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from ..schema import Shape

AnalyticsSource = Literal["ga", "gsc", "facebook", "instagram"]


class AnalyticsQuery(Shape):
    date_range: str = Field(min_length=1, description="e.g. last_30_days, last_7_days")
    sources: list[AnalyticsSource] = Field(min_length=1)


class GoogleAnalyticsMetrics(Shape):
    users: int
    sessions: int
    bounce_rate: float
    avg_session_duration: float


class SearchConsoleMetrics(Shape):
    clicks: int
    impressions: int
    ctr: float
    position: float


class FacebookMetrics(Shape):
    reach: int
    impressions: int
    clicks: int
    ctr: float
    spend: float


class InstagramMetrics(Shape):
    reach: int
    impressions: int
    engagement: int
    profile_visits: int


class AnalyticsReport(Shape):
    date_range: str
    ga: Optional[GoogleAnalyticsMetrics] = None
    gsc: Optional[SearchConsoleMetrics] = None
    facebook: Optional[FacebookMetrics] = None
    instagram: Optional[InstagramMetrics] = None


_MOCK_METRICS = {
    "ga": GoogleAnalyticsMetrics(
        users=12500, sessions=18200, bounce_rate=0.42, avg_session_duration=145
    ),
    "gsc": SearchConsoleMetrics(clicks=3200, impressions=89000, ctr=0.036, position=12.4),
    "facebook": FacebookMetrics(
        reach=45000, impressions=78000, clicks=2100, ctr=0.027, spend=850
    ),
    "instagram": InstagramMetrics(
        reach=62000, impressions=95000, engagement=4200, profile_visits=1800
    ),
}


def fetch_analytics(date_range: str, sources: list[AnalyticsSource]) -> AnalyticsReport:
    """Fetch aggregated analytics for a date range from the requested sources.

    Args:
        date_range: Period to report on, e.g. ``last_30_days``.
        sources: Any of ``ga``, ``gsc``, ``facebook``, ``instagram``.
    """
    metrics = {name: _MOCK_METRICS[name] for name in dict.fromkeys(sources)}
    return AnalyticsReport(date_range=date_range, **metrics)

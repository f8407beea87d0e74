"""Structured outputs requested from decision units."""

from __future__ import annotations

from pydantic import Field

from ..schema import Shape


class DailyReport(Shape):
    """Daily campaign check produced by the monitoring agent."""

    summary: str = Field(
        min_length=1, description="Daily performance summary: key metrics, trend vs target"
    )
    suggestions: str = Field(
        min_length=1,
        description="2-4 concrete optimization suggestions "
        "(e.g. scale winners, pause underperformers)",
    )

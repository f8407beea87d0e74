"""Evaluation harness for decision units."""

from .base import ScoreResult, Scorer, ScoringHarness
from .marketing import (
    CompletenessScorer,
    JudgeScorer,
    PlanStructureAnalysis,
    RelevancyAnalysis,
    StrategyFormatAnalysis,
    build_scorers,
    plan_structure_score,
    relevancy_score,
    strategy_format_score,
)

__all__ = [
    "CompletenessScorer",
    "JudgeScorer",
    "PlanStructureAnalysis",
    "RelevancyAnalysis",
    "ScoreResult",
    "Scorer",
    "ScoringHarness",
    "StrategyFormatAnalysis",
    "build_scorers",
    "plan_structure_score",
    "relevancy_score",
    "strategy_format_score",
]

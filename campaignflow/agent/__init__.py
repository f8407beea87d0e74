from .factory import build_agents, build_decision_units
from .outputs import DailyReport
from .wrapper import AgentDecisionUnit, DecisionUnit

__all__ = [
    "AgentDecisionUnit",
    "DailyReport",
    "DecisionUnit",
    "build_agents",
    "build_decision_units",
]

from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_AGENT_MODEL,
    DEFAULT_CAMPAIGN_BUDGET,
    DEFAULT_SCORING_SAMPLE_RATE,
)


class AgentConfig(BaseModel):
    """Settings for the decision-unit agents."""

    model: str = DEFAULT_AGENT_MODEL


class ScoringConfig(BaseModel):
    """Settings for the sampled evaluation harness."""

    enabled: bool = True
    sample_rate: float = Field(default=DEFAULT_SCORING_SAMPLE_RATE, ge=0.0, le=1.0)
    judge_model: str = DEFAULT_AGENT_MODEL


class CampaignConfig(BaseModel):
    """Defaults applied by the campaign workflow."""

    default_budget: float = DEFAULT_CAMPAIGN_BUDGET


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class CampaignflowConfig(BaseModel):
    """Top-level configuration model."""

    database_url: Optional[str] = None
    agents: AgentConfig = AgentConfig()
    scoring: ScoringConfig = ScoringConfig()
    campaign: CampaignConfig = CampaignConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: Optional[str] = None) -> CampaignflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to CAMPAIGNFLOW_CONFIG
            env variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("CAMPAIGNFLOW_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = CampaignflowConfig(**data)
    else:
        config = CampaignflowConfig()

    env_db_url = os.getenv("CAMPAIGNFLOW_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    return config

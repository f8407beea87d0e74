"""Shared constants for campaignflow."""

DEFAULT_AGENT_MODEL = "openai:gpt-4o"
DEFAULT_SCORING_SAMPLE_RATE = 0.2
DEFAULT_CAMPAIGN_BUDGET = 500.0
DEFAULT_CLI_DATABASE_URL = "sqlite://campaignflow.db"
CANCELLED_REASON = "cancelled"

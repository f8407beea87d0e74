"""Helpers shared by the marketing workflows."""

from __future__ import annotations

from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior

from ..agent import DecisionUnit
from ..utils.retry import retry_async

TRANSIENT_AGENT_ERRORS = (ModelHTTPError, UnexpectedModelBehavior, ConnectionError, TimeoutError)


async def ask(unit: DecisionUnit, prompt: str, attempts: int = 3) -> str:
    """Call a decision unit, retrying transient failures."""
    return await retry_async(
        lambda: unit.generate(prompt), attempts=attempts, retry_on=TRANSIENT_AGENT_ERRORS
    )

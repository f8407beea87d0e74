"""Command line interface for starting and resuming campaignflow runs."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import typer

from campaignflow import CampaignflowError, RunHandle, WorkflowExecutor, get_repository
from campaignflow.config import load_config
from campaignflow.constants import DEFAULT_CLI_DATABASE_URL
from campaignflow.workflows import build_collaborators, build_workflows

app = typer.Typer(help="CLI for campaignflow workflows")

# Command groups
run_app = typer.Typer(help="Commands for starting, resuming and inspecting runs")

app.add_typer(run_app, name="run")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """campaignflow CLI entry point."""
    level = "DEBUG" if verbose else load_config().logging.level
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _parse_json(value: Optional[str], option: str) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{option} must be valid JSON: {exc}") from None


def _executor(with_workflows: bool = True) -> WorkflowExecutor:
    repository = get_repository(default_url=DEFAULT_CLI_DATABASE_URL)
    workflows = build_workflows(build_collaborators()) if with_workflows else []
    return WorkflowExecutor(workflows, repository=repository)


def _echo_handle(handle: RunHandle) -> None:
    typer.echo(f"Run {handle.run_id} ({handle.workflow_id}): {handle.status.value}")
    if handle.step_name:
        typer.echo(f"Step: {handle.step_name}")
    if handle.payload is not None:
        typer.echo(f"Payload: {json.dumps(handle.payload, indent=2)}")
    if handle.result is not None:
        typer.echo(f"Result: {json.dumps(handle.result, indent=2)}")
    if handle.error:
        typer.secho(f"Error: {handle.error}", fg=typer.colors.RED)


def _fail(exc: CampaignflowError) -> None:
    typer.secho(str(exc), fg=typer.colors.RED)
    raise typer.Exit(code=1)


@run_app.command("start")
def run_start(
    workflow_id: str,
    input_json: Optional[str] = typer.Option(None, "--input", "-i", help="Workflow input as JSON"),
) -> None:
    """
    Start a workflow run and drive it until it suspends or finishes.

    Example:
        campaignflow run start campaign-workflow --input '{"date_range": "last_30_days", "sources": ["ga", "facebook"]}'
        # Output: Run 3f2b...: suspended
        #         Step: user-select-campaign
        #         Payload: {"reason": "Please select a campaign (0, 1, 2).", ...}
    """
    data = _parse_json(input_json, "--input")
    executor = _executor()
    try:
        handle = asyncio.run(executor.start(workflow_id, data))
    except CampaignflowError as exc:
        _fail(exc)
    _echo_handle(handle)


@run_app.command("resume")
def run_resume(
    run_id: str,
    data_json: Optional[str] = typer.Option(None, "--data", "-d", help="Resume data as JSON"),
    step: Optional[str] = typer.Option(None, "--step", help="Step the data is meant for"),
) -> None:
    """
    Resume a suspended run with the data its awaiting step asked for.

    Example:
        campaignflow run resume 3f2b... --data '{"selected_index": 1}'
        campaignflow run resume 3f2b... --data '{"approved": true}' --step user-approve-plan
    """
    data = _parse_json(data_json, "--data")
    executor = _executor()
    try:
        handle = asyncio.run(executor.resume(run_id, data, step=step))
    except CampaignflowError as exc:
        _fail(exc)
    _echo_handle(handle)


@run_app.command("list")
def run_list() -> None:
    """List all runs with their current status."""
    executor = _executor(with_workflows=False)
    handles = asyncio.run(executor.list_runs())
    if not handles:
        typer.echo("No runs found")
        return
    for handle in handles:
        typer.echo(f"{handle.run_id}\t{handle.workflow_id}\t{handle.status.value}")


@run_app.command("show")
def run_show(run_id: str) -> None:
    """Show status, payload and step history of a run."""
    repository = get_repository(default_url=DEFAULT_CLI_DATABASE_URL)
    record = asyncio.run(repository.load(run_id))
    if record is None:
        typer.echo("Run not found")
        raise typer.Exit(code=1)
    typer.echo(f"Run {record.run_id} ({record.workflow_id}): {record.status.value}")
    typer.echo(f"Step index: {record.step_index}")
    if record.payload is not None:
        typer.echo(f"Payload: {json.dumps(record.payload)}")
    if record.result is not None:
        typer.echo(f"Result: {json.dumps(record.result)}")
    if record.error:
        typer.echo(f"Error: {record.error}")
    if record.state:
        typer.echo(f"State: {json.dumps(record.state)}")
    for event in record.history:
        typer.echo(f"- {event.step_name}: {event.outcome} ({event.at.isoformat()})")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()

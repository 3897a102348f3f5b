"""Command line interface for formulating dough and tracking bake schedules."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pydantic
import typer
import yaml

from doughplan import (
    DoughPlanError,
    FormulationRequest,
    FormulationResult,
    compute_formulation,
    generate_schedule,
    get_repository,
)
from doughplan.config import load_config
from doughplan.tracking import (
    Cancel,
    CompleteStep,
    EnableNotifications,
    LoggingNotifier,
    NotificationDispatcher,
    Pause,
    RescheduleBy,
    RescheduleTo,
    Resume,
    ScheduleTracker,
    SkipStep,
    Start,
    StepStatus,
    completion_percentage,
    due_notifications,
    next_pending_step,
)
from doughplan.tracking.commands import Command

app = typer.Typer(help="CLI for dough formulation and bake schedules")

# Command groups
track_app = typer.Typer(help="Commands for tracking a schedule while you bake")

app.add_typer(track_app, name="track")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    """doughplan CLI entry point."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ----------------------------------------------------------------------
# Helpers


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _parse_time(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        _fail(f"Invalid ISO timestamp: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _load_request(path: Path) -> FormulationRequest:
    if not path.exists():
        _fail(f"Request file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        _fail(f"Request file {path} must contain a mapping of request fields")
    defaults = load_config().defaults
    data.setdefault("room_temp_c", defaults.room_temp_c)
    data.setdefault("fridge_temp_c", defaults.fridge_temp_c)
    try:
        return FormulationRequest(**data)
    except pydantic.ValidationError as exc:
        _fail(f"Invalid request file {path}: {exc}")


def _formulate(path: Path) -> FormulationResult:
    request = _load_request(path)
    try:
        return compute_formulation(request)
    except DoughPlanError as exc:
        _fail(str(exc))


def _tracker() -> ScheduleTracker:
    return ScheduleTracker(repository=get_repository())


def _apply(schedule_id: str, command: Command) -> None:
    tracker = _tracker()
    try:
        schedule = asyncio.run(tracker.apply(schedule_id, command))
    except DoughPlanError as exc:
        _fail(str(exc))
    typer.echo(
        f"Schedule {schedule.id}: {schedule.status.value} "
        f"({completion_percentage(schedule)}% done, v{schedule.version})"
    )


def _echo_result(result: FormulationResult) -> None:
    ing = result.ingredients
    typer.echo(
        f"{result.number_of_units} x {result.ball_weight_grams:g} g "
        f"{result.style.value} = {result.total_dough_grams:g} g"
    )
    typer.echo(f"Flour  {ing.flour:>8.1f} g  100%")
    typer.echo(f"Water  {ing.water:>8.1f} g  {result.percentages.water:g}%")
    typer.echo(f"Salt   {ing.salt:>8.1f} g  {result.percentages.salt:g}%")
    typer.echo(f"Yeast  {ing.yeast:>8.2f} g  {result.percentages.yeast:g}% ({result.yeast_kind.value})")
    if ing.oil:
        typer.echo(f"Oil    {ing.oil:>8.1f} g  {result.percentages.oil:g}%")
    if ing.sugar:
        typer.echo(f"Sugar  {ing.sugar:>8.1f} g  {result.percentages.sugar:g}%")
    for name, grams in ing.extras.items():
        typer.echo(f"{name:<6} {grams:>8.1f} g  {result.percentages.extras[name]:g}%")
    if result.preferment:
        pf = result.preferment
        typer.echo(
            f"Preferment ({pf.type.value}, {pf.hours:g} h): flour {pf.flour:g} g, "
            f"water {pf.water:g} g, yeast {pf.yeast:g} g"
        )
    if result.ddt:
        typer.echo(f"Water temperature: {result.ddt.target_water_temp_c:g}°C")
        typer.echo(f"  {result.ddt.formula_trace}")
        for warning in result.ddt.warnings:
            typer.secho(f"  ! {warning}", fg=typer.colors.YELLOW)
    for tip in result.tips:
        typer.echo(f"- {tip}")


# ----------------------------------------------------------------------
# Formulation commands


@app.command("formulate")
def formulate(
    request_path: Path,
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
) -> None:
    """
    Compute ingredient masses for the request described in a YAML file.

    Example:
        doughplan formulate neapolitan.yaml
        doughplan formulate neapolitan.yaml --json
    """
    result = _formulate(request_path)
    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return
    _echo_result(result)


@app.command("schedule")
def schedule(
    request_path: Path,
    bake_at: str = typer.Option(..., "--bake-at", help="Target bake time (ISO 8601)"),
) -> None:
    """
    Print the preparation timeline that ends at the given bake time.

    Example:
        doughplan schedule neapolitan.yaml --bake-at 2024-06-01T19:00:00+02:00
    """
    result = _formulate(request_path)
    steps = generate_schedule(result, result.fermentation_method, _parse_time(bake_at))
    for step in steps:
        typer.echo(
            f"{step.step_number:>2}. {step.scheduled_time.isoformat()}  "
            f"{step.kind.value:<18} {step.duration_minutes:>5} min  {step.title}"
        )


# ----------------------------------------------------------------------
# Tracking commands


@track_app.command("create")
def track_create(
    request_path: Path,
    bake_at: str = typer.Option(..., "--bake-at", help="Target bake time (ISO 8601)"),
    owner: Optional[str] = typer.Option(None, help="Opaque owner reference"),
) -> None:
    """Formulate, generate the schedule and start tracking it."""
    result = _formulate(request_path)
    target = _parse_time(bake_at)
    steps = generate_schedule(result, result.fermentation_method, target)
    tracker = _tracker()
    schedule = asyncio.run(tracker.create(steps, target, owner_ref=owner))
    typer.echo(f"Schedule created: {schedule.id}")
    typer.echo(f"First step at {steps[0].scheduled_time.isoformat()}: {steps[0].title}")


@track_app.command("list")
def track_list() -> None:
    """List tracked schedules with their status."""
    schedules = asyncio.run(_tracker().list())
    if not schedules:
        typer.echo("No schedules found")
        return
    for sched in schedules:
        typer.echo(
            f"{sched.id}\t{sched.status.value}\t{completion_percentage(sched)}%\t"
            f"{sched.effective_bake_time.isoformat()}"
        )


@track_app.command("show")
def track_show(schedule_id: str) -> None:
    """Show a schedule and the status of each step."""
    try:
        sched = asyncio.run(_tracker().get(schedule_id))
    except DoughPlanError:
        _fail("Schedule not found")
    typer.echo(f"Schedule {sched.id}: {sched.status.value} (v{sched.version})")
    typer.echo(f"Bake at {sched.effective_bake_time.isoformat()}")
    upcoming = next_pending_step(sched)
    for step in sched.steps:
        marker = ">" if upcoming is not None and step.step_number == upcoming.step_number else " "
        typer.echo(
            f"{marker}{step.step_number:>2}. {step.scheduled_time.isoformat()}  "
            f"{step.kind.value:<18} {step.status.value}"
        )


@track_app.command("start")
def track_start(schedule_id: str) -> None:
    """Start working through a planned schedule."""
    _apply(schedule_id, Start())


@track_app.command("pause")
def track_pause(schedule_id: str) -> None:
    _apply(schedule_id, Pause())


@track_app.command("resume")
def track_resume(schedule_id: str) -> None:
    _apply(schedule_id, Resume())


@track_app.command("cancel")
def track_cancel(schedule_id: str) -> None:
    _apply(schedule_id, Cancel())


@track_app.command("complete")
def track_complete(
    schedule_id: str,
    step_number: int,
    status: Optional[StepStatus] = typer.Option(None, help="Explicit completion status"),
) -> None:
    """Mark a step done; early or late is worked out from the current time."""
    _apply(schedule_id, CompleteStep(step_number=step_number, status=status))


@track_app.command("skip")
def track_skip(schedule_id: str, step_number: int) -> None:
    _apply(schedule_id, SkipStep(step_number=step_number))


@track_app.command("reschedule")
def track_reschedule(
    schedule_id: str,
    to: Optional[str] = typer.Option(None, "--to", help="New bake time (ISO 8601)"),
    by: Optional[int] = typer.Option(None, "--by", help="Shift by this many minutes"),
) -> None:
    """Move every open step so the bake lands at a new time."""
    if (to is None) == (by is None):
        _fail("Pass exactly one of --to or --by")
    if to is not None:
        _apply(schedule_id, RescheduleTo(bake_time=_parse_time(to)))
    else:
        _apply(schedule_id, RescheduleBy(minutes=by))


@track_app.command("notify")
def track_notify(
    schedule_id: str,
    phone: str = typer.Option(..., help="Phone number for reminders"),
    lead: Optional[int] = typer.Option(None, help="Minutes of notice before each step"),
) -> None:
    """Enable step reminders."""
    if lead is None:
        lead = load_config().tracking.default_reminder_lead_minutes
    _apply(schedule_id, EnableNotifications(phone=phone, lead_minutes=lead))


@track_app.command("due")
def track_due(
    schedule_id: str,
    send: bool = typer.Option(False, "--send", help="Send due reminders to the log notifier"),
) -> None:
    """List steps whose reminder is due now."""
    tracker = _tracker()
    try:
        sched = asyncio.run(tracker.get(schedule_id))
    except DoughPlanError:
        _fail("Schedule not found")
    due = due_notifications(sched, tracker.clock.now())
    if not due:
        typer.echo("No reminders due")
        return
    for step in due:
        typer.echo(f"{step.step_number}\t{step.scheduled_time.isoformat()}\t{step.title}")
    if send:
        dispatcher = NotificationDispatcher(tracker, LoggingNotifier())
        try:
            delivered = asyncio.run(dispatcher.dispatch(schedule_id))
        except DoughPlanError as exc:
            _fail(str(exc))
        typer.echo(f"Sent {len(delivered)} reminder(s)")


@track_app.command("export")
def track_export(schedule_id: str) -> None:
    """Print the stored schedule as JSON."""
    try:
        sched = asyncio.run(_tracker().get(schedule_id))
    except DoughPlanError:
        _fail("Schedule not found")
    typer.echo(json.dumps(sched.model_dump(mode="json"), indent=2))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()

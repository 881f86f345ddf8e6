"""lexiq CLI: queue, session, review and card inspection commands."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Literal

import typer

from lexiq.application.config import resolve_config
from lexiq.domain.errors import InvalidArgumentError, LexiqError
from lexiq.interface._common import (
    _fail,
    _parse_now,
    _resolve_with_overrides,
    _snapshot_dir,
    _user_state,
    humanize_error,  # noqa: F401
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lexiq: spaced-repetition scheduling for language learning.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage lexiq configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}

Level = Literal["auto", "beginner", "intermediate", "advanced"]


def _item_row(item) -> dict:
    info = item.mastery_info
    return {
        "id": item.object.id,
        "content": item.object.content,
        "priority": round(item.priority, 4),
        "urgency": round(item.urgency, 4),
        "final_score": round(item.final_score, 4),
        "stage": int(info.stage) if info else None,
        "next_review": info.next_review.isoformat() if info and info.next_review else None,
    }


def _print_items(items, json_output: bool) -> None:
    rows = [_item_row(item) for item in items]
    if json_output:
        typer.echo(json.dumps(rows, indent=2))
        return
    if not rows:
        typer.secho("Nothing to study.", fg="yellow")
        return
    for i, row in enumerate(rows, 1):
        stage = "new" if row["stage"] is None else f"stage {row['stage']}"
        typer.echo(
            f"{i:>3}. {row['id']:<20} score={row['final_score']:.3f}  "
            f"priority={row['priority']:.3f}  urgency={row['urgency']:.2f}  ({stage})"
        )


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for lexiq."""
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def queue(
    signals: Annotated[Path, typer.Argument(help="YAML/JSON file of object signals.")],
    user: Annotated[str, typer.Option("--user", "-u", help="Learner ID.")],
    theta: Annotated[float, typer.Option(help="Ability estimate on the logit scale.")] = 0.0,
    l1: Annotated[str | None, typer.Option("--l1", help="Native language code.")] = None,
    level: Annotated[Level, typer.Option(help="Weight preset; 'auto' infers from theta.")] = "auto",
    limit: Annotated[int | None, typer.Option(help="Show at most N items.")] = None,
    now: Annotated[str | None, typer.Option(help="Reference time (ISO-8601).")] = None,
    state_dir: Annotated[Path | None, typer.Option(help="Snapshot directory override.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Rank every object by [bold]priority x urgency[/bold]."""
    from lexiq.application.queue_builder import analyze_queue
    from lexiq.application.review_service import ReviewService
    from lexiq.infrastructure.adapters import JsonSnapshotRepository, load_signals

    config = _resolve_with_overrides(state_dir=state_dir)
    reference = _parse_now(now)

    try:
        if limit is not None and limit < 0:
            raise InvalidArgumentError(f"--limit must be >= 0, got {limit}")
        objects = load_signals(signals)
        service = ReviewService(
            JsonSnapshotRepository(_snapshot_dir(config)), params=config.fsrs_parameters()
        )
        ranked = service.build_queue(user, objects, _user_state(theta, l1, level), reference)
    except LexiqError as e:
        _fail(e)

    shown = ranked[:limit] if limit is not None else ranked
    _print_items(shown, json_output)

    if not json_output and ranked:
        summary = analyze_queue(ranked, reference)
        typer.echo(
            f"\nTotal: {summary.total_items}  Due: {summary.due_items}  "
            f"New: {summary.new_items}  Mean priority: {summary.average_priority:.3f}"
        )


@app.command()
def session(
    signals: Annotated[Path, typer.Argument(help="YAML/JSON file of object signals.")],
    user: Annotated[str, typer.Option("--user", "-u", help="Learner ID.")],
    size: Annotated[int | None, typer.Option(help="Session size.")] = None,
    new_ratio: Annotated[
        float | None, typer.Option(help="Fraction of the session for new items.")
    ] = None,
    theta: Annotated[float, typer.Option(help="Ability estimate on the logit scale.")] = 0.0,
    l1: Annotated[str | None, typer.Option("--l1", help="Native language code.")] = None,
    level: Annotated[Level, typer.Option(help="Weight preset; 'auto' infers from theta.")] = "auto",
    now: Annotated[str | None, typer.Option(help="Reference time (ISO-8601).")] = None,
    state_dir: Annotated[Path | None, typer.Option(help="Snapshot directory override.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Build a bounded [bold green]study session[/bold green] mixing due and new items."""
    from lexiq.application.review_service import ReviewService
    from lexiq.infrastructure.adapters import JsonSnapshotRepository, load_signals

    config = _resolve_with_overrides(state_dir=state_dir)
    reference = _parse_now(now)
    session_size = size if size is not None else config.session_size
    ratio = new_ratio if new_ratio is not None else config.new_item_ratio

    try:
        objects = load_signals(signals)
        service = ReviewService(
            JsonSnapshotRepository(_snapshot_dir(config)), params=config.fsrs_parameters()
        )
        items = service.build_session(
            user,
            objects,
            _user_state(theta, l1, level),
            reference,
            session_size=session_size,
            new_item_ratio=ratio,
        )
    except LexiqError as e:
        _fail(e)

    _print_items(items, json_output)


@app.command()
def review(
    object_id: Annotated[str, typer.Argument(help="ID of the object that was practised.")],
    user: Annotated[str, typer.Option("--user", "-u", help="Learner ID.")],
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Whether the answer was right.")
    ] = True,
    cue: Annotated[int, typer.Option(help="Cue level shown (0-3).")] = 0,
    time_ms: Annotated[int, typer.Option(help="Response time in milliseconds.")] = 0,
    now: Annotated[str | None, typer.Option(help="Review time (ISO-8601).")] = None,
    state_dir: Annotated[Path | None, typer.Option(help="Snapshot directory override.")] = None,
):
    """Record a response and reschedule the object."""
    from lexiq.application.mastery import recommended_cue_level
    from lexiq.application.review_service import ReviewService
    from lexiq.application.scheduler import next_review_date
    from lexiq.domain.mastery.models import Response
    from lexiq.infrastructure.adapters import JsonSnapshotRepository

    config = _resolve_with_overrides(state_dir=state_dir)

    try:
        params = config.fsrs_parameters()
        response = Response(correct=correct, cue_level=cue, response_time_ms=time_ms)
        service = ReviewService(JsonSnapshotRepository(_snapshot_dir(config)), params=params)
        update = service.record_response(user, object_id, response, _parse_now(now))
    except LexiqError as e:
        _fail(e)

    state = update.current
    typer.echo(f"Rating: {update.rating.name.title()} ({int(update.rating)})")
    if update.stage_changed:
        color = "green" if update.promoted else "yellow"
        typer.secho(
            f"Stage: {int(update.previous_stage)} -> {int(update.new_stage)}", fg=color
        )
    else:
        typer.echo(f"Stage: {int(state.stage)}")
    typer.echo(
        f"Stability: {state.card.stability:.2f}d  Difficulty: {state.card.difficulty:.2f}"
    )
    typer.echo(f"Next review: {next_review_date(state.card, params).isoformat()}")
    typer.echo(f"Recommended cue level: {recommended_cue_level(state)}")


@app.command()
def card(
    object_id: Annotated[str, typer.Argument(help="Object ID.")],
    user: Annotated[str, typer.Option("--user", "-u", help="Learner ID.")],
    now: Annotated[str | None, typer.Option(help="Reference time (ISO-8601).")] = None,
    state_dir: Annotated[Path | None, typer.Option(help="Snapshot directory override.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Inspect one object's memory state and what each rating would do."""
    from lexiq.application.mastery import recommended_cue_level, scaffolding_gap
    from lexiq.application.scheduler import FsrsScheduler
    from lexiq.infrastructure.adapters import JsonSnapshotRepository
    from lexiq.infrastructure.serialization import mastery_to_dict

    config = _resolve_with_overrides(state_dir=state_dir)
    reference = _parse_now(now)

    try:
        scheduler = FsrsScheduler(config.fsrs_parameters())
        state = JsonSnapshotRepository(_snapshot_dir(config)).get(user, object_id)
    except LexiqError as e:
        _fail(e)

    if state is None:
        typer.secho(f"{object_id}: never reviewed (new).", fg="yellow")
        raise typer.Exit()

    preview = {
        rating.name.lower(): scheduler.next_interval(c.stability)
        for rating, c in scheduler.preview(state.card, reference).items()
    }
    info = {
        **mastery_to_dict(state),
        "retrievability": scheduler.retrievability(state.card, reference),
        "next_review": scheduler.next_review_date(state.card, reference).isoformat(),
        "scaffolding_gap": scaffolding_gap(state),
        "recommended_cue_level": recommended_cue_level(state),
        "interval_preview_days": preview,
    }

    if json_output:
        typer.echo(json.dumps(info, indent=2))
        return

    typer.echo(f"{object_id}  stage {info['stage']}  exposures {info['exposure_count']}")
    typer.echo(
        f"Retrievability: {info['retrievability']:.3f}  Next review: {info['next_review']}"
    )
    typer.echo(
        f"Cue-free accuracy: {state.cue_free_accuracy:.2f}  "
        f"Cue-assisted accuracy: {state.cue_assisted_accuracy:.2f}  "
        f"Recommended cue level: {info['recommended_cue_level']}"
    )
    typer.echo(
        "Intervals if rated now: "
        + "  ".join(f"{name}={days}d" for name, days in preview.items())
    )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def main():
    app()

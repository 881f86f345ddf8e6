"""Shared helpers for CLI commands."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, NoReturn

import typer

from lexiq.application.config import AppConfig, resolve_config
from lexiq.application.priority import infer_level, weights_for_level
from lexiq.domain.errors import DataError, InvalidArgumentError, LexiqError
from lexiq.domain.priority.models import ProficiencyLevel, UserState


def _resolve_with_overrides(**kwargs: Any) -> AppConfig:
    """Build config with CLI overrides (None values are ignored)."""
    return resolve_config({k: v for k, v in kwargs.items() if v is not None})


def _parse_now(value: str | None) -> datetime:
    """Parse --now as ISO-8601; naive values are taken as UTC."""
    if value is None:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Not an ISO-8601 timestamp: {value}") from None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _user_state(theta: float, l1: str | None, level: str) -> UserState:
    if level == "auto":
        resolved = infer_level(theta)
    else:
        resolved = ProficiencyLevel(level)
    return UserState(theta=theta, weights=weights_for_level(resolved), l1_language=l1)


def humanize_error(err: Exception) -> str:
    """Render a domain error as a one-line message."""
    if isinstance(err, DataError):
        where = f" (field: {err.field})" if err.field else ""
        return f"Invalid data{where}: {err}"
    if isinstance(err, InvalidArgumentError):
        return f"Invalid argument: {err}"
    return str(err)


def _fail(err: LexiqError) -> NoReturn:
    typer.secho(humanize_error(err), fg="red", err=True)
    raise typer.Exit(2 if isinstance(err, InvalidArgumentError) else 1)


def _snapshot_dir(config: AppConfig) -> Path:
    return config.state_dir / "snapshots"

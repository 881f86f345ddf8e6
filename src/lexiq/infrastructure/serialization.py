"""
Plain-dict (de)serialisation for Card and MasteryState snapshots.

Floats are stored as-is so that JSON round trips (which use repr precision)
reproduce bit-identical values, and re-running a schedule on a reloaded
snapshot gives exactly the same numbers as on the original.
"""

from datetime import datetime
from typing import Any

from lexiq.domain.errors import DataError
from lexiq.domain.mastery.models import MasteryStage, MasteryState
from lexiq.domain.memory.models import Card, CardState


def _parse_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise DataError(f"Invalid timestamp {value!r}: {e}", field="last_review") from e


def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "difficulty": card.difficulty,
        "stability": card.stability,
        "last_review": card.last_review.isoformat() if card.last_review else None,
        "reps": card.reps,
        "lapses": card.lapses,
        "state": card.state.value,
    }


def card_from_dict(data: dict[str, Any]) -> Card:
    try:
        return Card(
            difficulty=float(data["difficulty"]),
            stability=float(data["stability"]),
            last_review=_parse_time(data.get("last_review")),
            reps=int(data.get("reps", 0)),
            lapses=int(data.get("lapses", 0)),
            state=CardState(data.get("state", CardState.NEW.value)),
        )
    except DataError:
        raise
    except KeyError as e:
        raise DataError(f"Card snapshot is missing {e.args[0]!r}", field=e.args[0]) from e
    except ValueError as e:
        raise DataError(f"Malformed card snapshot: {e}") from e


def mastery_to_dict(state: MasteryState) -> dict[str, Any]:
    return {
        "stage": int(state.stage),
        "card": card_to_dict(state.card),
        "cue_free_accuracy": state.cue_free_accuracy,
        "cue_assisted_accuracy": state.cue_assisted_accuracy,
        "exposure_count": state.exposure_count,
    }


def mastery_from_dict(data: dict[str, Any]) -> MasteryState:
    try:
        return MasteryState(
            stage=MasteryStage(int(data.get("stage", 0))),
            card=card_from_dict(data["card"]),
            cue_free_accuracy=float(data.get("cue_free_accuracy", 0.0)),
            cue_assisted_accuracy=float(data.get("cue_assisted_accuracy", 0.0)),
            exposure_count=int(data.get("exposure_count", 0)),
        )
    except DataError:
        raise
    except KeyError as e:
        raise DataError(f"Mastery snapshot is missing {e.args[0]!r}", field=e.args[0]) from e
    except ValueError as e:
        raise DataError(f"Malformed mastery snapshot: {e}") from e

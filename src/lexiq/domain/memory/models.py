"""
Domain models for the FSRS memory model.

These are pure data structures with no I/O or external dependencies.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum

from lexiq.domain.constants import (
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_REQUEST_RETENTION,
    DEFAULT_WEIGHTS,
    NEW_CARD_DIFFICULTY,
    WEIGHT_COUNT,
)
from lexiq.domain.errors import InvalidArgumentError


class CardState(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class Rating(IntEnum):
    """Button pressed on a review (1=Again, 2=Hard, 3=Good, 4=Easy)."""

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4

    @classmethod
    def coerce(cls, value: int) -> "Rating":
        """Validate a raw rating. Anything outside 1..4 is caller misuse."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgumentError(f"Rating must be an integer in 1..4, got {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(f"Rating must be in 1..4, got {value}") from None


@dataclass(frozen=True)
class Card:
    """
    FSRS memory state for one (user, language object) pair.

    Attributes:
        difficulty: Intrinsic difficulty on a 1-10 scale.
        stability: Days until recall probability drops to 90%.
        last_review: Timestamp of the most recent review, None if never reviewed.
        reps: Total number of reviews.
        lapses: Number of times the item was forgotten after being learned.
        state: Position in the new/learning/review/relearning cycle.
    """

    difficulty: float = NEW_CARD_DIFFICULTY
    stability: float = 0.0
    last_review: datetime | None = None
    reps: int = 0
    lapses: int = 0
    state: CardState = CardState.NEW

    @classmethod
    def new(cls) -> "Card":
        return cls()

    @property
    def is_new(self) -> bool:
        return self.state is CardState.NEW or self.last_review is None


@dataclass(frozen=True)
class FsrsParameters:
    """
    Scheduler configuration. Passed explicitly into every scheduling call.

    Attributes:
        request_retention: Target recall probability at the moment of review.
        maximum_interval: Upper bound on any interval, in days.
        w: The 17 FSRS weights.
    """

    request_retention: float = DEFAULT_REQUEST_RETENTION
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL
    w: tuple[float, ...] = field(default=DEFAULT_WEIGHTS)

    def __post_init__(self):
        weights = tuple(float(x) for x in self.w)
        if len(weights) != WEIGHT_COUNT:
            raise InvalidArgumentError(
                f"FSRS needs exactly {WEIGHT_COUNT} weights, got {len(weights)}"
            )
        if not all(math.isfinite(x) for x in weights):
            raise InvalidArgumentError("FSRS weights must be finite")
        if not 0.0 < self.request_retention < 1.0:
            raise InvalidArgumentError(
                f"request_retention must be in (0, 1), got {self.request_retention}"
            )
        if self.maximum_interval < 1:
            raise InvalidArgumentError(
                f"maximum_interval must be >= 1 day, got {self.maximum_interval}"
            )
        object.__setattr__(self, "w", weights)


DEFAULT_PARAMETERS = FsrsParameters()

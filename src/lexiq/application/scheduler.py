"""
FSRS memory model: retrievability, review scheduling and intervals.

This is a pure computation module with no I/O. Every function takes the
FsrsParameters it should use; nothing reads module-level mutable state, so
schedulers for different users can run in parallel without coordination.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from lexiq.domain.constants import (
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    MIN_STABILITY,
    SECONDS_PER_DAY,
)
from lexiq.domain.memory.models import (
    DEFAULT_PARAMETERS,
    Card,
    CardState,
    FsrsParameters,
    Rating,
)

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def retrievability(
    card: Card, now: datetime, params: FsrsParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Estimate the current probability of recall.

    R = e^(-t/S) where t = days since last review, S = stability.
    A card that has never been reviewed has no basis for an estimate and
    returns 0. Reviews stamped in the future count as zero elapsed time.
    """
    if card.last_review is None:
        return 0.0
    elapsed = max(0.0, _days_between(card.last_review, now))
    return math.exp(-elapsed / max(card.stability, MIN_STABILITY))


def initial_stability(rating: Rating, params: FsrsParameters) -> float:
    return max(MIN_STABILITY, params.w[rating - 1])


def initial_difficulty(rating: Rating, params: FsrsParameters) -> float:
    w = params.w
    return _clamp(w[4] - (rating - 3) * w[5], MIN_DIFFICULTY, MAX_DIFFICULTY)


def next_difficulty(difficulty: float, rating: Rating, params: FsrsParameters) -> float:
    return _clamp(difficulty - params.w[6] * (rating - 3), MIN_DIFFICULTY, MAX_DIFFICULTY)


def next_stability(
    stability: float,
    difficulty: float,
    recall: float,
    rating: Rating,
    params: FsrsParameters,
) -> float:
    """
    Stability after a review of an already-learned card.

    Args:
        stability: Stability before the review.
        difficulty: Difficulty after this review's update.
        recall: Retrievability at the moment of review.
        rating: The review rating.
    """
    w = params.w
    s = max(stability, MIN_STABILITY)

    if rating == Rating.AGAIN:
        forgotten = w[11] * difficulty ** (-w[12]) * ((s + 1) ** w[13] - 1)
        return max(MIN_STABILITY, forgotten)

    hard_penalty = w[15] if rating == Rating.HARD else 1.0
    easy_bonus = w[16] if rating == Rating.EASY else 1.0
    growth = (
        math.exp(w[8])
        * (11 - difficulty)
        * s ** (-w[9])
        * (math.exp((1 - recall) * w[10]) - 1)
        * hard_penalty
        * easy_bonus
    )
    return max(MIN_STABILITY, s * (1 + growth))


def schedule(
    card: Card,
    rating: int,
    now: datetime,
    params: FsrsParameters = DEFAULT_PARAMETERS,
) -> Card:
    """
    Apply one review to a card.

    Args:
        card: Current card state (left untouched).
        rating: 1=Again, 2=Hard, 3=Good, 4=Easy.
        now: Time of the review.
        params: Scheduler configuration.

    Returns:
        A new Card with updated stability, difficulty and bookkeeping.

    Raises:
        InvalidArgumentError: If rating is outside 1..4.
    """
    rating = Rating.coerce(rating)

    if card.is_new:
        return replace(
            card,
            stability=initial_stability(rating, params),
            difficulty=initial_difficulty(rating, params),
            state=CardState.LEARNING if rating == Rating.AGAIN else CardState.REVIEW,
            last_review=now,
            reps=card.reps + 1,
        )

    recall = retrievability(card, now, params)
    difficulty = next_difficulty(card.difficulty, rating, params)
    stability = next_stability(card.stability, difficulty, recall, rating, params)

    if rating == Rating.AGAIN:
        logger.debug(
            f"Lapse: stability {card.stability:.3f} -> {stability:.3f} (lapses={card.lapses + 1})"
        )
        return replace(
            card,
            stability=stability,
            difficulty=difficulty,
            lapses=card.lapses + 1,
            state=CardState.RELEARNING,
            last_review=now,
            reps=card.reps + 1,
        )

    return replace(
        card,
        stability=stability,
        difficulty=difficulty,
        state=CardState.REVIEW,
        last_review=now,
        reps=card.reps + 1,
    )


def next_interval(stability: float, params: FsrsParameters = DEFAULT_PARAMETERS) -> int:
    """
    Days until recall probability falls to the requested retention.

    Clamped to [1, maximum_interval].
    """
    interval = stability * math.log(params.request_retention) / math.log(0.9)
    return int(min(params.maximum_interval, max(1, round(interval))))


def next_review_date(
    card: Card,
    params: FsrsParameters = DEFAULT_PARAMETERS,
    now: datetime | None = None,
) -> datetime:
    """
    When the card should next be shown.

    A never-reviewed card is due immediately: `now` is returned (current UTC
    time if not given).
    """
    if card.last_review is None:
        return now if now is not None else datetime.now(timezone.utc)
    return card.last_review + timedelta(days=next_interval(card.stability, params))


def preview(
    card: Card, now: datetime, params: FsrsParameters = DEFAULT_PARAMETERS
) -> dict[Rating, Card]:
    """Card that each possible rating would produce, without committing to any."""
    return {rating: schedule(card, rating, now, params) for rating in Rating}


class FsrsScheduler:
    """
    Bundles a parameter set with the scheduling functions.

    Stateless apart from its configuration, so a single instance can be
    shared freely.
    """

    def __init__(self, params: FsrsParameters | None = None):
        """
        Args:
            params: Scheduler configuration; uses the validated defaults if not provided.
        """
        self.params = params or DEFAULT_PARAMETERS

    def retrievability(self, card: Card, now: datetime) -> float:
        return retrievability(card, now, self.params)

    def schedule(self, card: Card, rating: int, now: datetime) -> Card:
        return schedule(card, rating, now, self.params)

    def next_interval(self, stability: float) -> int:
        return next_interval(stability, self.params)

    def next_review_date(self, card: Card, now: datetime | None = None) -> datetime:
        return next_review_date(card, self.params, now)

    def preview(self, card: Card, now: datetime) -> dict[Rating, Card]:
        return preview(card, now, self.params)

"""
Mastery state machine.

Turns a noisy stream of responses into a discrete proficiency stage and a
recommended scaffolding level. The stage is re-derived from the current
aggregates on every update rather than advanced along fixed edges, so it can
move backward when accuracy degrades.
"""

import logging
from dataclasses import replace
from datetime import datetime

from lexiq.application.scheduler import next_review_date, schedule
from lexiq.domain.constants import (
    CUE_ASSISTED_EMA_WEIGHT,
    CUE_FREE_EMA_RATE,
    MAX_CUE_LEVEL,
    MINIMAL_CUE_MAX_GAP,
    MINIMAL_CUE_MIN_EXPOSURES,
    MODERATE_CUE_MAX_GAP,
    NO_CUE_MAX_GAP,
    NO_CUE_MIN_EXPOSURES,
    SLOW_RESPONSE_MS,
)
from lexiq.domain.mastery.models import (
    DEFAULT_THRESHOLDS,
    MasteryStage,
    MasteryState,
    MasteryUpdate,
    OutcomeSummary,
    Response,
    StageThresholds,
)
from lexiq.domain.memory.models import DEFAULT_PARAMETERS, FsrsParameters, Rating
from lexiq.domain.queue.models import MasteryInfo

logger = logging.getLogger(__name__)


def response_to_rating(response: Response) -> Rating:
    """
    Map a response to an FSRS rating.

    - Incorrect -> Again
    - Correct with cues -> Hard
    - Correct, cue-free but slow -> Good
    - Correct, cue-free and fast -> Easy
    """
    if not response.correct:
        return Rating.AGAIN
    if response.cue_level > 0:
        return Rating.HARD
    if response.response_time_ms > SLOW_RESPONSE_MS:
        return Rating.GOOD
    return Rating.EASY


def scaffolding_gap(state: MasteryState) -> float:
    """How much better the learner does with cues than without (never negative)."""
    return max(0.0, state.cue_assisted_accuracy - state.cue_free_accuracy)


def derive_stage(
    state: MasteryState, thresholds: StageThresholds = DEFAULT_THRESHOLDS
) -> MasteryStage:
    """
    Derive the stage from the current aggregates alone.

    0 Unknown: never seen, or nothing below applies
    1 Recognition: recognises with cues
    2 Recall: recalls cue-free more often than not, or reliably with cues
    3 Controlled: reliable cue-free recall with a week of stability
    4 Automatic: near-perfect, a month of stability, cues no longer help
    """
    if state.exposure_count == 0:
        return MasteryStage.UNKNOWN

    free = state.cue_free_accuracy
    assisted = state.cue_assisted_accuracy
    stability = state.card.stability
    t = thresholds

    if (
        free >= t.automatic_cue_free
        and stability > t.automatic_stability
        and (assisted - free) < t.automatic_max_gap
    ):
        return MasteryStage.AUTOMATIC

    if free >= t.controlled_cue_free and stability > t.controlled_stability:
        return MasteryStage.CONTROLLED

    if free >= t.recall_cue_free or assisted >= t.recall_cue_assisted:
        return MasteryStage.RECALL

    if assisted >= t.recognition_cue_assisted:
        return MasteryStage.RECOGNITION

    return MasteryStage.UNKNOWN


def ingest_response(
    state: MasteryState,
    response: Response,
    now: datetime,
    params: FsrsParameters = DEFAULT_PARAMETERS,
    thresholds: StageThresholds = DEFAULT_THRESHOLDS,
) -> MasteryState:
    """
    Fold one response into a mastery state.

    The cue-free accuracy uses a weight of 1 / (0.3 n + 1), where n is the
    exposure count after this response, so early answers move it a lot and
    later ones converge. Cue-assisted accuracy is a fixed-rate EMA.
    """
    return apply_response(state, response, now, params, thresholds).current


def apply_response(
    state: MasteryState,
    response: Response,
    now: datetime,
    params: FsrsParameters = DEFAULT_PARAMETERS,
    thresholds: StageThresholds = DEFAULT_THRESHOLDS,
) -> MasteryUpdate:
    """Like ingest_response, but also reports the rating and the stage movement."""
    rating = response_to_rating(response)
    card = schedule(state.card, rating, now, params)
    exposures = state.exposure_count + 1
    outcome = 1.0 if response.correct else 0.0

    cue_free = state.cue_free_accuracy
    cue_assisted = state.cue_assisted_accuracy
    if response.cue_free:
        weight = 1.0 / (CUE_FREE_EMA_RATE * exposures + 1.0)
        cue_free = (1.0 - weight) * cue_free + weight * outcome
    else:
        cue_assisted = (
            (1.0 - CUE_ASSISTED_EMA_WEIGHT) * cue_assisted
            + CUE_ASSISTED_EMA_WEIGHT * outcome
        )

    updated = replace(
        state,
        card=card,
        exposure_count=exposures,
        cue_free_accuracy=cue_free,
        cue_assisted_accuracy=cue_assisted,
    )
    updated = replace(updated, stage=derive_stage(updated, thresholds))

    if updated.stage != state.stage:
        logger.debug(
            f"Stage {int(state.stage)} -> {int(updated.stage)} after {exposures} exposures"
        )

    return MasteryUpdate(previous=state, current=updated, rating=rating, response=response)


def recommended_cue_level(state: MasteryState) -> int:
    """
    Scaffolding to offer on the next attempt (0 = none, 3 = full).

    A large gap means the learner still leans on cues, so richer scaffolding
    is re-offered until it closes.
    """
    gap = scaffolding_gap(state)
    attempts = state.exposure_count

    if gap < NO_CUE_MAX_GAP and attempts >= NO_CUE_MIN_EXPOSURES:
        return 0
    if gap < MINIMAL_CUE_MAX_GAP and attempts >= MINIMAL_CUE_MIN_EXPOSURES:
        return 1
    if gap < MODERATE_CUE_MAX_GAP:
        return 2
    return MAX_CUE_LEVEL


def to_mastery_info(
    state: MasteryState, params: FsrsParameters = DEFAULT_PARAMETERS
) -> MasteryInfo:
    """Project a state into what the queue builder reads. Unreviewed cards have no due date."""
    next_review = (
        next_review_date(state.card, params) if state.card.last_review is not None else None
    )
    return MasteryInfo(
        stage=state.stage,
        next_review=next_review,
        cue_free_accuracy=state.cue_free_accuracy,
    )


def summarize_updates(updates: list[MasteryUpdate]) -> OutcomeSummary:
    total = len(updates)
    correct = sum(1 for u in updates if u.response.correct)
    return OutcomeSummary(
        total_responses=total,
        correct_count=correct,
        accuracy=correct / total if total else 0.0,
        stage_promotions=sum(1 for u in updates if u.promoted),
        stage_demotions=sum(1 for u in updates if u.demoted),
        average_response_time_ms=(
            sum(u.response.response_time_ms for u in updates) / total if total else 0.0
        ),
    )

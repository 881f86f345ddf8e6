"""
Domain models for mastery tracking.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from lexiq.domain.constants import MAX_CUE_LEVEL
from lexiq.domain.errors import InvalidArgumentError
from lexiq.domain.memory.models import Card, Rating


class MasteryStage(IntEnum):
    UNKNOWN = 0
    RECOGNITION = 1
    RECALL = 2
    CONTROLLED = 3
    AUTOMATIC = 4


@dataclass(frozen=True)
class Response:
    """
    A learner's answer to one practice attempt.

    Attributes:
        correct: Whether the answer was accepted.
        cue_level: Scaffolding shown during the attempt (0 = none, 3 = full).
        response_time_ms: Time from prompt to answer.
    """

    correct: bool
    cue_level: int = 0
    response_time_ms: int = 0

    def __post_init__(self):
        if isinstance(self.cue_level, bool) or not 0 <= self.cue_level <= MAX_CUE_LEVEL:
            raise InvalidArgumentError(
                f"cue_level must be in 0..{MAX_CUE_LEVEL}, got {self.cue_level!r}"
            )
        if self.response_time_ms < 0:
            raise InvalidArgumentError(
                f"response_time_ms must be >= 0, got {self.response_time_ms}"
            )

    @property
    def cue_free(self) -> bool:
        return self.cue_level == 0


@dataclass(frozen=True)
class StageThresholds:
    """
    Fixed cut-offs used to derive a mastery stage from aggregates.

    Downstream calibration depends on these values; change them only together
    with the accuracy EMA.
    """

    recall_cue_free: float = 0.6
    recall_cue_assisted: float = 0.8
    recognition_cue_assisted: float = 0.5
    controlled_cue_free: float = 0.75
    controlled_stability: float = 7.0
    automatic_cue_free: float = 0.9
    automatic_stability: float = 30.0
    automatic_max_gap: float = 0.1


DEFAULT_THRESHOLDS = StageThresholds()


@dataclass(frozen=True)
class MasteryState:
    """
    Proficiency tracking for one (user, language object) pair, 1:1 with a Card.

    Attributes:
        stage: Last derived stage.
        card: FSRS memory state.
        cue_free_accuracy: Running accuracy without scaffolding (0.0-1.0).
        cue_assisted_accuracy: Running accuracy with scaffolding (0.0-1.0).
        exposure_count: Responses ingested so far.
    """

    stage: MasteryStage = MasteryStage.UNKNOWN
    card: Card = field(default_factory=Card.new)
    cue_free_accuracy: float = 0.0
    cue_assisted_accuracy: float = 0.0
    exposure_count: int = 0

    @classmethod
    def initial(cls) -> "MasteryState":
        return cls()


@dataclass(frozen=True)
class MasteryUpdate:
    """Outcome of ingesting one response: the new state plus what changed."""

    previous: MasteryState
    current: MasteryState
    rating: Rating
    response: Response

    @property
    def previous_stage(self) -> MasteryStage:
        return self.previous.stage

    @property
    def new_stage(self) -> MasteryStage:
        return self.current.stage

    @property
    def stage_changed(self) -> bool:
        return self.previous.stage != self.current.stage

    @property
    def promoted(self) -> bool:
        return self.current.stage > self.previous.stage

    @property
    def demoted(self) -> bool:
        return self.current.stage < self.previous.stage


@dataclass(frozen=True)
class OutcomeSummary:
    """Aggregate over a batch of ingested responses."""

    total_responses: int
    correct_count: int
    accuracy: float
    stage_promotions: int
    stage_demotions: int
    average_response_time_ms: float

"""
Domain models for priority scoring.

Signals arrive from external feature extractors (frequency counters,
relation graphs, IRT calibration) and are validated here, at the boundary,
before they can reach a priority computation.
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from lexiq.domain.constants import IRT_MAX, IRT_MIN
from lexiq.domain.errors import DataError, InvalidArgumentError


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataError(f"{name} must be a number, got {value!r}", field=name)
    if not math.isfinite(value):
        raise DataError(f"{name} must be finite, got {value}", field=name)
    if not low <= value <= high:
        raise DataError(f"{name} must be in [{low}, {high}], got {value}", field=name)


class ProficiencyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class LanguageObjectSignal:
    """
    Read-only scalar signals for one language object.

    Attributes:
        id: Stable object identifier.
        frequency: How often the object occurs in target texts (0.0-1.0).
        relational_density: Hub score in the object's relation graph (0.0-1.0).
        contextual_contribution: Contribution to meaning in context (0.0-1.0).
        irt_difficulty: IRT difficulty on the logit scale (-3.0-3.0).
        content: Display form (e.g. the word itself).
        kind: Object category such as word, morpheme or pattern.
    """

    id: str
    frequency: float
    relational_density: float
    contextual_contribution: float
    irt_difficulty: float = 0.0
    content: str | None = None
    kind: str = "word"

    def __post_init__(self):
        if not self.id:
            raise DataError("Signal id must be a non-empty string", field="id")
        _check_range("frequency", self.frequency, 0.0, 1.0)
        _check_range("relational_density", self.relational_density, 0.0, 1.0)
        _check_range("contextual_contribution", self.contextual_contribution, 0.0, 1.0)
        _check_range("irt_difficulty", self.irt_difficulty, IRT_MIN, IRT_MAX)


@dataclass(frozen=True)
class PriorityWeights:
    """Weights for frequency (f), relational density (r) and contextual contribution (e)."""

    f: float = 0.4
    r: float = 0.3
    e: float = 0.3

    def __post_init__(self):
        for name in ("f", "r", "e"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidArgumentError(
                    f"Priority weight '{name}' must be finite and non-negative, got {value}"
                )

    @property
    def total(self) -> float:
        return self.f + self.r + self.e


DEFAULT_PRIORITY_WEIGHTS = PriorityWeights()

LEVEL_WEIGHTS: dict[ProficiencyLevel, PriorityWeights] = {
    ProficiencyLevel.BEGINNER: PriorityWeights(f=0.5, r=0.25, e=0.25),
    ProficiencyLevel.INTERMEDIATE: PriorityWeights(f=0.4, r=0.3, e=0.3),
    ProficiencyLevel.ADVANCED: PriorityWeights(f=0.3, r=0.3, e=0.4),
}


@dataclass(frozen=True)
class UserState:
    """
    Learner-level inputs to priority scoring.

    Attributes:
        theta: Global IRT ability estimate (-3.0-3.0).
        weights: FRE weights. Need not sum to 1, but 1.0 is the calibrated default.
        l1_language: Native language code, used for transfer gain.
    """

    theta: float = 0.0
    weights: PriorityWeights = field(default_factory=PriorityWeights)
    l1_language: str | None = None

    def __post_init__(self):
        _check_range("theta", self.theta, IRT_MIN, IRT_MAX)


@dataclass(frozen=True)
class CostFactors:
    base_difficulty: float  # IRT difficulty rescaled to 0-1
    transfer_gain: float  # L1 similarity benefit
    exposure_need: float  # Distance above current ability, 0-1

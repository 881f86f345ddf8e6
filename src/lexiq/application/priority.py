"""
Priority/cost model.

Priority = (w_f * F + w_r * R + w_e * E) / Cost

Higher priority means more valuable and relatively cheap to learn now.
Pure computation, no I/O.
"""

from lexiq.domain.constants import (
    ADVANCED_THETA_FLOOR,
    BEGINNER_THETA_CEILING,
    COST_FLOOR,
    DEFAULT_TRANSFER_GAIN,
    IRT_MAX,
    IRT_MIN,
)
from lexiq.domain.errors import InvalidArgumentError
from lexiq.domain.priority.models import (
    DEFAULT_PRIORITY_WEIGHTS,
    LEVEL_WEIGHTS,
    CostFactors,
    LanguageObjectSignal,
    PriorityWeights,
    ProficiencyLevel,
    UserState,
)


def compute_fre(
    signal: LanguageObjectSignal, weights: PriorityWeights = DEFAULT_PRIORITY_WEIGHTS
) -> float:
    """Weighted value score. Lies in [0, 1] when the weights sum to 1."""
    return (
        weights.f * signal.frequency
        + weights.r * signal.relational_density
        + weights.e * signal.contextual_contribution
    )


def estimate_cost_factors(signal: LanguageObjectSignal, user: UserState) -> CostFactors:
    """
    Cost components for one object and learner.

    Transfer gain is a flat bonus whenever a native language is known; a
    per-language-pair transfer matrix can replace it without changing callers.
    """
    span = IRT_MAX - IRT_MIN
    base_difficulty = (signal.irt_difficulty - IRT_MIN) / span
    transfer_gain = DEFAULT_TRANSFER_GAIN if user.l1_language else 0.0
    exposure_need = min(1.0, max(0.0, (signal.irt_difficulty - user.theta) / 3.0))
    return CostFactors(
        base_difficulty=base_difficulty,
        transfer_gain=transfer_gain,
        exposure_need=exposure_need,
    )


def compute_cost(factors: CostFactors) -> float:
    """Learning cost, floored so priority never divides by zero or flips sign."""
    raw = factors.base_difficulty - factors.transfer_gain + factors.exposure_need
    return max(COST_FLOOR, raw)


def compute_priority(signal: LanguageObjectSignal, user: UserState) -> float:
    fre = compute_fre(signal, user.weights)
    cost = compute_cost(estimate_cost_factors(signal, user))
    return fre / cost


def infer_level(theta: float) -> ProficiencyLevel:
    if theta < BEGINNER_THETA_CEILING:
        return ProficiencyLevel.BEGINNER
    if theta < ADVANCED_THETA_FLOOR:
        return ProficiencyLevel.INTERMEDIATE
    return ProficiencyLevel.ADVANCED


def weights_for_level(level: ProficiencyLevel | str) -> PriorityWeights:
    """Weight preset for a level; beginners lean on frequency, advanced on context."""
    try:
        return LEVEL_WEIGHTS[ProficiencyLevel(level)]
    except ValueError:
        raise InvalidArgumentError(f"Unknown proficiency level: {level!r}") from None


def sort_by_priority(
    signals: list[LanguageObjectSignal], user: UserState
) -> list[LanguageObjectSignal]:
    """Highest priority first; ties keep input order."""
    scored = [(compute_priority(s, user), s) for s in signals]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [s for _, s in scored]


def top_priority_items(
    signals: list[LanguageObjectSignal], user: UserState, count: int
) -> list[LanguageObjectSignal]:
    if count < 0:
        raise InvalidArgumentError(f"count must be >= 0, got {count}")
    return sort_by_priority(signals, user)[:count]

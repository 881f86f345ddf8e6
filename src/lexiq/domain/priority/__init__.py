# Domain Priority Package
from .models import (
    DEFAULT_PRIORITY_WEIGHTS,
    LEVEL_WEIGHTS,
    CostFactors,
    LanguageObjectSignal,
    PriorityWeights,
    ProficiencyLevel,
    UserState,
)

__all__ = [
    "CostFactors",
    "LanguageObjectSignal",
    "PriorityWeights",
    "ProficiencyLevel",
    "UserState",
    "DEFAULT_PRIORITY_WEIGHTS",
    "LEVEL_WEIGHTS",
]

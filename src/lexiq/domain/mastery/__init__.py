# Domain Mastery Package
from .models import (
    DEFAULT_THRESHOLDS,
    MasteryStage,
    MasteryState,
    MasteryUpdate,
    OutcomeSummary,
    Response,
    StageThresholds,
)

__all__ = [
    "MasteryStage",
    "MasteryState",
    "MasteryUpdate",
    "OutcomeSummary",
    "Response",
    "StageThresholds",
    "DEFAULT_THRESHOLDS",
]

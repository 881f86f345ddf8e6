"""
Domain models for the learning queue.

Queue items are derived and ephemeral: rebuilt from cards and priorities on
every scheduling pass and never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime

from lexiq.domain.mastery.models import MasteryStage
from lexiq.domain.priority.models import LanguageObjectSignal


@dataclass(frozen=True)
class MasteryInfo:
    """The slice of a MasteryState the queue needs."""

    stage: MasteryStage
    next_review: datetime | None
    cue_free_accuracy: float = 0.0


@dataclass(frozen=True)
class QueueItem:
    object: LanguageObjectSignal
    priority: float
    urgency: float
    final_score: float
    mastery_info: MasteryInfo | None = None

    @property
    def has_mastery(self) -> bool:
        return self.mastery_info is not None

    @property
    def is_new(self) -> bool:
        return self.mastery_info is None or self.mastery_info.stage == MasteryStage.UNKNOWN


@dataclass
class QueueAnalysis:
    """Composition of a queue, for diagnostics and the CLI."""

    total_items: int = 0
    due_items: int = 0
    new_items: int = 0
    average_priority: float = 0.0
    kind_distribution: dict[str, int] = field(default_factory=dict)
    stage_distribution: dict[int, int] = field(default_factory=dict)

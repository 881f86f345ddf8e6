"""
Queue builder for learning sessions.

Builds ranked queues by:
1. Scoring each object's priority from its value signals and learning cost
2. Boosting by urgency derived from the object's review due date
3. Sorting by final score and partitioning into a bounded session

Every call is a full, stateless recomputation over the learner's active
curriculum; no index is kept between calls.
"""

import logging
import math
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import datetime

from lexiq.application.priority import compute_priority
from lexiq.domain.constants import (
    DEFAULT_NEW_ITEM_RATIO,
    MAX_URGENCY,
    NEW_ITEM_URGENCY,
    SECONDS_PER_DAY,
    URGENCY_BASE,
    URGENCY_PER_OVERDUE_DAY,
)
from lexiq.domain.errors import InvalidArgumentError
from lexiq.domain.priority.models import LanguageObjectSignal, UserState
from lexiq.domain.queue.models import MasteryInfo, QueueAnalysis, QueueItem

logger = logging.getLogger(__name__)


def compute_urgency(next_review: datetime | None, now: datetime) -> float:
    """
    Urgency multiplier from the review schedule.

    - No due date (new item): 1.5, an introduction boost below an overdue item
    - Not yet due: 0
    - Due or overdue: 1 + 0.5 per overdue day, capped at 3
    """
    if next_review is None:
        return NEW_ITEM_URGENCY

    days_overdue = (now - next_review).total_seconds() / SECONDS_PER_DAY
    if days_overdue < 0:
        return 0.0
    return min(MAX_URGENCY, URGENCY_BASE + URGENCY_PER_OVERDUE_DAY * days_overdue)


def compute_final_score(priority: float, urgency: float) -> float:
    return priority * (1 + urgency)


def build_queue(
    objects: Iterable[LanguageObjectSignal],
    user: UserState,
    mastery_map: Mapping[str, MasteryInfo] | None,
    now: datetime,
) -> list[QueueItem]:
    """
    Score and rank every object.

    Args:
        objects: The learner's active curriculum.
        user: Ability estimate and priority weights.
        mastery_map: Object ID -> MasteryInfo for objects already seen.
        now: Reference time for urgency.

    Returns:
        QueueItems sorted descending by final score. Ties keep input order.
    """
    mastery_map = mastery_map or {}
    items: list[QueueItem] = []

    for obj in objects:
        priority = compute_priority(obj, user)
        info = mastery_map.get(obj.id)
        urgency = compute_urgency(info.next_review if info else None, now)
        items.append(
            QueueItem(
                object=obj,
                priority=priority,
                urgency=urgency,
                final_score=compute_final_score(priority, urgency),
                mastery_info=info,
            )
        )

    items.sort(key=lambda item: item.final_score, reverse=True)
    logger.debug(f"Built queue of {len(items)} items")
    return items


def session_items(
    queue: list[QueueItem],
    session_size: int,
    new_item_ratio: float = DEFAULT_NEW_ITEM_RATIO,
) -> list[QueueItem]:
    """
    Pick a bounded session from a ranked queue.

    Takes floor(session_size * new_item_ratio) items from the new bucket (no
    mastery yet, or stage 0) and the remainder from the due bucket (has
    mastery and urgency > 0). An item that qualifies for both is taken once.
    The selection is re-sorted by final score; ties keep queue order.

    Raises:
        InvalidArgumentError: If session_size is negative or the ratio is
            outside [0, 1].
    """
    if session_size < 0:
        raise InvalidArgumentError(f"session_size must be >= 0, got {session_size}")
    if not math.isfinite(new_item_ratio) or not 0.0 <= new_item_ratio <= 1.0:
        raise InvalidArgumentError(f"new_item_ratio must be in [0, 1], got {new_item_ratio}")

    if session_size == 0 or not queue:
        return []

    max_new = math.floor(session_size * new_item_ratio)
    max_due = session_size - max_new

    due_bucket = [item for item in queue if item.urgency > 0 and item.has_mastery]
    new_bucket = [item for item in queue if item.is_new]

    picked: dict[str, QueueItem] = {}
    for item in due_bucket[:max_due] + new_bucket[:max_new]:
        picked.setdefault(item.object.id, item)

    position = {item.object.id: i for i, item in enumerate(queue)}
    selected = sorted(picked.values(), key=lambda item: position[item.object.id])
    selected.sort(key=lambda item: item.final_score, reverse=True)
    return selected[:session_size]


def analyze_queue(queue: list[QueueItem], now: datetime) -> QueueAnalysis:
    """Summarize queue composition: due, new, mean priority, kinds and stages."""
    if not queue:
        return QueueAnalysis()

    due = 0
    for item in queue:
        info = item.mastery_info
        if info is None or info.next_review is None or info.next_review <= now:
            due += 1

    stages = Counter(int(item.mastery_info.stage) if item.mastery_info else 0 for item in queue)

    return QueueAnalysis(
        total_items=len(queue),
        due_items=due,
        new_items=sum(1 for item in queue if item.is_new),
        average_priority=sum(item.priority for item in queue) / len(queue),
        kind_distribution=dict(Counter(item.object.kind for item in queue)),
        stage_distribution=dict(sorted(stages.items())),
    )

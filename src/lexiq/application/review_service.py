"""
Review Service: Application layer orchestrator.

Closes the learning loop: ingests responses into stored mastery snapshots and
builds sessions from the freshly updated due dates. Calls for one user must be
made sequentially; a response has to be saved before the next queue is built
from it.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from lexiq.application.mastery import apply_response, to_mastery_info
from lexiq.application.queue_builder import build_queue, session_items
from lexiq.domain.constants import DEFAULT_NEW_ITEM_RATIO, DEFAULT_SESSION_SIZE
from lexiq.domain.mastery.models import (
    DEFAULT_THRESHOLDS,
    MasteryState,
    MasteryUpdate,
    Response,
    StageThresholds,
)
from lexiq.domain.memory.models import DEFAULT_PARAMETERS, FsrsParameters
from lexiq.domain.ports import SnapshotRepository
from lexiq.domain.priority.models import LanguageObjectSignal, UserState
from lexiq.domain.queue.models import QueueItem

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service tying the memory model, mastery tracking and queue
    building to a snapshot store.

    Follows Dependency Inversion: depends on the SnapshotRepository abstraction,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        repo: SnapshotRepository,
        params: FsrsParameters | None = None,
        thresholds: StageThresholds | None = None,
    ):
        """
        Args:
            repo: The repository (port) holding mastery snapshots.
            params: Scheduler configuration; uses defaults if not provided.
            thresholds: Stage cut-offs; uses defaults if not provided.
        """
        self._repo = repo
        self.params = params or DEFAULT_PARAMETERS
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def get_state(self, user_id: str, object_id: str) -> MasteryState:
        """Stored snapshot, or a fresh stage-0 state if the object was never seen."""
        return self._repo.get(user_id, object_id) or MasteryState.initial()

    def record_response(
        self,
        user_id: str,
        object_id: str,
        response: Response,
        now: datetime,
    ) -> MasteryUpdate:
        """
        Apply one response and persist the resulting snapshot.

        Returns:
            The MasteryUpdate describing the rating and stage movement.
        """
        state = self.get_state(user_id, object_id)
        update = apply_response(state, response, now, self.params, self.thresholds)
        self._repo.save(user_id, object_id, update.current)

        if update.stage_changed:
            logger.info(
                f"{user_id}/{object_id}: stage {int(update.previous_stage)} -> "
                f"{int(update.new_stage)}"
            )
        return update

    def record_responses(
        self,
        user_id: str,
        responses: Iterable[tuple[str, Response, datetime]],
    ) -> list[MasteryUpdate]:
        """Apply a batch of (object_id, response, time) in order."""
        return [
            self.record_response(user_id, object_id, response, now)
            for object_id, response, now in responses
        ]

    def build_queue(
        self,
        user_id: str,
        objects: list[LanguageObjectSignal],
        user: UserState,
        now: datetime,
    ) -> list[QueueItem]:
        snapshots = self._repo.load_user(user_id)
        mastery_map = {
            oid: to_mastery_info(state, self.params) for oid, state in snapshots.items()
        }
        return build_queue(objects, user, mastery_map, now)

    def build_session(
        self,
        user_id: str,
        objects: list[LanguageObjectSignal],
        user: UserState,
        now: datetime,
        session_size: int = DEFAULT_SESSION_SIZE,
        new_item_ratio: float = DEFAULT_NEW_ITEM_RATIO,
    ) -> list[QueueItem]:
        """
        Rank the learner's objects and cut a bounded session from the ranking.
        """
        queue = self.build_queue(user_id, objects, user, now)
        return session_items(queue, session_size, new_item_ratio)

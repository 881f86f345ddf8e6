# Application Package
from .mastery import derive_stage, ingest_response, recommended_cue_level
from .priority import compute_priority
from .queue_builder import build_queue, compute_urgency, session_items
from .review_service import ReviewService
from .scheduler import FsrsScheduler, next_interval, next_review_date, retrievability, schedule

__all__ = [
    "FsrsScheduler",
    "ReviewService",
    "build_queue",
    "compute_priority",
    "compute_urgency",
    "derive_stage",
    "ingest_response",
    "next_interval",
    "next_review_date",
    "recommended_cue_level",
    "retrievability",
    "schedule",
    "session_items",
]

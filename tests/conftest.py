from datetime import datetime, timezone

import pytest

from lexiq.domain.mastery.models import MasteryStage
from lexiq.domain.priority.models import LanguageObjectSignal
from lexiq.domain.queue.models import MasteryInfo, QueueItem


@pytest.fixture
def t0():
    return datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir so no real config file or env leaks into tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in (
        "LEXIQ_SESSION_SIZE", "LEXIQ_NEW_ITEM_RATIO", "LEXIQ_STATE_DIR", "LEXIQ_FSRS_WEIGHTS"
    ):
        monkeypatch.delenv(key, raising=False)
    return home


def make_signal(oid: str, **overrides) -> LanguageObjectSignal:
    values = {
        "frequency": 0.5,
        "relational_density": 0.5,
        "contextual_contribution": 0.5,
        "irt_difficulty": 0.0,
    }
    values.update(overrides)
    return LanguageObjectSignal(id=oid, **values)


def make_item(
    oid: str,
    score: float,
    urgency: float = 0.0,
    stage: MasteryStage | None = None,
    next_review: datetime | None = None,
) -> QueueItem:
    info = None
    if stage is not None:
        info = MasteryInfo(stage=stage, next_review=next_review)
    return QueueItem(
        object=make_signal(oid),
        priority=score / (1 + urgency),
        urgency=urgency,
        final_score=score,
        mastery_info=info,
    )


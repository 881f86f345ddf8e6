"""Tests for urgency scoring and queue/session building."""

from datetime import timedelta

import pytest
from conftest import make_item, make_signal

from lexiq.application.priority import compute_priority
from lexiq.application.queue_builder import (
    analyze_queue,
    build_queue,
    compute_final_score,
    compute_urgency,
    session_items,
)
from lexiq.domain.errors import InvalidArgumentError
from lexiq.domain.mastery.models import MasteryStage
from lexiq.domain.priority.models import UserState
from lexiq.domain.queue.models import MasteryInfo


class TestUrgency:
    def test_new_item(self, t0):
        assert compute_urgency(None, t0) == 1.5

    def test_not_yet_due(self, t0):
        assert compute_urgency(t0 + timedelta(hours=1), t0) == 0.0

    def test_due_now(self, t0):
        assert compute_urgency(t0, t0) == 1.0

    def test_two_days_overdue(self, t0):
        assert compute_urgency(t0 - timedelta(days=2), t0) == pytest.approx(2.0)

    def test_capped(self, t0):
        assert compute_urgency(t0 - timedelta(days=30), t0) == 3.0


def test_final_score():
    assert compute_final_score(2.0, 1.5) == 5.0
    assert compute_final_score(2.0, 0.0) == 2.0


class TestBuildQueue:
    def test_sorted_descending(self, t0):
        signals = [make_signal(f"s{i}", frequency=i / 10) for i in range(5)]
        queue = build_queue(signals, UserState(), {}, t0)
        scores = [item.final_score for item in queue]
        assert scores == sorted(scores, reverse=True)
        assert len(queue) == 5

    def test_overdue_item_rises(self, t0):
        user = UserState()
        valuable = make_signal("valuable", frequency=0.9)
        overdue = make_signal("overdue", frequency=0.6)
        mastery = {
            "valuable": MasteryInfo(MasteryStage.RECALL, t0 + timedelta(days=5)),
            "overdue": MasteryInfo(MasteryStage.RECALL, t0 - timedelta(days=4)),
        }
        queue = build_queue([valuable, overdue], user, mastery, t0)

        assert [item.object.id for item in queue] == ["overdue", "valuable"]
        assert queue[0].urgency == 3.0
        assert queue[1].urgency == 0.0
        assert queue[0].mastery_info is mastery["overdue"]

    def test_unseen_item_gets_introduction_boost(self, t0):
        signal = make_signal("a")
        (item,) = build_queue([signal], UserState(), None, t0)
        assert item.urgency == 1.5
        assert item.mastery_info is None
        assert item.final_score == pytest.approx(compute_priority(signal, UserState()) * 2.5)

    def test_empty(self, t0):
        assert build_queue([], UserState(), {}, t0) == []

    def test_ties_keep_input_order(self, t0):
        signals = [make_signal(f"s{i}") for i in range(4)]
        queue = build_queue(signals, UserState(), {}, t0)
        assert [item.object.id for item in queue] == ["s0", "s1", "s2", "s3"]


class TestSessionItems:
    def _queue(self, t0, due_count, new_count):
        due = [
            make_item(f"due{i}", score=50.0 - i, urgency=2.0, stage=MasteryStage.RECALL,
                      next_review=t0 - timedelta(days=2))
            for i in range(due_count)
        ]
        new = [make_item(f"new{i}", score=40.0 - i, urgency=1.5) for i in range(new_count)]
        return sorted(due + new, key=lambda item: item.final_score, reverse=True)

    def test_few_due_items(self, t0):
        queue = self._queue(t0, due_count=5, new_count=20)
        session = session_items(queue, 10, 0.3)

        ids = [item.object.id for item in session]
        assert sum(1 for i in ids if i.startswith("new")) == 3
        assert sum(1 for i in ids if i.startswith("due")) == 5
        scores = [item.final_score for item in session]
        assert scores == sorted(scores, reverse=True)

    def test_full_split(self, t0):
        queue = self._queue(t0, due_count=12, new_count=20)
        session = session_items(queue, 10, 0.3)

        ids = [item.object.id for item in session]
        assert len(session) == 10
        assert ids.count("new0") == 1
        assert sum(1 for i in ids if i.startswith("new")) == 3
        assert sum(1 for i in ids if i.startswith("due")) == 7

    def test_not_due_seen_items_excluded(self, t0):
        queue = [
            make_item("later", score=90.0, urgency=0.0, stage=MasteryStage.CONTROLLED,
                      next_review=t0 + timedelta(days=3)),
            make_item("new", score=10.0, urgency=1.5),
        ]
        assert [item.object.id for item in session_items(queue, 5)] == ["new"]

    def test_stage_zero_due_item_taken_once(self, t0):
        both = make_item("both", score=30.0, urgency=2.0, stage=MasteryStage.UNKNOWN,
                         next_review=t0 - timedelta(days=2))
        session = session_items([both], 10, 0.5)
        assert [item.object.id for item in session] == ["both"]

    def test_ties_keep_queue_order(self, t0):
        queue = [make_item(f"n{i}", score=5.0, urgency=1.5) for i in range(4)]
        session = session_items(queue, 10, 1.0)
        assert [item.object.id for item in session] == ["n0", "n1", "n2", "n3"]

    def test_zero_ratio_takes_only_due(self, t0):
        queue = self._queue(t0, due_count=3, new_count=3)
        session = session_items(queue, 4, 0.0)
        assert all(item.object.id.startswith("due") for item in session)

    def test_empty_queue(self):
        assert session_items([], 10) == []

    def test_zero_size(self, t0):
        assert session_items(self._queue(t0, 2, 2), 0) == []

    def test_negative_size(self):
        with pytest.raises(InvalidArgumentError):
            session_items([], -1)

    @pytest.mark.parametrize("ratio", [-0.1, 1.5, float("nan")])
    def test_bad_ratio(self, ratio):
        with pytest.raises(InvalidArgumentError):
            session_items([], 5, ratio)


def test_analyze_queue(t0):
    queue = [
        make_item("a", 9.0, urgency=2.0, stage=MasteryStage.RECALL, next_review=t0 - timedelta(days=2)),
        make_item("b", 6.0, urgency=1.5),
        make_item("c", 3.0, urgency=0.0, stage=MasteryStage.CONTROLLED, next_review=t0 + timedelta(days=9)),
    ]
    analysis = analyze_queue(queue, t0)

    assert analysis.total_items == 3
    assert analysis.due_items == 2
    assert analysis.new_items == 1
    assert analysis.kind_distribution == {"word": 3}
    assert analysis.stage_distribution == {0: 1, 2: 1, 3: 1}
    assert analysis.average_priority == pytest.approx((3.0 + 6.0 / 2.5 + 3.0) / 3)


def test_analyze_empty_queue(t0):
    assert analyze_queue([], t0).total_items == 0

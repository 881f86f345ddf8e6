"""Tests for the FSRS memory model."""

import math
from datetime import timedelta

import pytest

from lexiq.application.scheduler import (
    FsrsScheduler,
    next_interval,
    next_review_date,
    preview,
    retrievability,
    schedule,
)
from lexiq.domain.errors import InvalidArgumentError
from lexiq.domain.memory.models import DEFAULT_PARAMETERS, Card, CardState, FsrsParameters, Rating

W = DEFAULT_PARAMETERS.w


class TestRetrievability:
    def test_never_reviewed_is_zero(self, t0):
        assert retrievability(Card.new(), t0) == 0.0

    def test_at_review_time_is_one(self, t0):
        card = Card(stability=5.0, last_review=t0, state=CardState.REVIEW)
        assert retrievability(card, t0) == 1.0

    def test_exponential_decay(self, t0):
        card = Card(stability=10.0, last_review=t0, state=CardState.REVIEW)
        assert retrievability(card, t0 + timedelta(days=1)) == pytest.approx(math.exp(-0.1))

    def test_strictly_decreasing(self, t0):
        card = Card(stability=3.0, last_review=t0, state=CardState.REVIEW)
        values = [retrievability(card, t0 + timedelta(days=d)) for d in range(0, 40, 3)]
        assert all(0 < v <= 1 for v in values)
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_zero_stability_uses_floor(self, t0):
        card = Card(stability=0.0, last_review=t0, state=CardState.REVIEW)
        r = retrievability(card, t0 + timedelta(days=0.1))
        assert r == pytest.approx(math.exp(-1.0))

    def test_future_review_counts_as_no_elapsed_time(self, t0):
        card = Card(stability=2.0, last_review=t0 + timedelta(hours=3), state=CardState.REVIEW)
        assert retrievability(card, t0) == 1.0


class TestScheduleFirstExposure:
    def test_good_on_new_card(self, t0):
        card = schedule(Card.new(), Rating.GOOD, t0)

        assert card.stability == W[2]
        assert card.difficulty == W[4]
        assert card.state is CardState.REVIEW
        assert card.last_review == t0
        assert card.reps == 1
        assert card.lapses == 0

    @pytest.mark.parametrize("rating", [1, 2, 3, 4])
    def test_initial_stability_per_rating(self, t0, rating):
        card = schedule(Card.new(), rating, t0)
        assert card.stability == W[rating - 1]

    def test_again_on_new_card_enters_learning(self, t0):
        card = schedule(Card.new(), Rating.AGAIN, t0)
        assert card.state is CardState.LEARNING
        assert card.lapses == 0
        assert card.difficulty == pytest.approx(min(10, W[4] + 2 * W[5]))

    def test_easy_lowers_initial_difficulty(self, t0):
        card = schedule(Card.new(), Rating.EASY, t0)
        assert card.difficulty == pytest.approx(W[4] - W[5])

    def test_card_without_last_review_is_treated_as_first(self, t0):
        odd = Card(stability=50.0, difficulty=9.0, state=CardState.REVIEW, reps=4)
        card = schedule(odd, Rating.GOOD, t0)
        assert card.stability == W[2]
        assert card.reps == 5

    def test_input_card_is_not_modified(self, t0):
        original = Card.new()
        schedule(original, Rating.GOOD, t0)
        assert original == Card.new()


class TestScheduleSubsequent:
    def test_good_then_again_ten_days_later(self, t0):
        first = schedule(Card.new(), Rating.GOOD, t0)
        second = schedule(first, Rating.AGAIN, t0 + timedelta(days=10))

        assert second.state is CardState.RELEARNING
        assert second.lapses == 1
        assert second.reps == 2
        assert second.stability < first.stability

    def test_again_formula(self, t0):
        first = schedule(Card.new(), Rating.GOOD, t0)
        second = schedule(first, Rating.AGAIN, t0 + timedelta(days=10))

        d = min(10.0, max(1.0, W[4] - W[6] * (1 - 3)))
        expected = W[11] * d ** (-W[12]) * ((first.stability + 1) ** W[13] - 1)
        assert second.difficulty == pytest.approx(d)
        assert second.stability == pytest.approx(max(0.1, expected))

    def test_good_review_formula(self, t0):
        first = schedule(Card.new(), Rating.GOOD, t0)
        later = t0 + timedelta(days=10)
        second = schedule(first, Rating.GOOD, later)

        r = math.exp(-10 / first.stability)
        d = first.difficulty
        growth = (
            math.exp(W[8]) * (11 - d) * first.stability ** (-W[9]) * (math.exp((1 - r) * W[10]) - 1)
        )
        assert second.stability == pytest.approx(first.stability * (1 + growth))
        assert second.state is CardState.REVIEW
        assert second.stability > first.stability

    def test_hard_and_easy_modifiers_order_stability(self, t0):
        first = schedule(Card.new(), Rating.GOOD, t0)
        later = t0 + timedelta(days=5)
        hard = schedule(first, Rating.HARD, later)
        good = schedule(first, Rating.GOOD, later)
        easy = schedule(first, Rating.EASY, later)
        assert hard.stability < good.stability < easy.stability

    def test_difficulty_moves_with_rating(self, t0):
        first = schedule(Card.new(), Rating.GOOD, t0)
        later = t0 + timedelta(days=3)
        assert schedule(first, Rating.HARD, later).difficulty == pytest.approx(W[4] + W[6])
        assert schedule(first, Rating.EASY, later).difficulty == pytest.approx(W[4] - W[6])

    def test_zero_stability_does_not_blow_up(self, t0):
        card = Card(stability=0.0, difficulty=5.0, last_review=t0, state=CardState.REVIEW)
        result = schedule(card, Rating.GOOD, t0 + timedelta(days=1))
        assert math.isfinite(result.stability)
        assert result.stability >= 0.1

    @pytest.mark.parametrize("rating", [1, 2, 3, 4])
    @pytest.mark.parametrize("difficulty", [1.0, 5.5, 10.0])
    @pytest.mark.parametrize("stability", [0.0, 0.1, 3.0, 400.0])
    @pytest.mark.parametrize("days", [0, 1, 30, 3000])
    def test_bounds_hold(self, t0, rating, difficulty, stability, days):
        card = Card(
            difficulty=difficulty, stability=stability, last_review=t0, state=CardState.REVIEW
        )
        result = schedule(card, rating, t0 + timedelta(days=days))
        assert 1.0 <= result.difficulty <= 10.0
        assert result.stability > 0
        assert math.isfinite(result.stability)

    @pytest.mark.parametrize("rating", [0, 5, 3.5])
    def test_invalid_rating_fails_fast(self, t0, rating):
        with pytest.raises(InvalidArgumentError):
            schedule(Card.new(), rating, t0)

    def test_deterministic(self, t0):
        card = schedule(Card.new(), Rating.HARD, t0)
        later = t0 + timedelta(days=2, hours=5)
        assert schedule(card, Rating.EASY, later) == schedule(card, Rating.EASY, later)


class TestIntervals:
    def test_interval_equals_stability_at_ninety_percent(self):
        assert next_interval(12.4) == 12

    def test_interval_floor_is_one_day(self):
        assert next_interval(0.1) == 1

    def test_interval_capped(self):
        params = FsrsParameters(maximum_interval=365)
        assert next_interval(10_000.0, params) == 365

    def test_higher_retention_shortens_interval(self):
        strict = FsrsParameters(request_retention=0.95)
        assert next_interval(100.0, strict) < next_interval(100.0)

    def test_next_review_date_for_new_card_is_now(self, t0):
        assert next_review_date(Card.new(), now=t0) == t0

    def test_next_review_date(self, t0):
        card = schedule(Card.new(), Rating.GOOD, t0)
        assert next_review_date(card) == t0 + timedelta(days=2)


def test_preview_covers_all_ratings(t0):
    card = schedule(Card.new(), Rating.GOOD, t0)
    options = preview(card, t0 + timedelta(days=4))
    assert set(options) == set(Rating)
    assert options[Rating.AGAIN].state is CardState.RELEARNING
    assert options[Rating.AGAIN].stability < options[Rating.EASY].stability


def test_scheduler_uses_its_parameters(t0):
    custom = FsrsParameters(w=W[:2] + (7.0,) + W[3:])
    scheduler = FsrsScheduler(custom)
    card = scheduler.schedule(Card.new(), Rating.GOOD, t0)
    assert card.stability == 7.0
    assert scheduler.next_interval(card.stability) == 7
    assert scheduler.next_review_date(card) == t0 + timedelta(days=7)
